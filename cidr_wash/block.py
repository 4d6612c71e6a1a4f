# -*- coding: utf-8 -*-
"""CIDR 网段：地址族 + 已掩码的网络地址 + 前缀长度"""

from dataclasses import dataclass
from typing import Tuple

from .address import AddressValue, Family


@dataclass(frozen=True)
class CidrBlock:
    """
    CIDR 网段

    不变式：base 超出 prefix_len 的位全部为 0。
    构造后不再修改，合并时生成新的网段。
    """

    family: Family
    base: AddressValue
    prefix_len: int

    def __post_init__(self):
        if self.base.family is not self.family:
            raise ValueError("网络地址与网段的地址族不一致")
        if not 0 <= self.prefix_len <= self.family.width:
            raise ValueError(f"前缀长度 {self.prefix_len} 超出 [0, {self.family.width}]")
        if self.base.mask_to(self.prefix_len) != self.base:
            raise ValueError(f"{self.base}/{self.prefix_len} 的主机位不为 0")

    @classmethod
    def from_address(cls, address: AddressValue, prefix_len: int) -> "CidrBlock":
        """
        由任意地址和前缀长度构造网段，地址会先被掩码到自身网络

        所有写法的解析最终都经由这里构造网段。
        """
        return cls(address.family, address.mask_to(prefix_len), prefix_len)

    @property
    def width(self) -> int:
        return self.family.width

    @property
    def num_addresses(self) -> int:
        return 1 << (self.width - self.prefix_len)

    @property
    def first(self) -> int:
        return self.base.value

    @property
    def last(self) -> int:
        return self.base.value + self.num_addresses - 1

    @property
    def sort_key(self) -> Tuple[int, int]:
        """排序键：网络地址升序，同地址时大网段（前缀短）在前"""
        return (self.base.value, self.prefix_len)

    def contains(self, other: "CidrBlock") -> bool:
        """本网段是否完全包含 other"""
        if self.family is not other.family or self.prefix_len > other.prefix_len:
            return False
        return other.base.mask_to(self.prefix_len) == self.base

    def is_sibling(self, other: "CidrBlock") -> bool:
        """两个网段是否为同一父网段的两半（相同网段也视为可合并）"""
        if self.family is not other.family or self.prefix_len != other.prefix_len:
            return False
        if self.prefix_len == 0:
            return False
        parent_len = self.prefix_len - 1
        return self.base.mask_to(parent_len) == other.base.mask_to(parent_len)

    def parent(self) -> "CidrBlock":
        """父网段（前缀长度减 1）"""
        if self.prefix_len == 0:
            raise ValueError("/0 网段没有父网段")
        return CidrBlock.from_address(self.base, self.prefix_len - 1)

    def to_text(self) -> str:
        return f"{self.base.to_text()}/{self.prefix_len}"

    def __str__(self):
        return self.to_text()
