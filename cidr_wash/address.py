# -*- coding: utf-8 -*-
"""
地址值：定长无符号整数形式的 IPv4 / IPv6 地址

地址文本的解析与规范化输出交给标准库 ipaddress，
掩码、对齐等位运算全部在 Python int 上完成，128 位也不会丢失精度。
"""

import enum
import ipaddress
from dataclasses import dataclass

from .errors import MalformedAddress


class Family(enum.Enum):
    """地址族"""

    IPV4 = 4
    IPV6 = 6

    @property
    def width(self) -> int:
        """地址位宽"""
        return 32 if self is Family.IPV4 else 128

    @property
    def byte_length(self) -> int:
        return self.width // 8

    @property
    def max_value(self) -> int:
        return (1 << self.width) - 1

    @classmethod
    def from_byte_length(cls, length: int) -> "Family":
        if length == 4:
            return cls.IPV4
        if length == 16:
            return cls.IPV6
        raise MalformedAddress(f"地址字节长度必须为 4 或 16，实际为 {length}")


def prefix_mask(prefix_len: int, width: int) -> int:
    """返回高 prefix_len 位为 1 的掩码"""
    if not 0 <= prefix_len <= width:
        raise ValueError(f"前缀长度 {prefix_len} 超出 [0, {width}]")
    return ((1 << prefix_len) - 1) << (width - prefix_len)


def is_contiguous_mask(value: int, width: int) -> bool:
    """
    判断掩码是否为连续的 1 后接连续的 0（自高位向低位）

    例如 255.255.255.0 连续，255.255.254.1 不连续。
    """
    inverted = ~value & ((1 << width) - 1)
    # 取反后必须是形如 0...011...1 的值
    return inverted & (inverted + 1) == 0


def mask_prefix_len(value: int, width: int) -> int:
    """连续掩码对应的前缀长度（1 位的个数）"""
    return bin(value & ((1 << width) - 1)).count("1")


@dataclass(frozen=True)
class AddressValue:
    """
    单个地址

    Attributes:
        family: 地址族
        value: 地址的无符号整数值（大端序字节解释）
    """

    family: Family
    value: int

    def __post_init__(self):
        if not 0 <= self.value <= self.family.max_value:
            raise ValueError(f"地址值 {self.value} 超出 {self.family.name} 范围")

    @classmethod
    def from_bytes(cls, data: bytes) -> "AddressValue":
        """
        由大端序原始字节构造地址

        Args:
            data: 4 字节（IPv4）或 16 字节（IPv6）

        Raises:
            MalformedAddress: 字节长度不是 4 或 16
        """
        family = Family.from_byte_length(len(data))
        return cls(family, int.from_bytes(data, "big"))

    @classmethod
    def from_text(cls, text: str) -> "AddressValue":
        """
        解析地址文本

        Raises:
            MalformedAddress: 文本不是合法的 IPv4 / IPv6 地址
        """
        text = text.strip()
        if not text or "%" in text:
            raise MalformedAddress("无效的IP地址", text)
        try:
            address = ipaddress.ip_address(text)
        except ValueError:
            raise MalformedAddress("无效的IP地址", text) from None
        return cls.from_ipaddress(address)

    @classmethod
    def from_ipaddress(cls, address) -> "AddressValue":
        family = Family.IPV4 if address.version == 4 else Family.IPV6
        return cls(family, int(address))

    @property
    def width(self) -> int:
        return self.family.width

    @property
    def packed(self) -> bytes:
        """大端序字节表示"""
        return self.value.to_bytes(self.family.byte_length, "big")

    def to_ipaddress(self):
        if self.family is Family.IPV4:
            return ipaddress.IPv4Address(self.value)
        return ipaddress.IPv6Address(self.value)

    def to_text(self) -> str:
        """最短标准文本形式（IPv6 使用零压缩）"""
        return str(self.to_ipaddress())

    def mask_to(self, prefix_len: int) -> "AddressValue":
        """清除第 prefix_len 位（自最高位起计）及其后的所有位"""
        return AddressValue(self.family, self.value & prefix_mask(prefix_len, self.width))

    def trailing_zero_bits(self) -> int:
        """自最低位起连续 0 位的个数，零地址返回位宽"""
        if self.value == 0:
            return self.width
        return (self.value & -self.value).bit_length() - 1

    def _check_family(self, other: "AddressValue"):
        if self.family is not other.family:
            raise ValueError("不能比较不同地址族的地址")

    def __lt__(self, other: "AddressValue") -> bool:
        self._check_family(other)
        return self.value < other.value

    def __le__(self, other: "AddressValue") -> bool:
        self._check_family(other)
        return self.value <= other.value

    def __gt__(self, other: "AddressValue") -> bool:
        self._check_family(other)
        return self.value > other.value

    def __ge__(self, other: "AddressValue") -> bool:
        self._check_family(other)
        return self.value >= other.value

    def __str__(self):
        return self.to_text()


def compare(a: AddressValue, b: AddressValue) -> int:
    """按无符号整数比较两个同族地址，返回 -1 / 0 / 1"""
    a._check_family(b)
    return (a.value > b.value) - (a.value < b.value)
