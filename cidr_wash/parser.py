# -*- coding: utf-8 -*-
"""
输入行解析

支持的写法:
  - 标准CIDR: 192.168.1.0/24、2001:db8::/32
  - 单IP: 192.168.1.1（视为 /32 或 /128）
  - 通配符: 192.168.1.*、2001:db8::*
  - 完整范围: 192.168.1.1-192.168.1.255、2001:db8::1-2001:db8::ff
  - 短范围: 192.168.1.0-255（仅替换最后一个八位组）
  - 子网掩码: 192.168.1.0 255.255.255.0
  - 注释: 以 # 或 ; 开头的行，以及行内 # / ; 之后的内容
"""

import re
from typing import List

from .address import AddressValue, Family, is_contiguous_mask, mask_prefix_len
from .block import CidrBlock
from .decompose import decompose
from .errors import (
    MalformedAddress,
    MalformedCidr,
    NonContiguousMask,
    RangeFamilyMismatch,
    RangeReversed,
    ShortRangeOctetInvalid,
    WildcardNotTrailing,
    WildcardSegmentCountInvalid,
)

COMMENT_RE = re.compile(r"[#;]")
PREFIX_RE = re.compile(r"[0-9]{1,3}")
OCTET_RE = re.compile(r"[0-9]{1,3}")


def strip_comment(text: str) -> str:
    """去掉行内注释和首尾空白"""
    match = COMMENT_RE.search(text)
    if match:
        text = text[:match.start()]
    return text.strip()


def parse_line(text: str) -> List[CidrBlock]:
    """
    解析一行输入

    Args:
        text: 单行文本（不含换行符亦可）

    Returns:
        list: CidrBlock 列表；空行和注释行返回空列表

    Raises:
        ParseError: 该行无法解析，不会返回部分结果
    """
    line = strip_comment(text)
    if not line:
        return []

    tokens = line.split()

    # 子网掩码写法: "地址 掩码"
    if len(tokens) == 2 and not any(c in tokens[0] for c in "/-*"):
        return [parse_netmask(tokens[0], tokens[1])]

    # 其余写法只看第一个字段
    token = tokens[0]

    if "*" in token:
        return [parse_wildcard(token)]

    if "-" in token:
        return parse_range(token)

    return [parse_cidr(token)]


def parse_cidr(text: str) -> CidrBlock:
    """
    解析 CIDR 或单个地址，缺省前缀为地址位宽

    主机位不为 0 时按所在网络处理，例如 192.168.1.5/24 -> 192.168.1.0/24。
    ::ffff:a.b.c.d 形式按 IPv6 处理，与范围、子网掩码写法一致。

    Raises:
        MalformedCidr: 地址无效或前缀长度超出范围
    """
    addr_text, sep, prefix_text = text.partition("/")
    try:
        address = AddressValue.from_text(addr_text)
    except MalformedAddress:
        raise MalformedCidr("无效的CIDR", text) from None

    width = address.width
    if sep:
        if not PREFIX_RE.fullmatch(prefix_text):
            raise MalformedCidr("无效的前缀长度", text)
        prefix_len = int(prefix_text)
        if prefix_len > width:
            raise MalformedCidr(f"前缀长度超出 [0, {width}]", text)
    else:
        prefix_len = width

    return CidrBlock.from_address(address, prefix_len)


def parse_wildcard(text: str) -> CidrBlock:
    """
    解析通配符写法

    示例:
      - 192.168.1.* -> 192.168.1.0/24
      - 10.*.*.*    -> 10.0.0.0/8
      - 2001:db8::* -> 2001:db8::/32
    """
    if ":" in text:
        return _parse_ipv6_wildcard(text)

    parts = text.split(".")
    if len(parts) != 4:
        raise WildcardSegmentCountInvalid("IPv4通配符必须包含4个八位组", text)

    first_wildcard = None
    for i, part in enumerate(parts):
        if part == "*":
            if first_wildcard is None:
                first_wildcard = i
        elif "*" in part:
            raise WildcardSegmentCountInvalid("通配符必须单独占据一个八位组", text)
        elif first_wildcard is not None:
            raise WildcardNotTrailing("通配符之后只能是通配符", text)

    if first_wildcard is None:
        raise WildcardSegmentCountInvalid("未找到通配符", text)

    base_text = ".".join(parts[:first_wildcard] + ["0"] * (4 - first_wildcard))
    address = AddressValue.from_text(base_text)
    return CidrBlock.from_address(address, 8 * first_wildcard)


def _parse_ipv6_wildcard(text: str) -> CidrBlock:
    """
    IPv6 通配符，* 必须位于末尾，代表其后的所有位

    只接受 "前缀::*" 与 "a:b:c:*" 两种形式，其余一律报错。
    """
    if not text.endswith("*") or "*" in text[:-1]:
        raise WildcardNotTrailing("IPv6通配符必须位于末尾", text)

    body = text[:-1]
    if "::" in body:
        head, _, tail = body.partition("::")
        if tail:
            raise WildcardSegmentCountInvalid("'::' 之后不能再有地址段", text)
        segments = head.split(":") if head else []
    else:
        if not body.endswith(":"):
            raise WildcardSegmentCountInvalid("通配符前必须是 ':' 或 '::'", text)
        segments = body[:-1].split(":")

    if "" in segments or len(segments) > 8:
        raise WildcardSegmentCountInvalid("IPv6通配符地址段数不正确", text)

    if len(segments) == 8:
        base_text = ":".join(segments)
    else:
        base_text = ":".join(segments) + "::"
    address = AddressValue.from_text(base_text)
    return CidrBlock.from_address(address, 16 * len(segments))


def parse_range(text: str) -> List[CidrBlock]:
    """
    解析范围写法，按最后一个 '-' 切分

    起始端不含 ':' 且结束端既不含 '.' 也不含 ':' 时视为短范围，否则为完整范围。
    """
    start_text, _, end_text = text.rpartition("-")

    if ":" not in start_text and not any(c in end_text for c in ".:"):
        return parse_short_range(start_text, end_text)

    start = AddressValue.from_text(start_text)
    end = AddressValue.from_text(end_text)
    return _decompose_checked(start, end, text)


def parse_short_range(start_text: str, octet_text: str) -> List[CidrBlock]:
    """
    短范围: 192.168.1.0-255 表示 192.168.1.0 到 192.168.1.255

    Raises:
        MalformedAddress: 起始地址无效或不是 IPv4
        ShortRangeOctetInvalid: 结束八位组不是 0-255 的整数
    """
    text = f"{start_text}-{octet_text}"
    start = AddressValue.from_text(start_text)
    if start.family is not Family.IPV4:
        raise MalformedAddress("短范围仅支持IPv4", text)

    if not OCTET_RE.fullmatch(octet_text) or int(octet_text) > 255:
        raise ShortRangeOctetInvalid("短范围结束八位组必须是0-255的整数", text)

    end = AddressValue(Family.IPV4, (start.value & ~0xFF) | int(octet_text))
    return _decompose_checked(start, end, text)


def parse_netmask(addr_text: str, mask_text: str) -> CidrBlock:
    """
    子网掩码写法: 192.168.1.0 255.255.255.0 -> 192.168.1.0/24

    Raises:
        MalformedAddress: 地址或掩码无效
        RangeFamilyMismatch: 地址与掩码不属于同一地址族
        NonContiguousMask: 掩码不连续
    """
    address = AddressValue.from_text(addr_text)
    mask = AddressValue.from_text(mask_text)
    text = f"{addr_text} {mask_text}"

    if address.family is not mask.family:
        raise RangeFamilyMismatch("地址与掩码的地址族不同", text)
    if not is_contiguous_mask(mask.value, mask.width):
        raise NonContiguousMask("子网掩码不连续", text)

    return CidrBlock.from_address(address, mask_prefix_len(mask.value, mask.width))


def _decompose_checked(start: AddressValue, end: AddressValue, text: str) -> List[CidrBlock]:
    if start.family is not end.family:
        raise RangeFamilyMismatch("范围两端的地址族不同", text)
    if start.value > end.value:
        raise RangeReversed("范围起始地址大于结束地址", text)
    return decompose(start, end)
