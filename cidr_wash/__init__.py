# -*- coding: utf-8 -*-
"""
cidr-wash: 将黑名单/白名单中的各种IP写法归并为最少的CIDR网段
"""

from .address import AddressValue, Family, compare
from .block import CidrBlock
from .decompose import decompose
from .errors import (
    MalformedAddress,
    MalformedCidr,
    NonContiguousMask,
    ParseError,
    RangeFamilyMismatch,
    RangeReversed,
    ShortRangeOctetInvalid,
    WildcardNotTrailing,
    WildcardSegmentCountInvalid,
)
from .parser import parse_line
from .reduce import reduce, reduce_all

__version__ = "1.0.0"

__all__ = [
    "AddressValue",
    "CidrBlock",
    "Family",
    "MalformedAddress",
    "MalformedCidr",
    "NonContiguousMask",
    "ParseError",
    "RangeFamilyMismatch",
    "RangeReversed",
    "ShortRangeOctetInvalid",
    "WildcardNotTrailing",
    "WildcardSegmentCountInvalid",
    "compare",
    "decompose",
    "parse_line",
    "reduce",
    "reduce_all",
]
