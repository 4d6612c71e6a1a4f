# -*- coding: utf-8 -*-
"""
解析错误类型

每一种错误只影响当前输入行，由命令行外壳按行号汇报并跳过，
不会中断整个处理流程。
"""


class ParseError(Exception):
    """单行解析失败的基类"""

    code = "ParseError"

    def __init__(self, message: str, text: str = ""):
        """
        Args:
            message: 错误描述
            text: 引起错误的原始输入
        """
        super().__init__(message)
        self.message = message
        self.text = text

    def __str__(self):
        if self.text:
            return f"{self.message}: {self.text!r}"
        return self.message


class MalformedAddress(ParseError):
    """无法解析为 IP 地址"""

    code = "MalformedAddress"


class MalformedCidr(ParseError):
    """无法解析为 CIDR，或前缀长度超出范围"""

    code = "MalformedCidr"


class WildcardNotTrailing(ParseError):
    """通配符后面出现了非通配符部分"""

    code = "WildcardNotTrailing"


class WildcardSegmentCountInvalid(ParseError):
    """通配符写法的段数不正确"""

    code = "WildcardSegmentCountInvalid"


class RangeReversed(ParseError):
    """范围起始地址大于结束地址"""

    code = "RangeReversed"


class RangeFamilyMismatch(ParseError):
    """范围两端（或地址与掩码）不属于同一地址族"""

    code = "RangeFamilyMismatch"


class ShortRangeOctetInvalid(ParseError):
    """短范围的结束八位组不是 0-255 的整数"""

    code = "ShortRangeOctetInvalid"


class NonContiguousMask(ParseError):
    """子网掩码不是连续的 1 后接连续的 0"""

    code = "NonContiguousMask"
