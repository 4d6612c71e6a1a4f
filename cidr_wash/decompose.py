# -*- coding: utf-8 -*-
"""地址范围拆分为最少的 CIDR 网段"""

import logging
from typing import List

from .address import AddressValue
from .block import CidrBlock
from .errors import RangeFamilyMismatch, RangeReversed

logger = logging.getLogger(__name__)


def decompose(start: AddressValue, end: AddressValue) -> List[CidrBlock]:
    """
    将闭区间 [start, end] 拆分为恰好覆盖它的最少 CIDR 网段

    贪心算法：每一步取当前位置允许的最大对齐网段，且不越过 end。
    结果按网络地址严格递增。

    Args:
        start: 起始地址
        end: 结束地址（包含）

    Returns:
        list: CidrBlock 列表

    Raises:
        RangeFamilyMismatch: 两端地址族不同
        RangeReversed: start 大于 end
    """
    if start.family is not end.family:
        raise RangeFamilyMismatch(f"范围两端地址族不同: {start} - {end}")
    if start.value > end.value:
        raise RangeReversed(f"范围起始地址大于结束地址: {start} - {end}")

    family = start.family
    width = family.width
    cursor = start.value
    blocks = []

    while cursor <= end.value:
        current = AddressValue(family, cursor)
        size = current.trailing_zero_bits()
        remaining = end.value - cursor + 1
        while size > 0 and (1 << size) > remaining:
            size -= 1

        blocks.append(CidrBlock(family, current, width - size))
        cursor += 1 << size

    logger.debug("范围 %s - %s 拆分为 %d 个网段", start, end, len(blocks))
    return blocks
