# -*- coding: utf-8 -*-
"""
网段归并流程

A. 排序：网络地址升序，同地址时前缀短（大网段）的在前
B. 去除被包含的网段
C. 反复合并相邻的兄弟网段，直到一轮中没有任何合并

每个阶段都返回新的列表，不修改输入。IPv4 与 IPv6 分别处理，互不比较。
"""

import logging
from typing import Iterable, List, Tuple

from .address import Family
from .block import CidrBlock

logger = logging.getLogger(__name__)


def sort_blocks(blocks: Iterable[CidrBlock]) -> List[CidrBlock]:
    """按 (网络地址, 前缀长度) 升序排序"""
    return sorted(blocks, key=lambda block: block.sort_key)


def remove_contained(blocks: List[CidrBlock]) -> List[CidrBlock]:
    """
    去除被前一个保留网段包含的网段

    输入必须已经排序；包含者总是出现在被包含者之前。
    """
    result = []
    for block in blocks:
        if result and result[-1].contains(block):
            continue
        result.append(block)
    return result


def merge_pass(blocks: List[CidrBlock]) -> Tuple[List[CidrBlock], int]:
    """
    一轮合并：从左到右两两检查相邻网段，兄弟网段合并为父网段

    Returns:
        tuple: (新的网段列表, 本轮合并次数)
    """
    result = []
    merged = 0
    i = 0
    while i < len(blocks):
        if i + 1 < len(blocks) and blocks[i].is_sibling(blocks[i + 1]):
            result.append(blocks[i].parent())
            merged += 1
            i += 2
        else:
            result.append(blocks[i])
            i += 1
    return result, merged


def aggregate(blocks: List[CidrBlock]) -> List[CidrBlock]:
    """
    反复合并直到没有可合并的兄弟网段

    合并后重新排序，新生成的父网段可能与原本不相邻的网段成为邻居。
    """
    passes = 0
    while True:
        blocks, merged = merge_pass(blocks)
        passes += 1
        if not merged:
            break
        logger.debug("第 %d 轮合并了 %d 对网段，剩余 %d 个", passes, merged, len(blocks))
        blocks = sort_blocks(blocks)
    return blocks


def reduce(blocks: Iterable[CidrBlock]) -> List[CidrBlock]:
    """
    将同一地址族的网段归并为最少且互不重叠的网段集合

    Raises:
        ValueError: 输入混合了不同地址族
    """
    blocks = list(blocks)
    if not blocks:
        return []
    families = {block.family for block in blocks}
    if len(families) > 1:
        raise ValueError("reduce() 只接受同一地址族的网段，请使用 reduce_all()")

    sorted_blocks = sort_blocks(blocks)
    kept = remove_contained(sorted_blocks)
    logger.debug("去除包含关系: %d -> %d", len(sorted_blocks), len(kept))
    return aggregate(kept)


def split_by_family(blocks: Iterable[CidrBlock]) -> Tuple[List[CidrBlock], List[CidrBlock]]:
    """按地址族拆分，返回 (IPv4 列表, IPv6 列表)"""
    ipv4, ipv6 = [], []
    for block in blocks:
        if block.family is Family.IPV4:
            ipv4.append(block)
        else:
            ipv6.append(block)
    return ipv4, ipv6


def reduce_all(blocks: Iterable[CidrBlock]) -> List[CidrBlock]:
    """分别归并 IPv4 与 IPv6，结果中 IPv4 在前"""
    ipv4, ipv6 = split_by_family(blocks)
    return reduce(ipv4) + reduce(ipv6)


def covers(blocks: Iterable[CidrBlock]) -> int:
    """网段覆盖的地址总数（输入须互不重叠）"""
    return sum(block.num_addresses for block in blocks)
