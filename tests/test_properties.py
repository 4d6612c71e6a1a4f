# -*- coding: utf-8 -*-
"""归并与拆分的性质测试（固定随机种子）"""

import random

import pytest

from cidr_wash.address import AddressValue, Family
from cidr_wash.block import CidrBlock
from cidr_wash.decompose import decompose
from cidr_wash.parser import parse_line
from cidr_wash.reduce import reduce

SEEDS = range(20)


def random_blocks(rng, family, count, base, span_bits):
    """在 base 起的 2**span_bits 个地址内随机生成网段"""
    width = family.width
    items = []
    for _ in range(count):
        prefix_len = rng.randint(width - span_bits, width)
        offset = rng.randrange(1 << span_bits)
        items.append(CidrBlock.from_address(AddressValue(family, base + offset), prefix_len))
    return items


def intervals(blocks):
    """网段覆盖的地址并集，表示为合并后的闭区间列表"""
    merged = []
    for first, last in sorted((block.first, block.last) for block in blocks):
        if merged and first <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], last)
        else:
            merged.append([first, last])
    return merged


CASES = [
    (Family.IPV4, 0x0A000000, 10),
    (Family.IPV6, 0x20010DB8 << 96, 12),
    # ::ffff:0:0/96
    (Family.IPV6, 0xFFFF << 32, 12),
]


@pytest.mark.parametrize("family,base,span_bits", CASES)
@pytest.mark.parametrize("seed", SEEDS)
class TestReduceProperties:

    def setup_method(self):
        self.rng = None

    def _reduced(self, seed, family, base, span_bits):
        self.rng = random.Random(seed)
        inputs = random_blocks(self.rng, family, self.rng.randint(1, 60), base, span_bits)
        return inputs, reduce(inputs)

    def test_idempotent(self, seed, family, base, span_bits):
        _, output = self._reduced(seed, family, base, span_bits)
        assert reduce(output) == output

    def test_coverage_preserved(self, seed, family, base, span_bits):
        inputs, output = self._reduced(seed, family, base, span_bits)
        assert intervals(output) == intervals(inputs)

    def test_no_overlap_or_siblings(self, seed, family, base, span_bits):
        _, output = self._reduced(seed, family, base, span_bits)
        for i, a in enumerate(output):
            for b in output[i + 1:]:
                assert not a.contains(b) and not b.contains(a)
                assert not a.is_sibling(b)

    def test_sorted_output(self, seed, family, base, span_bits):
        _, output = self._reduced(seed, family, base, span_bits)
        assert all(a.last < b.first for a, b in zip(output, output[1:]))

    def test_input_order_does_not_matter(self, seed, family, base, span_bits):
        inputs, output = self._reduced(seed, family, base, span_bits)
        shuffled = list(inputs)
        self.rng.shuffle(shuffled)
        assert reduce(shuffled) == output


@pytest.mark.parametrize("family,base,span_bits", CASES)
@pytest.mark.parametrize("seed", SEEDS)
def test_decompose_covers_exactly(seed, family, base, span_bits):
    rng = random.Random(seed)
    start = base + rng.randrange(1 << span_bits)
    end = start + rng.randrange(1 << span_bits)
    blocks = decompose(AddressValue(family, start), AddressValue(family, end))

    assert blocks[0].first == start
    assert blocks[-1].last == end
    for a, b in zip(blocks, blocks[1:]):
        assert a.last + 1 == b.first
    assert len(blocks) <= 2 * family.width
    # 拆分结果已是最少网段，归并不会再减少
    assert reduce(blocks) == blocks


@pytest.mark.parametrize("family,base,span_bits", CASES)
def test_decompose_single_address(family, base, span_bits):
    address = AddressValue(family, base + 5)
    blocks = decompose(address, address)
    assert len(blocks) == 1
    assert blocks[0].prefix_len == family.width


@pytest.mark.parametrize("family,base,span_bits", CASES)
@pytest.mark.parametrize("seed", SEEDS)
def test_text_round_trip(seed, family, base, span_bits):
    rng = random.Random(seed)
    for block in random_blocks(rng, family, 10, base, span_bits):
        assert parse_line(block.to_text()) == [block]
