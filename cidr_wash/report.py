# -*- coding: utf-8 -*-
"""
处理结果、统计信息与报告导出

报告默认保存为 Excel（openpyxl 引擎），超出 Excel 行数限制或
文件名以 .csv 结尾时保存为 CSV。
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

import pandas as pd

from .address import Family
from .block import CidrBlock
from .errors import ParseError

logger = logging.getLogger(__name__)

# Excel行数限制（含表头）
EXCEL_MAX_ROWS = 1048576

BLOCK_COLUMNS = ["family", "network", "prefix_len", "addresses"]
ERROR_COLUMNS = ["line", "code", "message", "text"]


@dataclass
class LineError:
    """某一输入行的解析错误"""

    line_number: int
    text: str
    error: ParseError

    def __str__(self):
        return f"第{self.line_number}行: {self.error}"


@dataclass
class Statistics:
    """处理统计"""

    lines_read: int = 0
    skipped_lines: int = 0
    invalid_lines: int = 0
    parsed_ipv4: int = 0
    parsed_ipv6: int = 0
    output_ipv4: int = 0
    output_ipv6: int = 0
    addresses_ipv4: int = 0
    addresses_ipv6: int = 0

    @property
    def parsed_total(self) -> int:
        return self.parsed_ipv4 + self.parsed_ipv6

    @property
    def output_total(self) -> int:
        return self.output_ipv4 + self.output_ipv6

    @property
    def compression_ratio(self) -> float:
        if not self.output_total:
            return 1.0
        return self.parsed_total / self.output_total

    def as_dict(self) -> Dict[str, object]:
        return {
            "lines_read": self.lines_read,
            "skipped_lines": self.skipped_lines,
            "invalid_lines": self.invalid_lines,
            "parsed_ipv4": self.parsed_ipv4,
            "parsed_ipv6": self.parsed_ipv6,
            "output_ipv4": self.output_ipv4,
            "output_ipv6": self.output_ipv6,
            "addresses_ipv4": self.addresses_ipv4,
            "addresses_ipv6": self.addresses_ipv6,
            "compression_ratio": round(self.compression_ratio, 2),
        }


@dataclass
class RunResult:
    """一次处理的结果：归并后的网段、无效行和统计"""

    blocks: List[CidrBlock] = field(default_factory=list)
    errors: List[LineError] = field(default_factory=list)
    statistics: Statistics = field(default_factory=Statistics)


def log_statistics(statistics: Statistics):
    """打印统计信息"""
    logger.info("=" * 60)
    logger.info("CIDR归并统计结果:")
    logger.info("=" * 60)
    logger.info("读取行数:       %d（空行/注释 %d，无效 %d）",
                statistics.lines_read, statistics.skipped_lines, statistics.invalid_lines)
    logger.info("解析网段:       IPv4 %d + IPv6 %d = %d",
                statistics.parsed_ipv4, statistics.parsed_ipv6, statistics.parsed_total)
    logger.info("归并结果:       IPv4 %d + IPv6 %d = %d",
                statistics.output_ipv4, statistics.output_ipv6, statistics.output_total)
    logger.info("覆盖地址数:     IPv4 %d，IPv6 %d",
                statistics.addresses_ipv4, statistics.addresses_ipv6)
    logger.info("压缩比:         %.2f:1", statistics.compression_ratio)
    logger.info("=" * 60)


def blocks_frame(blocks: List[CidrBlock]) -> pd.DataFrame:
    """网段列表转换为 DataFrame；地址数可能超过 64 位，以文本保存"""
    rows = [
        {
            "family": "IPv4" if block.family is Family.IPV4 else "IPv6",
            "network": block.to_text(),
            "prefix_len": block.prefix_len,
            "addresses": str(block.num_addresses),
        }
        for block in blocks
    ]
    return pd.DataFrame(rows, columns=BLOCK_COLUMNS)


def errors_frame(errors: List[LineError]) -> pd.DataFrame:
    rows = [
        {
            "line": item.line_number,
            "code": item.error.code,
            "message": item.error.message,
            "text": item.text,
        }
        for item in errors
    ]
    return pd.DataFrame(rows, columns=ERROR_COLUMNS)


def summary_frame(statistics: Statistics) -> pd.DataFrame:
    rows = []
    for item, value in statistics.as_dict().items():
        # IPv6 地址数超出 int64
        if isinstance(value, int) and value >= 2 ** 63:
            value = str(value)
        rows.append((item, value))
    return pd.DataFrame(rows, columns=["item", "value"])


def save_report(file_path, result: RunResult) -> List[Path]:
    """
    保存处理报告

    Args:
        file_path: 报告路径，.xlsx 保存为 Excel 工作簿，其余保存为 CSV
        result: 处理结果

    Returns:
        list: 实际写入的文件路径
    """
    path = Path(file_path)
    blocks_df = blocks_frame(result.blocks)
    errors_df = errors_frame(result.errors)
    summary_df = summary_frame(result.statistics)

    if path.suffix.lower() == ".xlsx":
        if max(len(blocks_df), len(errors_df)) < EXCEL_MAX_ROWS:
            with pd.ExcelWriter(path, engine="openpyxl") as writer:
                summary_df.to_excel(writer, sheet_name="summary", index=False)
                blocks_df.to_excel(writer, sheet_name="blocks", index=False)
                errors_df.to_excel(writer, sheet_name="errors", index=False)
            logger.info("报告已保存为Excel: %s", path)
            return [path]

        logger.warning("数据量超出Excel限制，改为保存CSV")
        path = path.with_suffix(".csv")

    errors_path = path.with_name(f"{path.stem}_errors.csv")
    summary_path = path.with_name(f"{path.stem}_summary.csv")
    blocks_df.to_csv(path, index=False, encoding="utf-8-sig")
    errors_df.to_csv(errors_path, index=False, encoding="utf-8-sig")
    summary_df.to_csv(summary_path, index=False, encoding="utf-8-sig")
    logger.info("报告已保存为CSV: %s", path)
    return [path, errors_path, summary_path]
