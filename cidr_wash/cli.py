#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cidr-wash 命令行入口

从文件或标准输入读取IP列表（支持CIDR、单IP、通配符、范围、子网掩码等写法），
输出覆盖相同地址的最少CIDR网段，IPv4在前、IPv6在后。
无效行按行号报告并跳过，其余行照常归并。
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, TextIO

from . import __version__
from .config import Config, ConfigError
from .errors import ParseError
from .parser import parse_line
from .reduce import covers, reduce, split_by_family
from .report import LineError, RunResult, log_statistics, save_report

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_LINES = 2
EXIT_INTERRUPTED = 130


def setup_logging(config: Config):
    """设置日志系统，日志始终写到标准错误，配置了日志目录时同时写入文件"""
    handlers = [logging.StreamHandler(sys.stderr)]

    if config.log_dir:
        log_dir = Path(config.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        handlers.append(logging.FileHandler(log_dir / f"cidr_wash_{timestamp}.log", encoding="utf-8"))

    logging.basicConfig(
        level=config.level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,
    )


def run(lines: Iterable[str]) -> RunResult:
    """
    解析全部输入行并分地址族归并

    Args:
        lines: 输入行（可带换行符）

    Returns:
        RunResult: 归并结果、无效行和统计信息
    """
    result = RunResult()
    stats = result.statistics
    parsed = []

    for line_number, line in enumerate(lines, 1):
        stats.lines_read += 1
        try:
            blocks = parse_line(line)
        except ParseError as e:
            result.errors.append(LineError(line_number, line.rstrip("\r\n"), e))
            continue
        if not blocks:
            stats.skipped_lines += 1
        parsed.extend(blocks)

    stats.invalid_lines = len(result.errors)

    ipv4, ipv6 = split_by_family(parsed)
    stats.parsed_ipv4 = len(ipv4)
    stats.parsed_ipv6 = len(ipv6)

    ipv4 = reduce(ipv4)
    ipv6 = reduce(ipv6)
    stats.output_ipv4 = len(ipv4)
    stats.output_ipv6 = len(ipv6)
    stats.addresses_ipv4 = covers(ipv4)
    stats.addresses_ipv6 = covers(ipv6)

    result.blocks = ipv4 + ipv6
    return result


def report_errors(errors: List[LineError], max_shown: int):
    """报告无效行，最多逐条显示 max_shown 个"""
    if not errors:
        return
    logger.warning("发现 %d 个无效条目:", len(errors))
    for item in errors[:max_shown]:
        logger.warning("  %s", item)
    if len(errors) > max_shown:
        logger.warning("  ... 还有 %d 个无效条目", len(errors) - max_shown)


def write_blocks(result: RunResult, output: TextIO):
    for block in result.blocks:
        output.write(block.to_text() + "\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cidr-wash",
        description="将IP列表归并为最少的CIDR网段",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
支持的输入写法:
  192.168.1.0/24              标准CIDR
  192.168.1.1                 单IP
  192.168.1.*                 通配符
  192.168.1.1-192.168.1.20    完整范围
  192.168.1.0-255             短范围（仅IPv4）
  192.168.1.0 255.255.255.0   子网掩码
  # 或 ; 开头的行及行内注释会被忽略

示例:
  %(prog)s blocklist.txt -o blocklist_min.txt
  cat feed.netset | %(prog)s --stats
  %(prog)s blocklist.txt --report report.xlsx --strict
        """,
    )
    parser.add_argument("input", nargs="?", default="-", help="输入文件，缺省或 - 表示标准输入")
    parser.add_argument("-o", "--output", help="输出文件，缺省为标准输出")
    parser.add_argument("--config", help="JSON 配置文件路径")
    parser.add_argument("--log-level", help="日志级别 (DEBUG/INFO/WARNING/ERROR)")
    parser.add_argument("--log-dir", help="日志目录，设置后同时写入日志文件")
    parser.add_argument("--max-errors", type=int, dest="max_errors_shown",
                        help="最多逐条显示的无效行数")
    parser.add_argument("--strict", action="store_true", default=None,
                        help="存在无效行时以状态码 2 退出")
    parser.add_argument("--stats", action="store_true", default=None, help="输出统计信息")
    parser.add_argument("--report", dest="report_file", help="保存报告 (.xlsx 或 .csv)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """按 环境变量 < 配置文件 < 命令行参数 的顺序合并配置"""
    config = Config().load_from_env()
    if args.config:
        config.load_from_file(args.config)
    config.update({
        "log_level": args.log_level,
        "log_dir": args.log_dir,
        "max_errors_shown": args.max_errors_shown,
        "strict": args.strict,
        "stats": args.stats,
        "report_file": args.report_file,
    })
    return config


def read_lines(input_path: str) -> List[str]:
    if input_path == "-":
        return sys.stdin.readlines()
    with open(input_path, "r", encoding="utf-8") as f:
        return f.readlines()


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        sys.stderr.write(f"配置错误: {e}\n")
        return EXIT_FAILURE

    problems = config.validate_config()
    if problems:
        sys.stderr.write("配置验证失败:\n")
        for problem in problems:
            sys.stderr.write(f"  - {problem}\n")
        return EXIT_FAILURE

    setup_logging(config)
    logger.debug("当前配置: %s", config.as_dict())

    try:
        try:
            lines = read_lines(args.input)
        except (OSError, UnicodeDecodeError) as e:
            logger.error("读取输入失败: %s", e)
            return EXIT_FAILURE

        result = run(lines)
        report_errors(result.errors, config.max_errors_shown)

        try:
            if args.output:
                with open(args.output, "w", encoding="utf-8") as f:
                    write_blocks(result, f)
                logger.info("结果已保存到: %s", args.output)
            else:
                write_blocks(result, sys.stdout)
                sys.stdout.flush()

            if config.report_file:
                save_report(config.report_file, result)
        except OSError as e:
            logger.error("写入失败: %s", e)
            return EXIT_FAILURE

        if config.stats:
            log_statistics(result.statistics)
    except KeyboardInterrupt:
        logger.error("用户中断")
        return EXIT_INTERRUPTED

    if config.strict and result.errors:
        return EXIT_INVALID_LINES
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
