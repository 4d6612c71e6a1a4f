# -*- coding: utf-8 -*-
"""
运行配置

优先级: 命令行参数 > 配置文件 > 环境变量 > 默认值

环境变量:
    export CIDR_WASH_LOG_LEVEL='DEBUG'
    export CIDR_WASH_LOG_DIR='logs'
    export CIDR_WASH_MAX_ERRORS='20'
    export CIDR_WASH_STRICT='true'
    export CIDR_WASH_STATS='true'
    export CIDR_WASH_REPORT='report.xlsx'

配置文件（JSON）使用相同的小写键名:
    {"log_level": "INFO", "log_dir": "logs", "max_errors_shown": 10}
"""

import json
import logging
import os
from typing import Any, Dict, List

ENV_PREFIX = "CIDR_WASH_"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """配置文件无法读取或内容无效"""


class Config:
    """配置参数，默认值可通过环境变量、配置文件和命令行覆盖"""

    # ===== 日志配置 =====
    LOG_LEVEL = "INFO"                   # 日志级别
    LOG_DIR = None                       # 日志目录，None 表示只输出到终端

    # ===== 错误报告配置 =====
    MAX_ERRORS_SHOWN = 10                # 最多逐条显示的无效行数
    STRICT = False                       # 存在无效行时以非零状态退出

    # ===== 输出配置 =====
    STATS = False                        # 输出统计信息
    REPORT_FILE = None                   # 统计报告文件（.xlsx 或 .csv）

    def __init__(self, **overrides):
        self.log_level = self.LOG_LEVEL
        self.log_dir = self.LOG_DIR
        self.max_errors_shown = self.MAX_ERRORS_SHOWN
        self.strict = self.STRICT
        self.stats = self.STATS
        self.report_file = self.REPORT_FILE
        self.update(overrides)

    def update(self, values: Dict[str, Any]):
        """覆盖配置项，值为 None 的项忽略"""
        for key, value in values.items():
            if not hasattr(self, key):
                raise ConfigError(f"未知的配置项: {key}")
            if value is not None:
                setattr(self, key, value)
        return self

    def load_from_env(self, environ=None):
        """从环境变量加载配置"""
        environ = os.environ if environ is None else environ

        def get(name):
            return environ.get(ENV_PREFIX + name) or None

        values = {
            "log_level": get("LOG_LEVEL"),
            "log_dir": get("LOG_DIR"),
            "report_file": get("REPORT"),
        }

        max_errors = get("MAX_ERRORS")
        if max_errors is not None:
            try:
                values["max_errors_shown"] = int(max_errors)
            except ValueError:
                raise ConfigError(f"{ENV_PREFIX}MAX_ERRORS 必须是整数: {max_errors!r}") from None

        # 布尔值配置
        for name, key in (("STRICT", "strict"), ("STATS", "stats")):
            raw = get(name)
            if raw is not None:
                values[key] = raw.lower() in ("1", "true", "yes", "on")

        return self.update(values)

    def load_from_file(self, file_path: str):
        """从 JSON 配置文件加载配置"""
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            raise ConfigError(f"配置文件不存在: {file_path}") from None
        except OSError as e:
            raise ConfigError(f"无法读取配置文件 {file_path}: {e}") from None
        except UnicodeDecodeError as e:
            raise ConfigError(f"配置文件编码错误，请使用 UTF-8: {e}") from None
        except json.JSONDecodeError as e:
            raise ConfigError(f"配置文件格式错误，请确保是有效的 JSON 格式: {e}") from None

        if not isinstance(data, dict):
            raise ConfigError("配置文件顶层必须是 JSON 对象")
        return self.update(data)

    def validate_config(self) -> List[str]:
        """验证配置参数，返回错误列表"""
        errors = []

        if str(self.log_level).upper() not in LOG_LEVELS:
            errors.append(f"日志级别无效: {self.log_level}，可选 {', '.join(LOG_LEVELS)}")

        if not isinstance(self.max_errors_shown, int) or self.max_errors_shown < 0:
            errors.append(f"max_errors_shown 必须是非负整数: {self.max_errors_shown!r}")

        if self.report_file and not str(self.report_file).lower().endswith((".xlsx", ".csv")):
            errors.append(f"报告文件必须是 .xlsx 或 .csv: {self.report_file}")

        return errors

    @property
    def level(self) -> int:
        return getattr(logging, str(self.log_level).upper())

    def as_dict(self) -> Dict[str, Any]:
        return {
            "log_level": self.log_level,
            "log_dir": self.log_dir,
            "max_errors_shown": self.max_errors_shown,
            "strict": self.strict,
            "stats": self.stats,
            "report_file": self.report_file,
        }
