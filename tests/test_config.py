# -*- coding: utf-8 -*-
"""配置加载测试"""

import json
import logging

import pytest

from cidr_wash.config import Config, ConfigError


class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.log_level == "INFO"
        assert config.log_dir is None
        assert config.max_errors_shown == 10
        assert config.strict is False
        assert config.stats is False
        assert config.report_file is None
        assert config.validate_config() == []
        assert config.level == logging.INFO

    def test_overrides_ignore_none(self):
        config = Config(log_level="DEBUG", report_file=None)
        assert config.log_level == "DEBUG"
        assert config.report_file is None

    def test_unknown_key(self):
        with pytest.raises(ConfigError):
            Config(colour="blue")

    def test_load_from_env(self):
        config = Config().load_from_env({
            "CIDR_WASH_LOG_LEVEL": "debug",
            "CIDR_WASH_MAX_ERRORS": "3",
            "CIDR_WASH_STRICT": "true",
            "CIDR_WASH_STATS": "no",
            "CIDR_WASH_REPORT": "out.csv",
            "UNRELATED": "x",
        })
        assert config.log_level == "debug"
        assert config.level == logging.DEBUG
        assert config.max_errors_shown == 3
        assert config.strict is True
        assert config.stats is False
        assert config.report_file == "out.csv"

    def test_load_from_env_empty_values_are_ignored(self):
        config = Config().load_from_env({"CIDR_WASH_LOG_DIR": ""})
        assert config.log_dir is None

    def test_load_from_env_bad_integer(self):
        with pytest.raises(ConfigError):
            Config().load_from_env({"CIDR_WASH_MAX_ERRORS": "many"})

    def test_load_from_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"log_level": "WARNING", "max_errors_shown": 0}), encoding="utf-8")
        config = Config().load_from_file(str(path))
        assert config.log_level == "WARNING"
        assert config.max_errors_shown == 0

    def test_load_from_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            Config().load_from_file(str(tmp_path / "missing.json"))

    def test_load_from_directory(self, tmp_path):
        with pytest.raises(ConfigError):
            Config().load_from_file(str(tmp_path))

    def test_load_from_non_utf8_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_bytes(b'{"log_dir": "\xff"}')
        with pytest.raises(ConfigError):
            Config().load_from_file(str(path))

    def test_load_from_invalid_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config().load_from_file(str(path))

    def test_load_from_non_object_json(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            Config().load_from_file(str(path))

    @pytest.mark.parametrize("overrides", [
        {"log_level": "LOUD"},
        {"max_errors_shown": -1},
        {"report_file": "report.json"},
    ])
    def test_validate_config(self, overrides):
        assert Config(**overrides).validate_config()

    def test_as_dict(self):
        assert Config(stats=True).as_dict()["stats"] is True
