"""Configuration: built-in defaults deep-merged with an optional YAML file."""

import copy
import logging
import os

import yaml

from slowlog.errors import ConfigurationError
from slowlog.formatter import FORMATS
from slowlog.rules import RuleTable, default_rule_table

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SLOWLOG_CONFIG"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    """Configuration manager that loads from YAML and merges with defaults."""

    DEFAULTS = {
        "input": {
            "file": "/dev/stdin",
            "chunk_size": 65536,
        },
        "sort": "time_start:asc",
        "output": {
            "format": "json",
            "indent": 4,
        },
        "query": {
            "separator": "\n",
        },
        "logging": {
            "level": "WARNING",
        },
        # Extra field rules, e.g. {"Thread_id": "int"}
        "rules": {},
    }

    def __init__(self, config_path: str | None = None):
        self._config = copy.deepcopy(self.DEFAULTS)

        if config_path is None:
            config_path = os.environ.get(CONFIG_ENV_VAR)

        if config_path is not None:
            user_config = load_yaml_config(config_path)
            if user_config:
                self._config = self._deep_merge(self._config, user_config)

        self._validate()

    @staticmethod
    def _deep_merge(base, override):
        """Recursively merge override dict into base dict."""
        result = copy.deepcopy(base)
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = Config._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)
        return result

    def _validate(self):
        fmt = self._config["output"]["format"]
        if fmt not in FORMATS:
            raise ConfigurationError(f"output.format must be one of {FORMATS}, got {fmt!r}")

        chunk_size = self._config["input"]["chunk_size"]
        if not isinstance(chunk_size, int) or isinstance(chunk_size, bool) or chunk_size <= 0:
            raise ConfigurationError(f"input.chunk_size must be a positive integer, got {chunk_size!r}")

        indent = self._config["output"]["indent"]
        if indent is not None and (not isinstance(indent, int) or isinstance(indent, bool) or indent < 0):
            raise ConfigurationError(f"output.indent must be a non-negative integer or null, got {indent!r}")

        level = str(self._config["logging"]["level"]).upper()
        if level not in _LOG_LEVELS:
            raise ConfigurationError(f"logging.level must be one of {_LOG_LEVELS}, got {level!r}")

        if not isinstance(self._config["query"]["separator"], str):
            raise ConfigurationError("query.separator must be a string")

        if not isinstance(self._config["sort"], str):
            raise ConfigurationError("sort must be a string like key:asc,key2:desc")

        rules = self._config["rules"] or {}
        if not isinstance(rules, dict) or not all(isinstance(k, str) for k in rules):
            raise ConfigurationError("rules must be a mapping of field name to kind")

    def rule_table(self) -> RuleTable:
        """Default rule table plus any extra rules from the config file."""
        extra = self._config["rules"] or {}
        if not extra:
            return default_rule_table()
        logger.info("Adding %d extra field rule(s)", len(extra))
        return default_rule_table().extended(extra)

    def __getitem__(self, key):
        return self._config[key]


def load_yaml_config(path: str) -> dict:
    """Load a YAML mapping from *path*. Missing file -> empty dict."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"config file {path} must contain a mapping")
    logger.info("Loaded YAML config from %s", path)
    return data
