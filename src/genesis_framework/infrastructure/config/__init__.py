"""Configuration helpers."""

from .settings_utils import (
    env_bool,
    env_float,
    env_int,
    env_list,
    env_optional_path,
    env_str,
    parse_bool,
)

__all__ = [
    "env_bool",
    "env_float",
    "env_int",
    "env_list",
    "env_optional_path",
    "env_str",
    "parse_bool",
]
