"""Configuration helpers shared across packages."""

from ln_common.config.env import parse_bool_env, parse_float_env, parse_int_env

__all__ = ["parse_bool_env", "parse_float_env", "parse_int_env"]
