from .config import (
    ConfigError,
    add_config_arg,
    build_config,
    deep_merge,
    load_yaml_config,
    resolve_output_path,
    resolve_path,
)
from .logging import (
    DEFAULT_LOGGING,
    LoggingSettings,
    add_logging_args,
    setup_logging,
    setup_logging_from_config,
)

__all__ = [
    "ConfigError",
    "DEFAULT_LOGGING",
    "LoggingSettings",
    "add_config_arg",
    "add_logging_args",
    "build_config",
    "deep_merge",
    "load_yaml_config",
    "resolve_output_path",
    "resolve_path",
    "setup_logging",
    "setup_logging_from_config",
]
