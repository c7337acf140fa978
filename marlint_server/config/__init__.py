from .settings import Config, LinterConfig, LinterSettings, LoggingConfig, config, get_config, reload_config

__all__ = [
    "Config",
    "LinterConfig",
    "LinterSettings",
    "LoggingConfig",
    "config",
    "get_config",
    "reload_config",
]
