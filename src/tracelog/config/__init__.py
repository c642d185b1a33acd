from .settings import LoggerConfig, get_config

__all__ = ["LoggerConfig", "get_config"]
