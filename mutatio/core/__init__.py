"""Core types shared by every layer: results, exit codes, configuration."""

from .config import ConfigError, MutatioConfig, TransportConfig, load_config, load_project_config
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ConfigError",
    "MutatioConfig",
    "TransportConfig",
    "load_config",
    "load_project_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
