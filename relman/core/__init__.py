"""Core types shared by every layer."""

from .config import (
    ArtifactoryConfig,
    ArtifactorySectionMissing,
    Config,
    ConfigError,
    DistributionRepoMissing,
    GitHubConfig,
    find_config_upward,
    load_config,
)
from .errors import ErrorCode
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # config
    "ArtifactoryConfig",
    "ArtifactorySectionMissing",
    "Config",
    "ConfigError",
    "DistributionRepoMissing",
    "GitHubConfig",
    "find_config_upward",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
