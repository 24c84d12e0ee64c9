"""Application configuration helpers."""

from __future__ import annotations

from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError, UnknownObjectKindError
from .http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    RetryablePayloadError,
    RetryPolicy,
)
from .logging import configure_logging
from .object_kinds import (
    NATIONAL_PARKS,
    NATURAL_MONUMENTS,
    NATURE_RESERVES,
    OBJECT_KINDS,
    ObjectKind,
    get_object_kind,
)
from .storage import StorageConfig, get_storage_config
from .sync import (
    DEFAULT_REPROCESS_BEFORE,
    DEFAULT_RETAINED_GENERATIONS,
    SyncConfig,
    get_sync_config,
)
from .wikimedia import BotCredentials, WikimediaConfig, get_bot_credentials, get_wikimedia_config

__all__ = [
    "DEFAULT_REPROCESS_BEFORE",
    "DEFAULT_RETAINED_GENERATIONS",
    "NATIONAL_PARKS",
    "NATURAL_MONUMENTS",
    "NATURE_RESERVES",
    "OBJECT_KINDS",
    "BotCredentials",
    "CacheConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "ObjectKind",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "RetryablePayloadError",
    "StorageConfig",
    "SyncConfig",
    "UnknownObjectKindError",
    "WikimediaConfig",
    "configure_logging",
    "get_bot_credentials",
    "get_object_kind",
    "get_storage_config",
    "get_sync_config",
    "get_wikimedia_config",
    "require_env_var",
    "require_env_vars",
]
