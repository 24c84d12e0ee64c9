"""Wikimedia endpoint and bot credential configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .env import require_env_vars
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

if TYPE_CHECKING:
    from .storage import StorageConfig

WIKIDATA_API_URL = "https://www.wikidata.org/w/api.php"
COMMONS_API_URL = "https://commons.wikimedia.org/w/api.php"
WIKIDATA_SPARQL_URL = "https://query.wikidata.org/sparql"

BOT_NAME = "Naturvardsregistret_bot"
BOT_VERSION = "0.1"
DEFAULT_MAXLAG_SECONDS = 10
LABEL_LOOKUP_TTL_SECONDS = 24 * 60 * 60.0


@dataclass(frozen=True, slots=True)
class BotCredentials:
    username: str
    password: str
    email: str

    @property
    def user_agent(self) -> str:
        return f"{BOT_NAME}/{BOT_VERSION} ({self.email})"


@dataclass(frozen=True, slots=True)
class WikimediaConfig:
    credentials: BotCredentials
    wikidata: ResilienceConfig
    commons: ResilienceConfig
    sparql: ResilienceConfig
    label_lookup: ResilienceConfig
    maxlag_seconds: int = DEFAULT_MAXLAG_SECONDS


def is_complete_sparql_result(payload: Any) -> bool:
    """Only complete result sets are cached; timeouts come back as partial JSON or text."""

    if not isinstance(payload, dict):
        return False
    results = payload.get("results")
    return isinstance(results, dict) and isinstance(results.get("bindings"), list)


def get_bot_credentials() -> BotCredentials:
    values = require_env_vars(
        ("NVRSYNC_BOT_USERNAME", "NVRSYNC_BOT_PASSWORD", "NVRSYNC_BOT_EMAIL")
    )
    return BotCredentials(
        username=values["NVRSYNC_BOT_USERNAME"],
        password=values["NVRSYNC_BOT_PASSWORD"],
        email=values["NVRSYNC_BOT_EMAIL"],
    )


def get_wikimedia_config(*, storage: StorageConfig | None = None) -> WikimediaConfig:
    credentials = get_bot_credentials()
    headers = {"User-Agent": credentials.user_agent}

    wikidata = ResilienceConfig(
        name="wikidata",
        base_url=WIKIDATA_API_URL,
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        retry=RetryPolicy(total=6, backoff_factor=2.0),
        default_headers=headers,
    )
    # Commons throttles bot page edits far harder than Wikidata entity edits.
    commons = ResilienceConfig(
        name="commons",
        base_url=COMMONS_API_URL,
        ratelimit=RateLimit(max_calls=10, per_seconds=60.0),
        retry=RetryPolicy(total=6, backoff_factor=2.0),
        default_headers=headers,
    )
    sparql = ResilienceConfig(
        name="wikidata-sparql",
        base_url=WIKIDATA_SPARQL_URL,
        timeout_seconds=60.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        default_headers={**headers, "Accept": "application/sparql-results+json"},
    )
    cache_path = str(storage.http_cache_path()) if storage is not None else None
    label_lookup = ResilienceConfig(
        name="wikidata-sparql-labels",
        base_url=WIKIDATA_SPARQL_URL,
        timeout_seconds=60.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(
            sqlite_path=cache_path,
            ttl_seconds=LABEL_LOOKUP_TTL_SECONDS,
            cache_predicate=is_complete_sparql_result,
        ),
        default_headers={**headers, "Accept": "application/sparql-results+json"},
    )
    return WikimediaConfig(
        credentials=credentials,
        wikidata=wikidata,
        commons=commons,
        sparql=sparql,
        label_lookup=label_lookup,
    )
