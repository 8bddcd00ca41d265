# Configuration and settings for the subgraph query layer
#
# A small dataclass and a cached factory function that reads values from
# environment variables. Per-chain subgraph URLs come from built-in defaults
# and can be overridden with SUBGRAPH_URL_<chainId>.

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Optional

from .errors import UnknownChainError


_def_true = {"1", "true", "yes", "y", "on"}
_def_false = {"0", "false", "no", "n", "off"}

_SUBGRAPH_URL_PREFIX = "SUBGRAPH_URL_"

DEFAULT_SUBGRAPH_URLS: Dict[int, str] = {
    1: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-eth-mainnet",
    5: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-goerli",
    10: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-optimism-mainnet",
    100: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-xdai",
    137: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-matic",
    42161: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-arbitrum-one",
    43114: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-avalanche-c",
    80001: "https://api.thegraph.com/subgraphs/name/superfluid-finance/protocol-v1-mumbai",
}


def _get_env_any(keys: list[str], default: Optional[str] = None) -> Optional[str]:
    for k in keys:
        v = os.getenv(k)
        if v is not None:
            return v
    return default


def _get_bool(keys: list[str], default: bool) -> bool:
    raw = _get_env_any(keys)
    if raw is None:
        return default
    lower = raw.strip().lower()
    if lower in _def_true:
        return True
    if lower in _def_false:
        return False
    return default


def _get_int(keys: list[str], default: int) -> int:
    raw = _get_env_any(keys)
    if raw is None:
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def _subgraph_urls_from_env() -> Dict[int, str]:
    urls = dict(DEFAULT_SUBGRAPH_URLS)
    for key, value in os.environ.items():
        if not key.upper().startswith(_SUBGRAPH_URL_PREFIX) or not value:
            continue
        suffix = key[len(_SUBGRAPH_URL_PREFIX):]
        try:
            urls[int(suffix)] = value
        except ValueError:
            continue
    return urls


@dataclass
class Settings:
    """Runtime configuration for the subgraph query layer.

    Environment variables (case-insensitive aliases shown):
    - ENVIRONMENT / environment
    - LOG_LEVEL / log_level
    - SUBGRAPH_URL_<chainId> (one per chain, overrides the built-in default)
    - SUBGRAPH_API_TOKEN / subgraph_api_token
    - REQUEST_TIMEOUT_SECONDS / request_timeout_seconds
    - REQUEST_VERIFY_TLS / request_verify_tls
    - DEFAULT_PAGE_SIZE / default_page_size
    - MAX_PAGE_SIZE / max_page_size
    - TAG_EXCLUSION_FILTERS / tag_exclusion_filters
    """

    # General
    environment: str = "development"
    log_level: str = "INFO"

    # Indexing service connection
    subgraph_urls: Dict[int, str] = field(default_factory=lambda: dict(DEFAULT_SUBGRAPH_URLS))
    subgraph_api_token: Optional[str] = None

    # HTTP behavior
    request_timeout_seconds: int = 30
    request_verify_tls: bool = True

    # Paging; the service returns at most 1000 rows and a page asks for take + 1
    default_page_size: int = 100
    max_page_size: int = 999

    # Whether `_not` / `_not_in` filter values count as relevant addresses
    tag_exclusion_filters: bool = True

    def subgraph_url(self, chain_id: int) -> str:
        try:
            return self.subgraph_urls[chain_id]
        except KeyError:
            raise UnknownChainError(
                f"No subgraph URL configured for chain {chain_id}; "
                f"set {_SUBGRAPH_URL_PREFIX}{chain_id}"
            ) from None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment with sensible defaults.

    Values are cached for the process lifetime. Clear the cache if you need to
    pick up changes (get_settings.cache_clear()).
    """
    max_page_size = _get_int(["MAX_PAGE_SIZE", "max_page_size"], 999)
    if not 1 <= max_page_size <= 999:
        max_page_size = 999
    default_page_size = _get_int(["DEFAULT_PAGE_SIZE", "default_page_size"], 100)
    if not 1 <= default_page_size <= max_page_size:
        default_page_size = min(100, max_page_size)
    return Settings(
        environment=_get_env_any(["ENVIRONMENT", "environment"], "development") or "development",
        log_level=_get_env_any(["LOG_LEVEL", "log_level"], "INFO") or "INFO",
        subgraph_urls=_subgraph_urls_from_env(),
        subgraph_api_token=_get_env_any(["SUBGRAPH_API_TOKEN", "subgraph_api_token"], None),
        request_timeout_seconds=_get_int(["REQUEST_TIMEOUT_SECONDS", "request_timeout_seconds"], 30),
        request_verify_tls=_get_bool(["REQUEST_VERIFY_TLS", "request_verify_tls"], True),
        default_page_size=default_page_size,
        max_page_size=max_page_size,
        tag_exclusion_filters=_get_bool(["TAG_EXCLUSION_FILTERS", "tag_exclusion_filters"], True),
    )
