"""SDK-style facade: run an endpoint and get back the result, its tags and its cache key.

Usage (example):

    from sf_subgraph.sdk import query

    outcome = query(
        "streams",
        {
            "chain_id": 137,
            "filter": {"sender": "0x...", "token_in": ["0x...", "0x..."]},
            "order": {"orderBy": "createdAtTimestamp", "orderDirection": "desc"},
            "pagination": {"skip": 0, "take": 50},
        },
    )
    outcome.result.items     # List[Stream]
    outcome.tags             # List[CacheTag] for the cache entry
    outcome.cache_key        # deterministic key of the query

Call `configure_logging()` once at startup for JSON logs at LOG_LEVEL.

Environment variables: see sf_subgraph.config.Settings for all available options.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .config import Settings, get_settings
from .dal import GraphQLClient, SubgraphClient
from .endpoints import chain_id_of, get_endpoint, serialize_query_args
from .logging_conf import init_logging
from .tags import CacheTag

logger = logging.getLogger(__name__)

__all__ = [
    "QueryOutcome",
    "configure_logging",
    "get_client",
    "query",
]


@dataclass(frozen=True)
class QueryOutcome:
    result: Any
    tags: List[CacheTag]
    cache_key: str


def configure_logging(settings: Optional[Settings] = None) -> None:
    """Set up JSON logging at the configured LOG_LEVEL."""
    settings = settings or get_settings()
    init_logging(settings.log_level)
    logger.info(
        "logging configured",
        extra={"extra": {"environment": settings.environment, "level": settings.log_level}},
    )


def get_client(chain_id: int, *, settings: Optional[Settings] = None) -> SubgraphClient:
    """Build a client for the chain's subgraph URL."""
    settings = settings or get_settings()
    return SubgraphClient(settings.subgraph_url(chain_id), settings)


def query(
    endpoint_name: str,
    args: Mapping[str, Any],
    *,
    client: Optional[GraphQLClient] = None,
    settings: Optional[Settings] = None,
) -> QueryOutcome:
    """End-to-end: resolve endpoint -> execute -> tag.

    Pass `client` to reuse a connection or to query a different backend; by
    default one is built from settings for the args' chain.
    """
    settings = settings or get_settings()
    endpoint = get_endpoint(endpoint_name)
    args_dict: Dict[str, Any] = dict(args)
    owned = client is None
    if client is None:
        client = get_client(chain_id_of(args_dict), settings=settings)
    try:
        result = endpoint.run(client, args_dict, settings=settings)
    finally:
        if owned:
            client.close()
    return QueryOutcome(
        result=result,
        tags=endpoint.provides_tags(result, args_dict, settings=settings),
        cache_key=serialize_query_args(endpoint_name, args_dict),
    )
