"""Contract toward a reactive cache.

Every entity kind gets a singular get endpoint and a plural list endpoint. An
endpoint runs its query against an injected client and reports the tags the
cache should attach to the stored result. Query args are plain mappings that
always carry `chain_id`; everything else is handed to the handler.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel

from .config import Settings, get_settings
from .dal import GraphQLClient
from .entities import (
    account_handler,
    account_token_snapshot_handler,
    index_handler,
    index_subscription_handler,
    index_updated_event_handler,
    stream_handler,
    stream_period_handler,
    subscription_units_updated_event_handler,
    token_handler,
    token_statistic_handler,
)
from .errors import InvalidFilterError, UnknownEndpointError
from .handler import SubgraphQueryHandler
from .tags import CacheTag, TagKind, provide_tags

CHAIN_ID_ARG = "chain_id"


def chain_id_of(args: Mapping[str, Any]) -> int:
    try:
        return int(args[CHAIN_ID_ARG])
    except (KeyError, TypeError, ValueError):
        raise InvalidFilterError(f"query args need an integer '{CHAIN_ID_ARG}'") from None


def _query_args(args: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in args.items() if k != CHAIN_ID_ARG}


@dataclass(frozen=True)
class GetEndpoint:
    name: str
    handler: SubgraphQueryHandler
    tag_kind: TagKind

    def run(self, client: GraphQLClient, args: Mapping[str, Any], *, settings: Optional[Settings] = None):
        chain_id_of(args)
        return self.handler.get(client, _query_args(args))

    def provides_tags(
        self, result: Any, args: Mapping[str, Any], *, settings: Optional[Settings] = None
    ) -> List[CacheTag]:
        # Nothing cached, nothing to invalidate.
        if result is None:
            return []
        relevant = self.handler.get_relevant_addresses_from_result(result)
        return provide_tags(chain_id_of(args), relevant, self.tag_kind)


@dataclass(frozen=True)
class ListEndpoint:
    name: str
    handler: SubgraphQueryHandler
    tag_kind: TagKind

    def run(self, client: GraphQLClient, args: Mapping[str, Any], *, settings: Optional[Settings] = None):
        chain_id_of(args)
        return self.handler.list(client, _query_args(args), settings=settings)

    def provides_tags(
        self, result: Any, args: Mapping[str, Any], *, settings: Optional[Settings] = None
    ) -> List[CacheTag]:
        # Tagged from the filter, so the tags hold even for an empty page.
        settings = settings or get_settings()
        relevant = self.handler.get_relevant_addresses_from_filter(
            args.get("filter"), include_exclusions=settings.tag_exclusion_filters
        )
        return provide_tags(chain_id_of(args), relevant, self.tag_kind)


Endpoint = Union[GetEndpoint, ListEndpoint]


def create_endpoints() -> Dict[str, Endpoint]:
    return {
        endpoint.name: endpoint
        for endpoint in (
            GetEndpoint("account", account_handler, TagKind.EVENT),
            ListEndpoint("accounts", account_handler, TagKind.EVENT),
            GetEndpoint("accountTokenSnapshot", account_token_snapshot_handler, TagKind.EVENT),
            ListEndpoint("accountTokenSnapshots", account_token_snapshot_handler, TagKind.TOKEN),
            GetEndpoint("index", index_handler, TagKind.INDEX),
            ListEndpoint("indexes", index_handler, TagKind.INDEX),
            GetEndpoint("indexSubscription", index_subscription_handler, TagKind.INDEX),
            ListEndpoint("indexSubscriptions", index_subscription_handler, TagKind.INDEX),
            GetEndpoint("stream", stream_handler, TagKind.STREAM),
            ListEndpoint("streams", stream_handler, TagKind.STREAM),
            GetEndpoint("streamPeriod", stream_period_handler, TagKind.STREAM),
            ListEndpoint("streamPeriods", stream_period_handler, TagKind.STREAM),
            GetEndpoint("token", token_handler, TagKind.TOKEN),
            ListEndpoint("tokens", token_handler, TagKind.TOKEN),
            GetEndpoint("tokenStatistic", token_statistic_handler, TagKind.TOKEN),
            ListEndpoint("tokenStatistics", token_statistic_handler, TagKind.TOKEN),
            GetEndpoint("indexUpdatedEvent", index_updated_event_handler, TagKind.EVENT),
            ListEndpoint("indexUpdatedEvents", index_updated_event_handler, TagKind.EVENT),
            GetEndpoint(
                "subscriptionUnitsUpdatedEvent", subscription_units_updated_event_handler, TagKind.EVENT
            ),
            ListEndpoint(
                "subscriptionUnitsUpdatedEvents", subscription_units_updated_event_handler, TagKind.EVENT
            ),
        )
    }


ENDPOINTS: Dict[str, Endpoint] = create_endpoints()


def get_endpoint(name: str) -> Endpoint:
    try:
        return ENDPOINTS[name]
    except KeyError:
        raise UnknownEndpointError(
            f"Unknown endpoint '{name}'. Available: {sorted(ENDPOINTS)}"
        ) from None


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(value, Mapping):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def serialize_query_args(endpoint_name: str, args: Mapping[str, Any]) -> str:
    """Deterministic cache key for a query: equal args give equal keys."""
    body = json.dumps(_jsonable(args), sort_keys=True, separators=(",", ":"), default=str)
    return f"{endpoint_name}({body})"
