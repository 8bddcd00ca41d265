from __future__ import annotations

from .addresses import RelevantAddresses, RelevantAddressesIntermediate, filter_address_provider, resolve
from .config import Settings, get_settings
from .dal import GraphQLClient, SubgraphClient
from .endpoints import ENDPOINTS, GetEndpoint, ListEndpoint, get_endpoint, serialize_query_args
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
from .errors import (
    InvalidFilterError,
    NormalizationError,
    SubgraphQueryError,
    SubgraphRequestError,
    UnknownChainError,
    UnknownEndpointError,
)
from .handler import SubgraphQueryHandler
from .models import (
    Account,
    AccountTokenSnapshot,
    Index,
    IndexSubscription,
    IndexUpdatedEvent,
    LightEntity,
    Stream,
    StreamPeriod,
    SubscriptionUnitsUpdatedEvent,
    Token,
    TokenStatistic,
)
from .schemas import BlockRef, GetQuery, ListQuery, OrderDirection, Ordering, PagedResult, Paging
from .tags import CacheTag, TagKind, provide_tags

__all__ = [
    # entities
    "LightEntity",
    "Account",
    "AccountTokenSnapshot",
    "Index",
    "IndexSubscription",
    "IndexUpdatedEvent",
    "Stream",
    "StreamPeriod",
    "SubscriptionUnitsUpdatedEvent",
    "Token",
    "TokenStatistic",
    # query shapes
    "BlockRef",
    "GetQuery",
    "ListQuery",
    "OrderDirection",
    "Ordering",
    "PagedResult",
    "Paging",
    # handlers
    "SubgraphQueryHandler",
    "account_handler",
    "account_token_snapshot_handler",
    "index_handler",
    "index_subscription_handler",
    "index_updated_event_handler",
    "stream_handler",
    "stream_period_handler",
    "subscription_units_updated_event_handler",
    "token_handler",
    "token_statistic_handler",
    # relevant addresses and tags
    "RelevantAddresses",
    "RelevantAddressesIntermediate",
    "filter_address_provider",
    "resolve",
    "CacheTag",
    "TagKind",
    "provide_tags",
    # cache contract
    "ENDPOINTS",
    "GetEndpoint",
    "ListEndpoint",
    "get_endpoint",
    "serialize_query_args",
    # transport and settings
    "GraphQLClient",
    "SubgraphClient",
    "Settings",
    "get_settings",
    # errors
    "SubgraphQueryError",
    "SubgraphRequestError",
    "NormalizationError",
    "InvalidFilterError",
    "UnknownChainError",
    "UnknownEndpointError",
]
