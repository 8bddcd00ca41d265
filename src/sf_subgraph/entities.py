"""Per-kind wiring: model, document, references and address strategies."""

from __future__ import annotations

from .addresses import RelevantAddressesIntermediate, filter_address_provider
from .documents import (
    ACCOUNT_TOKEN_SNAPSHOTS,
    ACCOUNTS,
    INDEX_SUBSCRIPTIONS,
    INDEX_UPDATED_EVENTS,
    INDEXES,
    STREAM_PERIODS,
    STREAMS,
    SUBSCRIPTION_UNITS_UPDATED_EVENTS,
    TOKEN_STATISTICS,
    TOKENS,
)
from .handler import SubgraphQueryHandler
from .models import (
    Account,
    AccountTokenSnapshot,
    Index,
    IndexSubscription,
    IndexUpdatedEvent,
    Stream,
    StreamPeriod,
    SubscriptionUnitsUpdatedEvent,
    Token,
    TokenStatistic,
)


def _ref(field: str) -> tuple:
    return (field, "id")


def _account_addresses(result: Account) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(accounts=[result.id])


def _token_addresses(result: Token) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(tokens=[result.id])


def _token_statistic_addresses(result: TokenStatistic) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(tokens=[result.id, result.token])


def _account_token_snapshot_addresses(result: AccountTokenSnapshot) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(tokens=[result.token], accounts=[result.account])


def _sender_receiver_addresses(result) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(
        tokens=[result.token], accounts=[result.sender, result.receiver]
    )


def _publisher_addresses(result) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(tokens=[result.token], accounts=[result.publisher])


def _subscriber_addresses(result) -> RelevantAddressesIntermediate:
    return RelevantAddressesIntermediate(
        tokens=[result.token], accounts=[result.publisher, result.subscriber]
    )


account_handler: SubgraphQueryHandler[Account] = SubgraphQueryHandler(
    kind="Account",
    entity_type=Account,
    document=ACCOUNTS,
    addresses_from_result=_account_addresses,
    addresses_from_filter=filter_address_provider(accounts=("id",)),
)

token_handler: SubgraphQueryHandler[Token] = SubgraphQueryHandler(
    kind="Token",
    entity_type=Token,
    document=TOKENS,
    addresses_from_result=_token_addresses,
    addresses_from_filter=filter_address_provider(tokens=("id",)),
)

token_statistic_handler: SubgraphQueryHandler[TokenStatistic] = SubgraphQueryHandler(
    kind="TokenStatistic",
    entity_type=TokenStatistic,
    document=TOKEN_STATISTICS,
    addresses_from_result=_token_statistic_addresses,
    addresses_from_filter=filter_address_provider(tokens=("id", "token")),
    references={"token": _ref("token")},
)

account_token_snapshot_handler: SubgraphQueryHandler[AccountTokenSnapshot] = SubgraphQueryHandler(
    kind="AccountTokenSnapshot",
    entity_type=AccountTokenSnapshot,
    document=ACCOUNT_TOKEN_SNAPSHOTS,
    addresses_from_result=_account_token_snapshot_addresses,
    addresses_from_filter=filter_address_provider(tokens=("token",), accounts=("account",)),
    references={"account": _ref("account"), "token": _ref("token")},
)

stream_handler: SubgraphQueryHandler[Stream] = SubgraphQueryHandler(
    kind="Stream",
    entity_type=Stream,
    document=STREAMS,
    addresses_from_result=_sender_receiver_addresses,
    addresses_from_filter=filter_address_provider(tokens=("token",), accounts=("sender", "receiver")),
    references={
        "token": _ref("token"),
        "sender": _ref("sender"),
        "receiver": _ref("receiver"),
    },
)

stream_period_handler: SubgraphQueryHandler[StreamPeriod] = SubgraphQueryHandler(
    kind="StreamPeriod",
    entity_type=StreamPeriod,
    document=STREAM_PERIODS,
    addresses_from_result=_sender_receiver_addresses,
    addresses_from_filter=filter_address_provider(tokens=("token",), accounts=("sender", "receiver")),
    references={
        "token": _ref("token"),
        "stream": _ref("stream"),
        "sender": _ref("sender"),
        "receiver": _ref("receiver"),
        "startedAtEvent": _ref("startedAtEvent"),
        "stoppedAtEvent": _ref("stoppedAtEvent"),
    },
)

index_handler: SubgraphQueryHandler[Index] = SubgraphQueryHandler(
    kind="Index",
    entity_type=Index,
    document=INDEXES,
    addresses_from_result=_publisher_addresses,
    addresses_from_filter=filter_address_provider(tokens=("token",), accounts=("publisher",)),
    references={
        "token": _ref("token"),
        "publisher": _ref("publisher"),
        "indexCreatedEvent": _ref("indexCreatedEvent"),
    },
)

# token, publisher and indexId are read through the subscription's index and
# are not filterable on the subscription itself.
index_subscription_handler: SubgraphQueryHandler[IndexSubscription] = SubgraphQueryHandler(
    kind="IndexSubscription",
    entity_type=IndexSubscription,
    document=INDEX_SUBSCRIPTIONS,
    addresses_from_result=_subscriber_addresses,
    addresses_from_filter=filter_address_provider(accounts=("subscriber",)),
    references={
        "subscriber": _ref("subscriber"),
        "index": ("index", "id"),
        "indexId": ("index", "indexId"),
        "token": ("index", "token", "id"),
        "publisher": ("index", "publisher", "id"),
    },
    filter_fields=frozenset(
        {
            "id",
            "createdAtBlockNumber",
            "createdAtTimestamp",
            "updatedAtBlockNumber",
            "updatedAtTimestamp",
            "subscriber",
            "approved",
            "units",
            "totalAmountReceivedUntilUpdatedAt",
            "indexValueUntilUpdatedAt",
            "index",
        }
    ),
)

index_updated_event_handler: SubgraphQueryHandler[IndexUpdatedEvent] = SubgraphQueryHandler(
    kind="IndexUpdatedEvent",
    entity_type=IndexUpdatedEvent,
    document=INDEX_UPDATED_EVENTS,
    addresses_from_result=_publisher_addresses,
    addresses_from_filter=filter_address_provider(tokens=("token",), accounts=("publisher",)),
    references={"index": _ref("index")},
)

subscription_units_updated_event_handler: SubgraphQueryHandler[SubscriptionUnitsUpdatedEvent] = (
    SubgraphQueryHandler(
        kind="SubscriptionUnitsUpdatedEvent",
        entity_type=SubscriptionUnitsUpdatedEvent,
        document=SUBSCRIPTION_UNITS_UPDATED_EVENTS,
        addresses_from_result=_subscriber_addresses,
        addresses_from_filter=filter_address_provider(
            tokens=("token",), accounts=("publisher", "subscriber")
        ),
        references={"subscription": _ref("subscription")},
    )
)
