"""GraphQL list documents for the indexing service.

Every entity kind is read through one list query; a get is the same query
narrowed to a single id.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class EntityDocument:
    """Immutable description of a collection's list query."""

    name: str
    collection: str
    entity: str
    selection: str

    @property
    def query(self) -> str:
        return (
            f"query {self.name}(\n"
            f"  $where: {self.entity}_filter = {{}}\n"
            f"  $orderBy: {self.entity}_orderBy = id\n"
            f"  $orderDirection: OrderDirection = asc\n"
            f"  $skip: Int = 0\n"
            f"  $first: Int = 10\n"
            f"  $block: Block_height\n"
            f") {{\n"
            f"  {self.collection}(\n"
            f"    where: $where\n"
            f"    orderBy: $orderBy\n"
            f"    orderDirection: $orderDirection\n"
            f"    skip: $skip\n"
            f"    first: $first\n"
            f"    block: $block\n"
            f"  ) {{\n"
            f"{self.selection}"
            f"  }}\n"
            f"}}\n"
        )


def _fields(*lines: str) -> str:
    return "".join(f"    {line}\n" for line in lines)


ACCOUNTS = EntityDocument(
    name="Accounts",
    collection="accounts",
    entity="Account",
    selection=_fields(
        "id",
        "createdAtBlockNumber",
        "createdAtTimestamp",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "isSuperApp",
    ),
)

TOKENS = EntityDocument(
    name="Tokens",
    collection="tokens",
    entity="Token",
    selection=_fields(
        "id",
        "createdAtBlockNumber",
        "createdAtTimestamp",
        "name",
        "symbol",
        "decimals",
        "isListed",
        "isSuperToken",
        "underlyingAddress",
    ),
)

TOKEN_STATISTICS = EntityDocument(
    name="TokenStatistics",
    collection="tokenStatistics",
    entity="TokenStatistic",
    selection=_fields(
        "id",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "totalNumberOfActiveStreams",
        "totalNumberOfClosedStreams",
        "totalNumberOfIndexes",
        "totalNumberOfActiveIndexes",
        "totalSubscriptionsWithUnits",
        "totalApprovedSubscriptions",
        "totalOutflowRate",
        "totalAmountStreamedUntilUpdatedAt",
        "totalAmountTransferredUntilUpdatedAt",
        "totalAmountDistributedUntilUpdatedAt",
        "totalSupply",
        "token { id }",
    ),
)

ACCOUNT_TOKEN_SNAPSHOTS = EntityDocument(
    name="AccountTokenSnapshots",
    collection="accountTokenSnapshots",
    entity="AccountTokenSnapshot",
    selection=_fields(
        "id",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "totalNumberOfActiveStreams",
        "totalNumberOfClosedStreams",
        "totalSubscriptionsWithUnits",
        "totalApprovedSubscriptions",
        "balanceUntilUpdatedAt",
        "totalNetFlowRate",
        "totalInflowRate",
        "totalOutflowRate",
        "totalAmountStreamedUntilUpdatedAt",
        "totalAmountTransferredUntilUpdatedAt",
        "account { id }",
        "token { id }",
    ),
)

STREAMS = EntityDocument(
    name="Streams",
    collection="streams",
    entity="Stream",
    selection=_fields(
        "id",
        "createdAtBlockNumber",
        "createdAtTimestamp",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "currentFlowRate",
        "streamedUntilUpdatedAt",
        "token { id }",
        "sender { id }",
        "receiver { id }",
    ),
)

STREAM_PERIODS = EntityDocument(
    name="StreamPeriods",
    collection="streamPeriods",
    entity="StreamPeriod",
    selection=_fields(
        "id",
        "flowRate",
        "startedAtBlockNumber",
        "startedAtTimestamp",
        "stoppedAtBlockNumber",
        "stoppedAtTimestamp",
        "totalAmountStreamed",
        "token { id }",
        "stream { id }",
        "sender { id }",
        "receiver { id }",
        "startedAtEvent { id }",
        "stoppedAtEvent { id }",
    ),
)

INDEXES = EntityDocument(
    name="Indexes",
    collection="indexes",
    entity="Index",
    selection=_fields(
        "id",
        "createdAtBlockNumber",
        "createdAtTimestamp",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "indexId",
        "indexValue",
        "totalUnitsPending",
        "totalUnitsApproved",
        "totalUnits",
        "totalAmountDistributedUntilUpdatedAt",
        "token { id }",
        "publisher { id }",
        "indexCreatedEvent { id }",
    ),
)

INDEX_SUBSCRIPTIONS = EntityDocument(
    name="IndexSubscriptions",
    collection="indexSubscriptions",
    entity="IndexSubscription",
    selection=_fields(
        "id",
        "createdAtBlockNumber",
        "createdAtTimestamp",
        "updatedAtBlockNumber",
        "updatedAtTimestamp",
        "subscriber { id }",
        "approved",
        "units",
        "totalAmountReceivedUntilUpdatedAt",
        "indexValueUntilUpdatedAt",
        "index { id indexId token { id } publisher { id } }",
    ),
)

INDEX_UPDATED_EVENTS = EntityDocument(
    name="IndexUpdatedEvents",
    collection="indexUpdatedEvents",
    entity="IndexUpdatedEvent",
    selection=_fields(
        "id",
        "blockNumber",
        "timestamp",
        "transactionHash",
        "token",
        "publisher",
        "indexId",
        "oldIndexValue",
        "newIndexValue",
        "totalUnitsPending",
        "totalUnitsApproved",
        "userData",
        "index { id }",
    ),
)

SUBSCRIPTION_UNITS_UPDATED_EVENTS = EntityDocument(
    name="SubscriptionUnitsUpdatedEvents",
    collection="subscriptionUnitsUpdatedEvents",
    entity="SubscriptionUnitsUpdatedEvent",
    selection=_fields(
        "id",
        "blockNumber",
        "timestamp",
        "transactionHash",
        "token",
        "publisher",
        "subscriber",
        "indexId",
        "units",
        "userData",
        "subscription { id }",
    ),
)
