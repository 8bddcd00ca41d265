from __future__ import annotations

import re
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

_INTEGER_RE = re.compile(r"^-?\d+$")


def _null_text(value: Any) -> Any:
    # Pending lifecycle fields may come back as the literal text "null".
    if isinstance(value, str) and value.strip().lower() == "null":
        return None
    return value


def _big_number(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("expected an integer, got a boolean")
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return value.strip()
    raise ValueError(f"expected an integer decimal string, got {value!r}")


def _address(value: Any) -> Any:
    if isinstance(value, str):
        return value.lower()
    return value


# On-chain amounts exceed 2**53; keep them as exact decimal strings.
BigNumber = Annotated[str, BeforeValidator(_big_number)]
OptionalBigNumber = Annotated[Optional[BigNumber], BeforeValidator(_null_text)]
BlockNumber = int
Timestamp = int
OptionalInt = Annotated[Optional[int], BeforeValidator(_null_text)]
Address = Annotated[str, BeforeValidator(_address)]
SubgraphId = str
OptionalSubgraphId = Annotated[Optional[str], BeforeValidator(_null_text)]


class LightEntity(BaseModel):
    """Flat, read-only record of one indexed entity.

    Python attributes are snake_case; wire names are the camelCase aliases.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: SubgraphId


class Account(LightEntity):
    id: Address
    created_at_block_number: BlockNumber
    created_at_timestamp: Timestamp
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    is_super_app: bool


class Token(LightEntity):
    id: Address
    created_at_block_number: BlockNumber
    created_at_timestamp: Timestamp
    name: str
    symbol: str
    decimals: int
    is_listed: bool
    is_super_token: bool
    underlying_address: Address


class TokenStatistic(LightEntity):
    id: Address
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    total_number_of_active_streams: int
    total_number_of_closed_streams: int
    total_number_of_indexes: int
    total_number_of_active_indexes: int
    total_subscriptions_with_units: int
    total_approved_subscriptions: int
    total_outflow_rate: BigNumber
    total_amount_streamed_until_updated_at: BigNumber
    total_amount_transferred_until_updated_at: BigNumber
    total_amount_distributed_until_updated_at: BigNumber
    total_supply: BigNumber
    token: Address


class AccountTokenSnapshot(LightEntity):
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    total_number_of_active_streams: int
    total_number_of_closed_streams: int
    total_subscriptions_with_units: int
    total_approved_subscriptions: int
    balance_until_updated_at: BigNumber
    total_net_flow_rate: BigNumber
    total_inflow_rate: BigNumber
    total_outflow_rate: BigNumber
    total_amount_streamed_until_updated_at: BigNumber
    total_amount_transferred_until_updated_at: BigNumber
    account: Address
    token: Address


class Stream(LightEntity):
    created_at_block_number: BlockNumber
    created_at_timestamp: Timestamp
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    current_flow_rate: BigNumber
    streamed_until_updated_at: BigNumber
    token: Address
    sender: Address
    receiver: Address


class StreamPeriod(LightEntity):
    flow_rate: BigNumber
    started_at_block_number: BlockNumber
    started_at_timestamp: Timestamp
    stopped_at_block_number: OptionalInt = None
    stopped_at_timestamp: OptionalInt = None
    total_amount_streamed: OptionalBigNumber = None
    token: Address
    stream: SubgraphId
    sender: Address
    receiver: Address
    started_at_event: SubgraphId
    stopped_at_event: OptionalSubgraphId = None


class Index(LightEntity):
    created_at_block_number: BlockNumber
    created_at_timestamp: Timestamp
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    index_id: BigNumber
    index_value: BigNumber
    total_units_pending: BigNumber
    total_units_approved: BigNumber
    total_units: BigNumber
    total_amount_distributed_until_updated_at: BigNumber
    token: Address
    publisher: Address
    index_created_event: SubgraphId


class IndexSubscription(LightEntity):
    created_at_block_number: BlockNumber
    created_at_timestamp: Timestamp
    updated_at_block_number: BlockNumber
    updated_at_timestamp: Timestamp
    subscriber: Address
    approved: bool
    units: BigNumber
    total_amount_received_until_updated_at: BigNumber
    index_value_until_updated_at: BigNumber
    index: SubgraphId
    index_id: BigNumber
    token: Address
    publisher: Address


class IndexUpdatedEvent(LightEntity):
    block_number: BlockNumber
    timestamp: Timestamp
    transaction_hash: str
    token: Address
    publisher: Address
    index_id: BigNumber
    old_index_value: BigNumber
    new_index_value: BigNumber
    total_units_pending: BigNumber
    total_units_approved: BigNumber
    user_data: str
    index: SubgraphId


class SubscriptionUnitsUpdatedEvent(LightEntity):
    block_number: BlockNumber
    timestamp: Timestamp
    transaction_hash: str
    token: Address
    publisher: Address
    subscriber: Address
    index_id: BigNumber
    units: BigNumber
    user_data: str
    subscription: SubgraphId
