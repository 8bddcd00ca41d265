# tests/test_normalization.py
import pytest

from conftest import RECEIVER, SENDER, TOKEN
from sf_subgraph.entities import (
    index_subscription_handler,
    index_updated_event_handler,
    stream_period_handler,
    token_handler,
)
from sf_subgraph.errors import NormalizationError
from sf_subgraph.models import StreamPeriod


def test_nested_references_flatten_to_ids(make_stream_period):
    period = stream_period_handler.normalize_row(make_stream_period(1))

    assert isinstance(period, StreamPeriod)
    assert period.token == TOKEN
    assert period.sender == SENDER
    assert period.receiver == RECEIVER
    assert period.stream == f"{SENDER}-{RECEIVER}-{TOKEN}-0"
    assert period.started_at_event.startswith("FlowUpdated-")


def test_numbers_keep_full_precision(make_stream_period):
    row = make_stream_period(1, flow_rate="123456789012345678")
    row["startedAtBlockNumber"] = "123456789012345678"

    period = stream_period_handler.normalize_row(row)

    assert period.flow_rate == "123456789012345678"
    assert int(period.flow_rate) == 123456789012345678
    assert period.started_at_block_number == 123456789012345678
    assert isinstance(period.started_at_timestamp, int)


def test_open_period_has_no_stopped_fields(make_stream_period):
    period = stream_period_handler.normalize_row(make_stream_period(1))

    assert period.stopped_at_block_number is None
    assert period.stopped_at_timestamp is None
    assert period.stopped_at_event is None
    assert period.total_amount_streamed is None


def test_textual_null_reads_as_absent(make_stream_period):
    row = make_stream_period(1)
    row["stoppedAtBlockNumber"] = "null"
    row["stoppedAtTimestamp"] = "null"
    row["totalAmountStreamed"] = "null"

    period = stream_period_handler.normalize_row(row)

    assert period.stopped_at_block_number is None
    assert period.total_amount_streamed is None


def test_closed_period(make_stream_period):
    period = stream_period_handler.normalize_row(make_stream_period(3, stopped=True))

    assert period.stopped_at_block_number == 2003
    assert period.stopped_at_timestamp == 1_660_000_003
    assert period.total_amount_streamed == "1000000000000000000000"
    assert period.stopped_at_event is not None


def test_entities_are_read_only(make_stream_period):
    period = stream_period_handler.normalize_row(make_stream_period(1))

    with pytest.raises(Exception):
        period.flow_rate = "0"


def test_missing_nested_reference_fails(make_stream_period):
    row = make_stream_period(1)
    del row["token"]

    with pytest.raises(NormalizationError, match="token"):
        stream_period_handler.normalize_row(row)


def test_null_required_reference_fails(make_stream_period):
    row = make_stream_period(1)
    row["sender"] = None

    with pytest.raises(NormalizationError):
        stream_period_handler.normalize_row(row)


def test_reference_that_is_not_an_object_fails(make_stream_period):
    row = make_stream_period(1)
    row["receiver"] = RECEIVER

    with pytest.raises(NormalizationError, match="receiver"):
        stream_period_handler.normalize_row(row)


@pytest.mark.parametrize("bad", ["12.5", "abc", "", True])
def test_non_numeric_amount_fails(make_stream_period, bad):
    row = make_stream_period(1, flow_rate=bad)

    with pytest.raises(NormalizationError) as exc_info:
        stream_period_handler.normalize_row(row)

    assert exc_info.value.kind == "StreamPeriod"


def test_non_numeric_block_number_fails(make_stream_period):
    row = make_stream_period(1)
    row["startedAtBlockNumber"] = "latest"

    with pytest.raises(NormalizationError):
        stream_period_handler.normalize_row(row)


def test_response_without_collection_fails():
    with pytest.raises(NormalizationError, match="streamPeriods"):
        stream_period_handler.normalize({"streams": []})


def test_row_that_is_not_an_object_fails():
    with pytest.raises(NormalizationError):
        stream_period_handler.normalize({"streamPeriods": ["0xabc"]})


def test_addresses_are_lowercased():
    row = {
        "id": "0xABCDEF",
        "createdAtBlockNumber": "1",
        "createdAtTimestamp": "2",
        "name": "Super DAI",
        "symbol": "DAIx",
        "decimals": 18,
        "isListed": True,
        "isSuperToken": True,
        "underlyingAddress": "0x6B175474E89094C44Da98b954EedeAC495271d0F",
    }

    token = token_handler.normalize_row(row)

    assert token.id == "0xabcdef"
    assert token.underlying_address == "0x6b175474e89094c44da98b954eedeac495271d0f"


def test_index_subscription_reads_through_its_index():
    row = {
        "id": "sub-1",
        "createdAtBlockNumber": "1",
        "createdAtTimestamp": "2",
        "updatedAtBlockNumber": "3",
        "updatedAtTimestamp": "4",
        "subscriber": {"id": RECEIVER},
        "approved": False,
        "units": "250",
        "totalAmountReceivedUntilUpdatedAt": "0",
        "indexValueUntilUpdatedAt": "0",
        "index": {"id": "idx-9", "indexId": "9", "token": {"id": TOKEN}, "publisher": {"id": SENDER}},
    }

    subscription = index_subscription_handler.normalize_row(row)

    assert subscription.index == "idx-9"
    assert subscription.index_id == "9"
    assert subscription.token == TOKEN
    assert subscription.publisher == SENDER
    assert subscription.subscriber == RECEIVER


def test_event_with_plain_address_fields():
    row = {
        "id": "IndexUpdated-0xfeed-3",
        "blockNumber": "15000000",
        "timestamp": "1650000000",
        "transactionHash": "0xfeed",
        "token": TOKEN,
        "publisher": SENDER,
        "indexId": "1",
        "oldIndexValue": "0",
        "newIndexValue": "340282366920938463463374607431768211455",
        "totalUnitsPending": "0",
        "totalUnitsApproved": "10",
        "userData": "0x",
        "index": {"id": "idx-1"},
    }

    event = index_updated_event_handler.normalize_row(row)

    assert event.index == "idx-1"
    assert int(event.new_index_value) == 2**128 - 1
    assert event.block_number == 15_000_000
