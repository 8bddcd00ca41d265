# tests/conftest.py
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

import pytest

from sf_subgraph.config import Settings, get_settings
from sf_subgraph.schemas import OrderDirection, Ordering

SENDER = "0x" + "a1" * 20
RECEIVER = "0x" + "b2" * 20
OTHER = "0x" + "c3" * 20
TOKEN = "0x" + "d4" * 20
OTHER_TOKEN = "0x" + "e5" * 20


def _value(row: Dict[str, Any], name: str) -> Any:
    value = row.get(name)
    if isinstance(value, dict):
        return value.get("id")
    return value


def _comparable(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return (0, int(value))
        except ValueError:
            return (1, value)
    if value is None:
        return (-1, 0)
    return (0, value)


def _matches(row: Dict[str, Any], key: str, expected: Any) -> bool:
    for op in ("_not_in", "_not", "_in", "_gte", "_lte", "_gt", "_lt"):
        if key.endswith(op):
            actual = _value(row, key[: -len(op)])
            break
    else:
        op = ""
        actual = _value(row, key)
    if op == "":
        return actual == expected
    if op == "_not":
        return actual != expected
    if op == "_in":
        return actual in expected
    if op == "_not_in":
        return actual not in expected
    a, e = _comparable(actual), _comparable(expected)
    return {"_gt": a > e, "_lt": a < e, "_gte": a >= e, "_lte": a <= e}[op]


class InMemorySubgraph:
    """Indexing-service double: evaluates where/orderBy/skip/first over raw rows.

    Ties on the order key are broken by id, as the real service does.
    """

    def __init__(self, collections: Optional[Dict[str, List[Dict[str, Any]]]] = None) -> None:
        self.collections: Dict[str, List[Dict[str, Any]]] = collections or {}
        self.calls: List[Dict[str, Any]] = []

    def add(self, collection: str, *rows: Dict[str, Any]) -> None:
        self.collections.setdefault(collection, []).extend(rows)

    def _collection_of(self, document: str) -> str:
        for name in self.collections:
            if f"\n  {name}(\n" in document:
                return name
        raise AssertionError(f"document targets no known collection:\n{document}")

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        variables = dict(variables or {})
        self.calls.append(variables)
        collection = self._collection_of(document)
        rows = [
            row
            for row in self.collections[collection]
            if all(_matches(row, k, v) for k, v in (variables.get("where") or {}).items())
        ]
        ordering = Ordering(
            orderBy=variables.get("orderBy", "id"),
            orderDirection=variables.get("orderDirection", "asc"),
        )
        for name, direction in reversed(ordering.sort_keys()):
            rows.sort(
                key=lambda r, n=name: _comparable(_value(r, n)),
                reverse=direction is OrderDirection.DESC,
            )
        skip = variables.get("skip", 0)
        first = variables.get("first", 10)
        return {collection: rows[skip: skip + first]}


class FailingClient:
    def __init__(self, error: Exception) -> None:
        self.error = error

    def execute(self, document: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        raise self.error


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def quiet_logger():
    logger = logging.getLogger("sf_subgraph")
    logger.handlers.clear()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.WARNING)
    yield


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def subgraph() -> InMemorySubgraph:
    return InMemorySubgraph()


@pytest.fixture
def make_stream_period() -> Callable[..., Dict[str, Any]]:
    """
    Factory for raw streamPeriod rows as the service returns them.

    Usage:
        row = make_stream_period(1)
        row = make_stream_period(2, flow_rate="5", stopped=True)
    """

    def _make(
        n: int,
        *,
        sender: str = SENDER,
        receiver: str = RECEIVER,
        token: str = TOKEN,
        flow_rate: str = "385802469135802",
        stopped: bool = False,
    ) -> Dict[str, Any]:
        stream_id = f"{sender}-{receiver}-{token}-0"
        return {
            "id": f"{stream_id}-{n:04d}",
            "flowRate": flow_rate,
            "startedAtBlockNumber": str(1000 + n),
            "startedAtTimestamp": str(1_650_000_000 + n),
            "stoppedAtBlockNumber": str(2000 + n) if stopped else None,
            "stoppedAtTimestamp": str(1_660_000_000 + n) if stopped else None,
            "totalAmountStreamed": "1000000000000000000000" if stopped else None,
            "token": {"id": token},
            "stream": {"id": stream_id},
            "sender": {"id": sender},
            "receiver": {"id": receiver},
            "startedAtEvent": {"id": f"FlowUpdated-0x{n:064x}-1"},
            "stoppedAtEvent": {"id": f"FlowUpdated-0x{n:064x}-2"} if stopped else None,
        }

    return _make


@pytest.fixture
def make_stream() -> Callable[..., Dict[str, Any]]:
    def _make(
        n: int,
        *,
        sender: str = SENDER,
        receiver: str = RECEIVER,
        token: str = TOKEN,
        flow_rate: str = "1000",
    ) -> Dict[str, Any]:
        return {
            "id": f"{sender}-{receiver}-{token}-{n}",
            "createdAtBlockNumber": str(100 + n),
            "createdAtTimestamp": str(1_600_000_000 + n),
            "updatedAtBlockNumber": str(200 + n),
            "updatedAtTimestamp": str(1_600_100_000 + n),
            "currentFlowRate": flow_rate,
            "streamedUntilUpdatedAt": "0",
            "token": {"id": token},
            "sender": {"id": sender},
            "receiver": {"id": receiver},
        }

    return _make
