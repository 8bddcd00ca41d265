"""Query argument and result shapes shared by every entity kind."""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

# The service returns at most 1000 rows per request; one row is reserved for
# the has-more probe.
MAX_TAKE = 999
DEFAULT_TAKE = 100
TIE_BREAK_FIELD = "id"

T = TypeVar("T")


class OrderDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class BlockRef(BaseModel):
    """Point-in-time read: query the indexed state as of a block."""

    model_config = ConfigDict(frozen=True)

    number: int = Field(ge=0)


class Paging(BaseModel):
    """Skip/take window of a list query."""

    model_config = ConfigDict(frozen=True)

    skip: int = Field(default=0, ge=0)
    take: int = Field(default=DEFAULT_TAKE, ge=1, le=MAX_TAKE)

    @property
    def take_plus_one(self) -> int:
        return self.take + 1

    def next(self) -> "Paging":
        return Paging(skip=self.skip + self.take, take=self.take)


class Ordering(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    order_by: str = Field(default=TIE_BREAK_FIELD, alias="orderBy")
    order_direction: OrderDirection = Field(default=OrderDirection.ASC, alias="orderDirection")

    def sort_keys(self) -> List[Tuple[str, OrderDirection]]:
        """Primary key followed by the id tie-break, so ties page reproducibly."""
        keys = [(self.order_by, self.order_direction)]
        if self.order_by != TIE_BREAK_FIELD:
            keys.append((TIE_BREAK_FIELD, self.order_direction))
        return keys


class GetQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    block: Optional[BlockRef] = None


class ListQuery(BaseModel):
    """Filter, order and window of a list query.

    `filter` keys use the indexing-service field names with the usual operator
    suffixes (`sender`, `sender_in`, `sender_not`, `sender_not_in`, ...).
    """

    model_config = ConfigDict(frozen=True)

    filter: Optional[Dict[str, Any]] = None
    order: Optional[Ordering] = None
    pagination: Paging = Field(default_factory=Paging)
    block: Optional[BlockRef] = None


class PagedResult(BaseModel, Generic[T]):
    items: List[T] = Field(default_factory=list)
    has_more: bool = False
    paging: Paging = Field(default_factory=Paging)
    next_paging: Optional[Paging] = None

    @classmethod
    def from_rows(cls, rows_plus_one: Sequence[T], paging: Paging) -> "PagedResult[T]":
        """Build a page from a response fetched with `take + 1` rows."""
        has_more = len(rows_plus_one) > paging.take
        return cls(
            items=list(rows_plus_one[: paging.take]),
            has_more=has_more,
            paging=paging,
            next_paging=paging.next() if has_more else None,
        )
