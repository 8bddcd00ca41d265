"""Generic get/list engine shared by every entity kind.

One `SubgraphQueryHandler` exists per entity kind. It is configured with the
kind's model, list document, nested references to flatten and the two
relevant-address strategies; it keeps no per-call state, so one instance can
serve concurrent calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    FrozenSet,
    Generic,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
)

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from .addresses import (
    EMPTY,
    FilterAddressProvider,
    RelevantAddresses,
    ResultAddressProvider,
    resolve,
)
from .config import Settings, get_settings
from .dal import GraphQLClient
from .documents import EntityDocument
from .errors import InvalidFilterError, NormalizationError
from .models import LightEntity
from .schemas import GetQuery, ListQuery, Ordering, PagedResult, Paging

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=LightEntity)
Q = TypeVar("Q", bound=BaseModel)

# Longest first so `_not_in` is not read as `_in`.
FILTER_OPERATORS: Tuple[str, ...] = (
    "_not_starts_with",
    "_not_ends_with",
    "_not_contains",
    "_starts_with",
    "_ends_with",
    "_contains",
    "_not_in",
    "_not",
    "_gte",
    "_lte",
    "_gt",
    "_lt",
    "_in",
)


def _normalize_filter_value(value: Any) -> Any:
    if isinstance(value, str) and value[:2].lower() == "0x":
        return value.lower()
    if isinstance(value, (list, tuple)):
        return [_normalize_filter_value(v) for v in value]
    return value


def _walk(row: Mapping[str, Any], path: Tuple[str, ...], kind: str) -> Any:
    value: Any = row
    for step in path:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise NormalizationError(
                f"expected an object at '{'.'.join(path)}', got {type(value).__name__}", kind=kind
            )
        if step not in value:
            raise NormalizationError(f"response is missing '{'.'.join(path)}'", kind=kind)
        value = value[step]
    return value


@dataclass(frozen=True)
class SubgraphQueryHandler(Generic[E]):
    kind: str
    entity_type: Type[E]
    document: EntityDocument
    addresses_from_result: ResultAddressProvider
    addresses_from_filter: FilterAddressProvider
    # flat wire field -> path into the raw row, e.g. "token": ("token", "id")
    references: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    # wire fields accepted in filters; defaults to the model's fields
    filter_fields: Optional[FrozenSet[str]] = None

    # --- public operations ---

    def get(self, client: GraphQLClient, query: Union[GetQuery, Mapping[str, Any]]) -> Optional[E]:
        """Fetch one entity by id; None when the service has no such record."""
        q = self._coerce(GetQuery, query)
        if not q.id:
            return None
        variables: Dict[str, Any] = {
            "where": {"id": _normalize_filter_value(q.id)},
            "skip": 0,
            "first": 1,
        }
        if q.block is not None:
            variables["block"] = q.block.model_dump()
        items = self._execute(client, variables)
        logger.debug(
            "subgraph get",
            extra={"extra": {"kind": self.kind, "id": q.id, "found": bool(items)}},
        )
        return items[0] if items else None

    def list(
        self,
        client: GraphQLClient,
        query: Union[ListQuery, Mapping[str, Any], None] = None,
        *,
        settings: Optional[Settings] = None,
    ) -> PagedResult[E]:
        """Fetch one page; asks for one extra row to learn whether more exist."""
        settings = settings or get_settings()
        q = self._coerce_list_query(query, settings)
        where = self.build_where(q.filter)
        ordering = q.order or Ordering()
        # Only the primary key is sent; graph-node breaks ties by id.
        order_by, order_direction = ordering.sort_keys()[0]
        variables: Dict[str, Any] = {
            "where": where,
            "orderBy": order_by,
            "orderDirection": order_direction.value,
            "skip": q.pagination.skip,
            "first": q.pagination.take_plus_one,
        }
        if q.block is not None:
            variables["block"] = q.block.model_dump()
        rows = self._execute(client, variables)
        page = PagedResult[self.entity_type].from_rows(rows, q.pagination)
        logger.debug(
            "subgraph list",
            extra={
                "extra": {
                    "kind": self.kind,
                    "skip": q.pagination.skip,
                    "take": q.pagination.take,
                    "rows": len(page.items),
                    "has_more": page.has_more,
                }
            },
        )
        return page

    def get_relevant_addresses_from_result(self, result: Optional[E]) -> RelevantAddresses:
        if result is None:
            return EMPTY
        return resolve(self.addresses_from_result(result))

    def get_relevant_addresses_from_filter(
        self, filter: Optional[Mapping[str, Any]], *, include_exclusions: bool = True
    ) -> RelevantAddresses:
        # An absent filter selects everything; only the general tag applies.
        if not isinstance(filter, Mapping):
            return EMPTY
        return resolve(self.addresses_from_filter(filter, include_exclusions=include_exclusions))

    # --- normalization ---

    def normalize(self, response: Mapping[str, Any]) -> List[E]:
        """Turn a raw list response into flat entities, failing on partial data."""
        if not isinstance(response, Mapping):
            raise NormalizationError("response is not an object", kind=self.kind)
        rows = response.get(self.document.collection)
        if not isinstance(rows, list):
            raise NormalizationError(
                f"response has no '{self.document.collection}' list", kind=self.kind
            )
        return [self.normalize_row(row) for row in rows]

    def normalize_row(self, row: Any) -> E:
        if not isinstance(row, Mapping):
            raise NormalizationError(f"row is {type(row).__name__}, not an object", kind=self.kind)
        flat = dict(row)
        for name, path in self.references.items():
            flat[name] = _walk(row, path, self.kind)
        try:
            return self.entity_type.model_validate(flat)
        except ValidationError as e:
            raise NormalizationError(
                f"malformed row {row.get('id')!r}: {e.errors(include_url=False)}", kind=self.kind
            ) from e

    # --- filters ---

    def allowed_filter_fields(self) -> FrozenSet[str]:
        if self.filter_fields is not None:
            return self.filter_fields
        return frozenset(to_camel(name) for name in self.entity_type.model_fields)

    def build_where(self, filter: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Validate filter keys for this kind and lower-case hex values."""
        if not filter:
            return {}
        allowed = self.allowed_filter_fields()
        where: Dict[str, Any] = {}
        for key, value in filter.items():
            if not self._is_known_filter_key(key, allowed):
                raise InvalidFilterError(f"{self.kind}: unknown filter field '{key}'")
            where[key] = _normalize_filter_value(value)
        return where

    @staticmethod
    def _is_known_filter_key(key: str, allowed: FrozenSet[str]) -> bool:
        if key in allowed:
            return True
        for op in FILTER_OPERATORS:
            if key.endswith(op) and key[: -len(op)] in allowed:
                return True
        return False

    # --- helpers ---

    def _execute(self, client: GraphQLClient, variables: Dict[str, Any]) -> List[E]:
        # Transport errors propagate unchanged; the core never retries.
        response = client.execute(self.document.query, variables)
        return self.normalize(response)

    def _coerce(self, model: Type[Q], query: Union[Q, Mapping[str, Any], None]) -> Q:
        if isinstance(query, model):
            return query
        try:
            return model.model_validate(query or {})
        except ValidationError as e:
            raise InvalidFilterError(f"{self.kind}: invalid query arguments: {e}") from e

    def _coerce_list_query(
        self, query: Union[ListQuery, Mapping[str, Any], None], settings: Settings
    ) -> ListQuery:
        if query is None:
            query = {}
        elif isinstance(query, Mapping) and query.get("pagination") is None:
            query = {k: v for k, v in query.items() if k != "pagination"}
        q = self._coerce(ListQuery, query)
        # A take the caller never gave comes from settings.
        if "take" not in q.pagination.model_fields_set:
            paging = Paging(skip=q.pagination.skip, take=settings.default_page_size)
            q = q.model_copy(update={"pagination": paging})
        if q.pagination.take > settings.max_page_size:
            raise InvalidFilterError(
                f"{self.kind}: take {q.pagination.take} exceeds the maximum of {settings.max_page_size}"
            )
        return q
