"""Relevant-address extraction.

Every entity kind supplies two small strategies: one maps a result to the
token/account addresses it concerns, the other maps a list filter to every
address the filter could select. Both produce a `RelevantAddressesIntermediate`
whose entries may be a single address, a list of addresses, or absent.
`resolve` flattens that into deduplicated address tuples and is shared by all
kinds.

Exclusion operators (`_not`, `_not_in`) count as relevant: an excluded address
still decides membership, so an event touching it can change the result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]+$")

INCLUSION_OPERATORS: Tuple[str, ...] = ("", "_in")
EXCLUSION_OPERATORS: Tuple[str, ...] = ("_not", "_not_in")


@dataclass
class RelevantAddressesIntermediate:
    tokens: List[Any] = field(default_factory=list)
    accounts: List[Any] = field(default_factory=list)


@dataclass(frozen=True)
class RelevantAddresses:
    tokens: Tuple[str, ...] = ()
    accounts: Tuple[str, ...] = ()

    def is_empty(self) -> bool:
        return not self.tokens and not self.accounts


ResultAddressProvider = Callable[[Any], RelevantAddressesIntermediate]
FilterAddressProvider = Callable[..., RelevantAddressesIntermediate]

EMPTY = RelevantAddresses()


def _candidates(entry: Any) -> List[Any]:
    if entry is None:
        return []
    if isinstance(entry, (list, tuple, set, frozenset)):
        return list(entry)
    return [entry]


def _flatten(entries: Sequence[Any]) -> Tuple[str, ...]:
    # Malformed entries contribute nothing; dict keys keep insertion order.
    seen: Dict[str, None] = {}
    for entry in entries:
        for candidate in _candidates(entry):
            if isinstance(candidate, str) and _ADDRESS_RE.match(candidate):
                seen.setdefault(candidate.lower(), None)
    return tuple(seen)


def resolve(intermediate: Optional[RelevantAddressesIntermediate]) -> RelevantAddresses:
    if intermediate is None:
        return EMPTY
    return RelevantAddresses(
        tokens=_flatten(intermediate.tokens),
        accounts=_flatten(intermediate.accounts),
    )


def filter_address_provider(
    *, tokens: Sequence[str] = (), accounts: Sequence[str] = ()
) -> FilterAddressProvider:
    """Build a filter strategy from the names of the address-bearing fields.

    Each field is read under its exact, `_in`, `_not` and `_not_in` spellings.
    """

    def provide(
        filter: Mapping[str, Any], *, include_exclusions: bool = True
    ) -> RelevantAddressesIntermediate:
        operators = INCLUSION_OPERATORS + (EXCLUSION_OPERATORS if include_exclusions else ())
        return RelevantAddressesIntermediate(
            tokens=[filter.get(name + op) for name in tokens for op in operators],
            accounts=[filter.get(name + op) for name in accounts for op in operators],
        )

    return provide
