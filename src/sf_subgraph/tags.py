from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from itertools import chain
from typing import Dict, List

from .addresses import RelevantAddresses

GENERAL = "general"


class TagKind(str, Enum):
    EVENT = "Event"
    INDEX = "Index"
    STREAM = "Stream"
    TOKEN = "Token"


@dataclass(frozen=True)
class CacheTag:
    """Cache-invalidation key scoped by chain, tag kind and address."""

    chain_id: int
    kind: TagKind
    address: str = GENERAL

    @classmethod
    def general(cls, chain_id: int, kind: TagKind) -> "CacheTag":
        return cls(chain_id, kind, GENERAL)

    @property
    def is_general(self) -> bool:
        return self.address == GENERAL

    @property
    def id(self) -> str:
        if self.is_general:
            return f"{self.chain_id}"
        return f"{self.chain_id}_{self.address}"


def provide_tags(chain_id: int, relevant: RelevantAddresses, kind: TagKind) -> List[CacheTag]:
    """Expand relevant addresses into chain-scoped tags.

    Token tags first, then account tags, then the general tag of the kind,
    which every query carries so kind-wide invalidations reach queries with no
    resolvable address. Duplicates are dropped, first occurrence wins.
    """
    tags: Dict[CacheTag, None] = {}
    for address in chain(relevant.tokens, relevant.accounts):
        tags.setdefault(CacheTag(chain_id, kind, address.lower()), None)
    tags.setdefault(CacheTag.general(chain_id, kind), None)
    return list(tags)
