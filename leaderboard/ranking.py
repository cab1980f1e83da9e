"""Participant normalization, global ranking and rank-preserving search."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, Iterable, Optional, Tuple

from .util.conversion_util import Conversion

logger = logging.getLogger(__name__)

UNKNOWN_NAME = "Unknown"


@dataclass(frozen=True)
class ColumnMapping:
    """Source column headers for each participant field."""

    name: str = "User Name"
    skill_badges: str = "# of Skill Badges Completed"
    arcade_points: str = "# of Arcade Games Completed"
    profile_url: str = "Google Cloud Skills Boost Profile URL"

    @classmethod
    def from_config(cls, value) -> "ColumnMapping":
        if value is None:
            return cls()
        if isinstance(value, ColumnMapping):
            return value
        return cls(**dict(value))


@dataclass(frozen=True)
class Participant:
    name: str
    profile_url: Optional[str]
    skill_badges: int
    arcade_points: int
    identity_key: str

    @property
    def score(self) -> int:
        return self.skill_badges + self.arcade_points


@dataclass(frozen=True)
class Ranking:
    """A ranked list and its rank index, always derived together.

    ``ranked`` is sorted by score, highest first, with ties kept in input
    order. ``rank_index`` maps each identity key to its 1-based position in
    ``ranked``; those numbers stay global when a filtered view is shown.
    """

    ranked: Tuple[Participant, ...]
    rank_index: Mapping

    def rank_of(self, participant: Participant) -> int:
        return self.rank_index[participant.identity_key]

    def __len__(self):
        return len(self.ranked)


def _text(record: Mapping, column: str) -> str:
    value = record.get(column)
    if value is None:
        return ""
    return str(value).strip()


def _coerce_count(record: Mapping, column: str, position: int) -> int:
    raw = record.get(column)
    count = Conversion.count_to_int(raw)
    if count == 0 and _text(record, column) not in ("", "0"):
        logger.debug("Row %d: treating %s=%r as 0", position, column, raw)
    return count


def normalize_participant(record: Mapping, position: int, columns: ColumnMapping = ColumnMapping()) -> Participant:
    """Build a participant from one raw record.

    Never fails on data: missing names become ``"Unknown"`` and unparseable
    counts become 0. The identity key is the profile URL, else the raw name,
    else ``row-<position>``.
    """
    if not isinstance(record, Mapping):
        raise TypeError(f"record {position} must be a mapping, got {type(record).__name__}")

    raw_name = _text(record, columns.name)
    profile_url = _text(record, columns.profile_url) or None

    return Participant(
        name=raw_name or UNKNOWN_NAME,
        profile_url=profile_url,
        skill_badges=_coerce_count(record, columns.skill_badges, position),
        arcade_points=_coerce_count(record, columns.arcade_points, position),
        identity_key=profile_url or raw_name or f"row-{position}",
    )


def _unique_keys(participants: Iterable[Participant]):
    seen: Dict[str, int] = {}
    for participant in participants:
        key = participant.identity_key
        count = seen.get(key, 0) + 1
        seen[key] = count
        if count > 1:
            # duplicates keep their first-come key with a numeric suffix
            key = f"{key}#{count}"
            while key in seen:
                count += 1
                key = f"{participant.identity_key}#{count}"
            seen[key] = 1
            participant = replace(participant, identity_key=key)
        yield participant


def derive(records, columns: ColumnMapping = ColumnMapping()) -> Ranking:
    """Normalize ``records`` and rank them by score.

    Pure: the input sequence is not modified and the same input always
    yields the same ranking.
    """
    if isinstance(records, (str, bytes)) or isinstance(records, Mapping):
        raise TypeError("records must be a sequence of mappings")

    participants = list(_unique_keys(
        normalize_participant(record, position, columns)
        for position, record in enumerate(records)
    ))

    # sorted() is stable, so equal scores keep their input order
    ranked = tuple(sorted(participants, key=lambda p: p.score, reverse=True))
    rank_index = MappingProxyType({p.identity_key: idx for idx, p in enumerate(ranked, 1)})

    logger.debug("Ranked %d participants", len(ranked))
    return Ranking(ranked=ranked, rank_index=rank_index)


def filter_participants(ranked, query: str) -> Tuple[Participant, ...]:
    """Return the participants whose name contains ``query``.

    Matching is case-insensitive on the trimmed query and keeps the global
    order of ``ranked``. A blank query returns every participant.
    """
    if not isinstance(query, str):
        raise TypeError(f"query must be a string, got {type(query).__name__}")
    if isinstance(ranked, Ranking):
        ranked = ranked.ranked

    q = query.strip().casefold()
    if not q:
        return tuple(ranked)
    return tuple(p for p in ranked if q in p.name.casefold())
