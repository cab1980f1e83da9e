"""Immutable view-model consumed by the HTML page and the JSON API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple, Union

from .countdown import TimeRemaining, time_remaining
from .errors import LeaderboardError
from .ranking import Participant, Ranking, filter_participants
from .util.conversion_util import Conversion

MEDALS = {1: "gold", 2: "silver", 3: "bronze"}

STATUS_READY = "ready"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class PrizeTier:
    label: str
    top_n: int

    def covers(self, rank: int) -> bool:
        return 1 <= rank <= self.top_n


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    participant: Participant
    medal: Optional[str]
    initial: str
    tiers: Tuple[str, ...] = ()

    def as_dict(self):
        p = self.participant
        return {
            "rank": self.rank,
            "key": p.identity_key,
            "name": p.name,
            "initial": self.initial,
            "skill_badges": p.skill_badges,
            "arcade_points": p.arcade_points,
            "score": p.score,
            "profile_url": p.profile_url,
            "medal": self.medal,
            "tiers": list(self.tiers),
        }


@dataclass(frozen=True)
class ViewSettings:
    deadline: datetime
    last_updated: Optional[datetime] = None
    tiers: Tuple[PrizeTier, ...] = ()

    @classmethod
    def from_config(cls, config) -> "ViewSettings":
        last_updated = config.get("LEADERBOARD_LAST_UPDATED")
        return cls(
            deadline=Conversion.to_datetime(config["LEADERBOARD_DEADLINE"]),
            last_updated=Conversion.to_datetime(last_updated) if last_updated else None,
            tiers=tuple(
                tier if isinstance(tier, PrizeTier) else PrizeTier(*tier)
                for tier in config.get("LEADERBOARD_PRIZE_TIERS", ())
            ),
        )


@dataclass(frozen=True)
class LeaderboardView:
    status: str
    query: str
    time_left: TimeRemaining
    settings: ViewSettings
    rows: Tuple[LeaderboardRow, ...] = ()
    total_participants: int = 0
    error: Optional[str] = None

    @property
    def is_ready(self) -> bool:
        return self.status == STATUS_READY

    @property
    def deadline_label(self) -> str:
        return Conversion.format_short_date(self.settings.deadline)

    @property
    def last_updated_label(self) -> str:
        return Conversion.format_short_date(self.settings.last_updated)

    def as_dict(self):
        payload = {
            "status": self.status,
            "query": self.query,
            "total_participants": self.total_participants,
            "result_count": len(self.rows),
            "rows": [row.as_dict() for row in self.rows],
            "time_left": self.time_left.as_dict(),
            "deadline": self.settings.deadline.isoformat(),
            "deadline_label": self.deadline_label,
            "last_updated": self.last_updated_label,
            "tiers": [{"label": t.label, "top_n": t.top_n} for t in self.settings.tiers],
        }
        if self.error is not None:
            payload["error"] = self.error
        return payload


def medal_for_rank(rank: int) -> Optional[str]:
    return MEDALS.get(rank)


def avatar_initial(name: str) -> str:
    name = (name or "").strip()
    return name[0].upper() if name else "?"


def qualifying_tiers(rank: int, tiers) -> Tuple[str, ...]:
    return tuple(tier.label for tier in tiers if tier.covers(rank))


def build_view(
    outcome: Union[Ranking, LeaderboardError],
    query: str,
    now: datetime,
    settings: ViewSettings,
) -> LeaderboardView:
    """Derive what the page shows from a load outcome and the search box.

    A failed load produces an error view with no rows, never a stale table.
    Rows carry the participant's rank in the full ranking, so a search only
    hides rows and never renumbers them.
    """
    query = query or ""
    time_left = time_remaining(settings.deadline, now)

    if isinstance(outcome, LeaderboardError):
        return LeaderboardView(
            status=STATUS_ERROR,
            query=query,
            time_left=time_left,
            settings=settings,
            error=outcome.user_message,
        )
    if not isinstance(outcome, Ranking):
        raise TypeError(f"expected Ranking or LeaderboardError, got {type(outcome).__name__}")

    rows = []
    for participant in filter_participants(outcome.ranked, query):
        rank = outcome.rank_of(participant)
        rows.append(LeaderboardRow(
            rank=rank,
            participant=participant,
            medal=medal_for_rank(rank),
            initial=avatar_initial(participant.name),
            tiers=qualifying_tiers(rank, settings.tiers),
        ))

    return LeaderboardView(
        status=STATUS_READY,
        query=query,
        time_left=time_left,
        settings=settings,
        rows=tuple(rows),
        total_participants=len(outcome),
    )
