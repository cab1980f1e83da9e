import logging
from datetime import datetime
from typing import Optional, Union

from flask import current_app

from .countdown import time_remaining
from .errors import LeaderboardError
from .loader import load
from .ranking import ColumnMapping, Ranking, derive
from .util.conversion_util import Conversion
from .view_model import ViewSettings, build_view

logger = logging.getLogger(__name__)

EXTENSION_KEY = "leaderboard"


class LeaderboardService:
    """Keeps the outcome of the latest load cycle for one data source.

    An outcome is either a :class:`Ranking` or the :class:`LeaderboardError`
    that stopped the load. Each refresh re-reads and re-ranks the whole
    dataset.
    """

    def __init__(self, source, columns: Optional[ColumnMapping] = None, timeout: Optional[float] = None, session=None):
        self.source = source
        self.columns = columns or ColumnMapping()
        self.timeout = timeout
        self.session = session
        self._outcome: Union[Ranking, LeaderboardError, None] = None

    def refresh(self) -> Union[Ranking, LeaderboardError]:
        try:
            records = load(self.source, timeout=self.timeout, session=self.session)
        except LeaderboardError as exc:
            self._outcome = exc
        else:
            self._outcome = derive(records, self.columns)
        return self._outcome

    def current(self) -> Union[Ranking, LeaderboardError]:
        if self._outcome is None:
            return self.refresh()
        return self._outcome


def init_leaderboard(app):
    service = LeaderboardService(
        app.config["LEADERBOARD_SOURCE"],
        columns=ColumnMapping.from_config(app.config.get("LEADERBOARD_COLUMNS")),
        timeout=app.config.get("LEADERBOARD_FETCH_TIMEOUT"),
    )
    app.extensions[EXTENSION_KEY] = service
    return service


def get_service() -> LeaderboardService:
    return current_app.extensions[EXTENSION_KEY]


def _settings() -> ViewSettings:
    return ViewSettings.from_config(current_app.config)


def get_leaderboard_view(query: str = "", now: Optional[datetime] = None):
    now = now or datetime.now()
    return build_view(get_service().current(), query, now, _settings())


def refresh_leaderboard(now: Optional[datetime] = None):
    outcome = get_service().refresh()
    if isinstance(outcome, LeaderboardError):
        logger.warning("Refresh failed: %s", outcome)
    now = now or datetime.now()
    return build_view(outcome, "", now, _settings())


def get_countdown(now: Optional[datetime] = None):
    settings = _settings()
    now = now or datetime.now()
    left = time_remaining(settings.deadline, now)
    return {
        **left.as_dict(),
        "deadline": settings.deadline.isoformat(),
        "deadline_label": Conversion.format_short_date(settings.deadline),
        "is_over": left.is_over,
    }
