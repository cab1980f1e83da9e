"""
Exceptions raised while loading the leaderboard dataset.
"""

from typing import Optional


class LeaderboardError(Exception):
    """Base exception for leaderboard errors."""

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class FetchError(LeaderboardError):
    """Raised when the dataset cannot be retrieved."""

    def __init__(self, source, details: Optional[str] = None, status_code: Optional[int] = None):
        self.source = source
        self.status_code = status_code
        reason = details or 'unknown error'
        if status_code is not None:
            reason = f"HTTP {status_code}"
        super().__init__(
            f"Failed to fetch {source}: {reason}",
            'Failed to load CSV file',
        )


class ParseError(LeaderboardError):
    """Raised when the dataset is empty or is not well-formed CSV."""

    def __init__(self, source, details: Optional[str] = None):
        self.source = source
        super().__init__(
            f"Failed to parse {source}: {details or 'malformed CSV'}",
            'Failed to parse CSV file',
        )


class SupersededLoad(Exception):
    """Raised to the caller of a load that a newer load has replaced."""

    def __init__(self, generation: int, latest: int):
        self.generation = generation
        self.latest = latest
        super().__init__(f"Load {generation} superseded by load {latest}")
