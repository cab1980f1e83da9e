"""
Dataset loader for the campaign CSV export.

The export can live on disk, behind an http(s) URL, or arrive as an open
stream. Whatever the transport, the text is parsed with pandas into a list of
raw records (column name -> string cell) in source order. Cells are never
coerced here; that is the ranking engine's job.

Failures collapse into two errors:

  FetchError  - the resource is unreachable or answered with a non-2xx status
  ParseError  - the text is empty or pandas rejects its structure
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

import httpx
import pandas as pd
import requests

from .errors import FetchError, ParseError, SupersededLoad

logger = logging.getLogger(__name__)

RawRecord = Dict[str, str]

DEFAULT_TIMEOUT = 10.0
NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}


def is_url(source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _describe(source) -> str:
    if isinstance(source, (str, os.PathLike)):
        return str(source)
    return getattr(source, "name", None) or type(source).__name__


def _decode(data, source) -> str:
    if isinstance(data, bytes):
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(_describe(source), f"not valid UTF-8 text ({exc})") from exc
    return data


def _read_local(source) -> str:
    if hasattr(source, "read"):
        return _decode(source.read(), source)

    path = Path(source).expanduser()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise FetchError(str(path), exc.strerror or str(exc)) from exc
    return _decode(data, path)


def fetch_text(source, *, timeout: Optional[float] = DEFAULT_TIMEOUT, session=None) -> str:
    """Retrieve the raw text of ``source`` once, without caching."""
    if not is_url(source):
        return _read_local(source)

    http = session or requests
    try:
        response = http.get(source, headers=NO_CACHE_HEADERS, timeout=timeout)
    except requests.RequestException as exc:
        raise FetchError(source, str(exc)) from exc

    if not 200 <= response.status_code < 300:
        raise FetchError(source, status_code=response.status_code)
    return response.text


async def fetch_text_async(source, *, timeout: Optional[float] = DEFAULT_TIMEOUT, client: Optional[httpx.AsyncClient] = None) -> str:
    if not is_url(source):
        return await asyncio.to_thread(_read_local, source)

    try:
        if client is not None:
            response = await client.get(source, headers=NO_CACHE_HEADERS, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout) as own_client:
                response = await own_client.get(source, headers=NO_CACHE_HEADERS)
    except httpx.HTTPError as exc:
        raise FetchError(source, str(exc)) from exc

    if not response.is_success:
        raise FetchError(source, status_code=response.status_code)
    return response.text


def parse_records(text: str, source="<text>") -> List[RawRecord]:
    """Parse CSV text with a header row into raw records.

    Blank lines are skipped. Every other row must have exactly as many
    fields as the header; shorter or longer rows are a parse error.
    """
    if text is None or not text.strip():
        raise ParseError(_describe(source), "resource is empty")

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise ParseError(_describe(source), str(exc).strip()) from exc

    # pandas turns one extra field per row into an implicit index
    if len(frame) and not isinstance(frame.index, pd.RangeIndex):
        raise ParseError(_describe(source), "rows have more fields than the header")

    # keep_default_na=False leaves empty cells as "", so NaN marks a missing field
    short_rows = frame.index[frame.isna().any(axis=1)]
    if len(short_rows):
        raise ParseError(
            _describe(source),
            f"data row {short_rows[0] + 1} has fewer fields than the header",
        )

    frame.columns = [str(column) for column in frame.columns]
    return frame.to_dict(orient="records")


def load(source, *, timeout: Optional[float] = DEFAULT_TIMEOUT, session=None) -> List[RawRecord]:
    """Fetch and parse ``source``; each call re-reads the resource."""
    label = _describe(source)
    logger.info("Loading leaderboard data from %s", label)
    try:
        records = parse_records(fetch_text(source, timeout=timeout, session=session), source=source)
    except (FetchError, ParseError) as exc:
        logger.warning("Leaderboard load failed: %s", exc)
        raise

    logger.info("Loaded %d records from %s", len(records), label)
    return records


async def load_async(source, *, timeout: Optional[float] = DEFAULT_TIMEOUT, client: Optional[httpx.AsyncClient] = None) -> List[RawRecord]:
    label = _describe(source)
    logger.info("Loading leaderboard data from %s", label)
    try:
        text = await fetch_text_async(source, timeout=timeout, client=client)
        records = parse_records(text, source=source)
    except (FetchError, ParseError) as exc:
        logger.warning("Leaderboard load failed: %s", exc)
        raise

    logger.info("Loaded %d records from %s", len(records), label)
    return records


class LoadCoordinator:
    """Honour only the most recently started load.

    Every call to :meth:`load` takes a new generation number. When a call
    finishes after a newer one has started, its records (or its error) are
    discarded and the stale caller gets :class:`SupersededLoad` instead.
    """

    def __init__(self, loader=load_async):
        self._loader = loader
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    async def load(self, source, **kwargs) -> List[RawRecord]:
        self._generation += 1
        generation = self._generation
        try:
            records = await self._loader(source, **kwargs)
        except (FetchError, ParseError) as exc:
            if generation != self._generation:
                raise SupersededLoad(generation, self._generation) from exc
            raise

        if generation != self._generation:
            logger.debug("Discarding superseded load %d (latest %d)", generation, self._generation)
            raise SupersededLoad(generation, self._generation)
        return records
