"""Outcome producers: a seeded simulator and the TipMiner history feed."""
import logging
import random
from datetime import datetime, timedelta

import requests

from doubleminer.core.types import Color, Outcome, as_utc, utcnow
from doubleminer.core.validation import InvalidOutcomeError, validate_outcome

logger = logging.getLogger(__name__)

# TipMiner color codes
TIPMINER_COLORS = {0: Color.WHITE, 1: Color.RED, 2: Color.BLACK}


class SimulatedSource:
    """Draws outcomes with the house odds: 2% white, 49% red, 49% black."""

    def __init__(self, seed: int | None = None, clock=utcnow):
        self.rng = random.Random(seed)
        self.clock = clock
        self._last_id = 0

    def _draw(self, ts: datetime) -> Outcome:
        r = self.rng.random()
        if r < 0.02:
            color, number = Color.WHITE, 0
        elif r < 0.51:
            color, number = Color.RED, self.rng.randint(1, 7)
        else:
            color, number = Color.BLACK, self.rng.randint(8, 14)
        oid = max(int(ts.timestamp() * 1000), self._last_id + 1)
        self._last_id = oid
        return Outcome(id=oid, color=color, number=number, timestamp=ts)

    def fetch_history(self, limit: int = 100) -> list[Outcome]:
        now = as_utc(self.clock())
        return [self._draw(now - timedelta(minutes=i)) for i in range(limit, -1, -1)]

    def fetch_latest(self) -> Outcome | None:
        return self._draw(as_utc(self.clock()))

    def check_availability(self) -> bool:
        return True


class TipMinerSource:
    """Reads `{id, color, roll, created_at}` rows from a TipMiner JSON endpoint."""

    def __init__(self, url: str, timeout: float = 10.0, session: requests.Session | None = None):
        self.url = url
        self.timeout = timeout
        self.http = session or requests.Session()

    def _get(self, limit: int) -> list[dict]:
        r = self.http.get(self.url, params={'limit': limit}, timeout=self.timeout)
        r.raise_for_status()
        data = r.json()
        if isinstance(data, dict):
            data = data.get('records') or data.get('data') or []
        return data

    @staticmethod
    def convert(row: dict) -> Outcome:
        color = TIPMINER_COLORS.get(row.get('color'))
        if color is None:
            raise InvalidOutcomeError(f"unknown TipMiner color: {row.get('color')!r}")
        ts = row.get('created_at', '')
        if isinstance(ts, str) and ts.endswith('Z'):
            ts = ts[:-1] + '+00:00'
        return validate_outcome({'id': row.get('id'), 'color': color, 'number': row.get('roll'), 'timestamp': ts})

    def fetch_history(self, limit: int = 100) -> list[Outcome]:
        try:
            rows = self._get(limit)
        except (requests.RequestException, ValueError):
            logger.warning("TipMiner history fetch failed", exc_info=True)
            return []
        out = []
        for row in rows:
            try:
                out.append(self.convert(row))
            except InvalidOutcomeError as e:
                logger.warning("dropping malformed row %s: %s", row.get('id'), e)
        out.sort(key=lambda o: o.timestamp)
        return out[-limit:]

    def fetch_latest(self) -> Outcome | None:
        rows = self.fetch_history(limit=1)
        return rows[-1] if rows else None

    def check_availability(self) -> bool:
        try:
            r = self.http.get(self.url, params={'limit': 1}, timeout=self.timeout)
            return r.ok
        except requests.RequestException:
            logger.warning("TipMiner unavailable", exc_info=True)
            return False


def make_source(kind: str, url: str | None = None, seed: int | None = None):
    if kind == 'tipminer':
        return TipMinerSource(url)
    return SimulatedSource(seed=seed)
