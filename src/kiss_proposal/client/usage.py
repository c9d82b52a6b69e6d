"""Client-local daily usage counter.

The counter lives in a small JSON file on the user's machine, the same way a
browser keeps it in local storage. It only throttles accidental overuse from
one profile; nothing on the server enforces it.
"""
from __future__ import annotations
import json
import logging
import os
from datetime import date
from pathlib import Path
from typing import Callable

from kiss_proposal.common.schema import UsageCounter

LOGGER = logging.getLogger("kiss_proposal.client.usage")

DEFAULT_USAGE_FILE = Path.home() / ".kiss_proposal" / "usage.json"
DEFAULT_DAILY_LIMIT = int(os.getenv("KISS_DAILY_LIMIT", "5"))


def _today() -> str:
    return date.today().isoformat()


class UsageStore:
    def __init__(
        self,
        path: str | Path = DEFAULT_USAGE_FILE,
        daily_limit: int = DEFAULT_DAILY_LIMIT,
        today: Callable[[], str] = _today,
    ) -> None:
        self.path = Path(path)
        self.daily_limit = daily_limit
        self._today = today
        self.counter = UsageCounter(count=0, date_stamp=today())

    def load(self) -> UsageCounter:
        """Read the persisted record, then reset it if it belongs to another day."""
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            self.counter = UsageCounter(count=int(raw["count"]), date_stamp=str(raw["dateStamp"]))
        except FileNotFoundError:
            self.counter = UsageCounter(count=0, date_stamp=self._today())
        except (OSError, ValueError, KeyError, TypeError) as e:
            LOGGER.warning("Ignoring unreadable usage record %s: %s", self.path, e)
            self.counter = UsageCounter(count=0, date_stamp=self._today())
        self.reset_if_new_day()
        return self.counter

    def reset_if_new_day(self) -> bool:
        today = self._today()
        if self.counter.date_stamp == today:
            return False
        LOGGER.debug("New day %s, resetting usage (was %s)", today, self.counter)
        self.counter = UsageCounter(count=0, date_stamp=today)
        self._save()
        return True

    def increment(self) -> UsageCounter:
        self.reset_if_new_day()
        self.counter.count += 1
        self._save()
        return self.counter

    @property
    def remaining(self) -> int:
        return max(self.daily_limit - self.counter.count, 0)

    @property
    def exhausted(self) -> bool:
        return self.counter.count >= self.daily_limit

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self.counter.to_record()), encoding="utf-8")
