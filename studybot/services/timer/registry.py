"""Timer Registry - in-memory store of active timers"""
import logging
from typing import Dict, Iterator, Optional

from .models.timer_state import TimerEntry

logger = logging.getLogger(__name__)


class TimerRegistry:
    """
    Mapping of "<owner>_<group>" keys to timer entries.

    Owned by a TimerManager; the manager cancels a superseded entry's
    pending callback before calling put() on an occupied key.
    """

    def __init__(self):
        self._timers: Dict[str, TimerEntry] = {}

    def get(self, key: str) -> Optional[TimerEntry]:
        return self._timers.get(key)

    def put(self, key: str, entry: TimerEntry) -> None:
        if key in self._timers:
            logger.info(f"Replacing existing timer {key}")
        self._timers[key] = entry

    def remove(self, key: str, expected: Optional[TimerEntry] = None) -> Optional[TimerEntry]:
        """
        Remove the entry under key.

        With `expected`, only removes when key still maps to that exact entry,
        so a newer timer started under the same key is left alone.
        """
        if expected is not None and self._timers.get(key) is not expected:
            return None
        return self._timers.pop(key, None)

    def active_count(self) -> int:
        return sum(1 for entry in self._timers.values() if not entry.is_terminal)

    def __contains__(self, key: str) -> bool:
        return key in self._timers

    def __len__(self) -> int:
        return len(self._timers)

    def __iter__(self) -> Iterator[TimerEntry]:
        return iter(list(self._timers.values()))
