from .models.timer_state import TimerEntry, TimerStatus, make_timer_key
from .notifier import DeferredNotifier
from .registry import TimerRegistry
from .timer_manager import TimerActionResult, TimerActionStatus, TimerManager

__all__ = [
    "DeferredNotifier",
    "TimerActionResult",
    "TimerActionStatus",
    "TimerEntry",
    "TimerManager",
    "TimerRegistry",
    "TimerStatus",
    "make_timer_key",
]
