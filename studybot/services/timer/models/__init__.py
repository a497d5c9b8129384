from .timer_state import TimerEntry, TimerStatus, make_timer_key

__all__ = ["TimerEntry", "TimerStatus", "make_timer_key"]
