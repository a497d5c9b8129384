import asyncio

from studybot.services.timer import DeferredNotifier, TimerStatus

from tests.test_timer_state import make_entry


class Recorder:
    def __init__(self, fail: bool = False):
        self.fired = []
        self.fail = fail

    async def __call__(self, entry):
        self.fired.append(entry.key)
        if self.fail:
            raise RuntimeError("boom")


async def test_fires_for_running_entry():
    recorder = Recorder()
    notifier = DeferredNotifier(recorder)
    entry = make_entry()

    task = notifier.arm(entry, 0)
    assert entry.pending_callback is task
    await task

    assert recorder.fired == ["u1_g1"]


async def test_cancel_prevents_firing():
    recorder = Recorder()
    notifier = DeferredNotifier(recorder)
    entry = make_entry()

    task = notifier.arm(entry, 60)
    notifier.cancel(entry)
    await asyncio.sleep(0)

    assert task.cancelled()
    assert entry.pending_callback is None
    assert recorder.fired == []


async def test_rearming_cancels_previous_handle():
    recorder = Recorder()
    notifier = DeferredNotifier(recorder)
    entry = make_entry()

    first = notifier.arm(entry, 60)
    second = notifier.arm(entry, 0)
    await second

    assert first.cancelled()
    assert recorder.fired == ["u1_g1"]


async def test_cancel_without_handle_is_noop():
    notifier = DeferredNotifier(Recorder())
    entry = make_entry()
    notifier.cancel(entry)
    assert entry.pending_callback is None


async def test_skips_entries_no_longer_running():
    recorder = Recorder()
    notifier = DeferredNotifier(recorder)
    entry = make_entry()

    task = notifier.arm(entry, 0)
    entry.status = TimerStatus.PAUSED
    await task

    assert recorder.fired == []


async def test_callback_errors_are_swallowed():
    recorder = Recorder(fail=True)
    notifier = DeferredNotifier(recorder)
    entry = make_entry()

    task = notifier.arm(entry, 0)
    await task

    assert task.exception() is None
    assert recorder.fired == ["u1_g1"]
