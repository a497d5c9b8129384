from studybot.services.timer import TimerEntry, TimerStatus, TimerRegistry, make_timer_key

from tests.conftest import START_TIME


def make_entry(duration: int = 1500, owner: str = "u1", group: str = "g1") -> TimerEntry:
    return TimerEntry(
        owner=owner,
        owner_name="alice",
        group_context=group,
        destination_context="c1",
        label="reading",
        planned_duration_seconds=duration,
        started_at=START_TIME,
        scheduled_end_at=START_TIME + duration,
    )


def test_key_concatenates_owner_and_group():
    assert make_entry().key == "u1_g1" == make_timer_key("u1", "g1")


def test_pause_snapshots_remaining_time():
    entry = make_entry()
    assert entry.pause(START_TIME + 100)
    assert entry.status == TimerStatus.PAUSED
    assert entry.remaining_seconds == 1400
    assert entry.paused_at == START_TIME + 100


def test_pause_is_noop_unless_running():
    entry = make_entry()
    entry.pause(START_TIME + 100)
    assert not entry.pause(START_TIME + 200)
    assert entry.remaining_seconds == 1400

    entry.status = TimerStatus.STOPPED
    assert not entry.pause(START_TIME + 300)


def test_resume_preserves_remaining_time():
    entry = make_entry()
    entry.pause(START_TIME + 100)
    resumed_at = START_TIME + 1000
    assert entry.resume(resumed_at)
    assert entry.status == TimerStatus.RUNNING
    assert entry.scheduled_end_at - resumed_at == 1400


def test_resume_is_noop_when_running():
    entry = make_entry()
    assert not entry.resume(START_TIME + 10)
    assert entry.scheduled_end_at == START_TIME + 1500


def test_elapsed_while_running():
    entry = make_entry()
    assert entry.elapsed_seconds(START_TIME + 300) == 300


def test_elapsed_is_clamped_after_scheduled_end():
    entry = make_entry()
    assert entry.elapsed_seconds(START_TIME + 99999) == 1500


def test_elapsed_while_paused_uses_pause_snapshot():
    entry = make_entry()
    entry.pause(START_TIME + 100)
    assert entry.elapsed_seconds(START_TIME + 5000) == 100


def test_elapsed_excludes_paused_interval():
    entry = make_entry()
    entry.pause(START_TIME + 100)
    entry.resume(START_TIME + 1000)
    assert entry.elapsed_seconds(START_TIME + 1200) == 300


def test_claim_persistence_only_once():
    entry = make_entry()
    assert entry.claim_persistence()
    assert not entry.claim_persistence()
    assert entry.persisted


def test_pending_callback_not_serialized():
    assert "pending_callback" not in make_entry().model_dump()


def test_registry_put_get_remove():
    registry = TimerRegistry()
    entry = make_entry()
    registry.put(entry.key, entry)

    assert registry.get("u1_g1") is entry
    assert "u1_g1" in registry
    assert registry.active_count() == 1
    assert registry.remove("u1_g1") is entry
    assert registry.get("u1_g1") is None
    assert registry.remove("u1_g1") is None


def test_registry_active_count_ignores_terminal_entries():
    registry = TimerRegistry()
    done = make_entry(owner="u1")
    done.status = TimerStatus.COMPLETED
    running = make_entry(owner="u2")
    registry.put(done.key, done)
    registry.put(running.key, running)

    assert len(registry) == 2
    assert registry.active_count() == 1


def test_registry_remove_expected_leaves_replacement():
    registry = TimerRegistry()
    old = make_entry()
    new = make_entry()
    registry.put(old.key, old)
    registry.put(new.key, new)

    assert registry.remove("u1_g1", expected=old) is None
    assert registry.get("u1_g1") is new
    assert registry.remove("u1_g1", expected=new) is new
    assert registry.get("u1_g1") is None
