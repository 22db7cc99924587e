import unittest

from breaks import (
    BreakConfig,
    BreakScheduler,
    BreakStartedEvent,
    MenuRefreshEvent,
)


class _FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class _FakeIdleSource:
    def __init__(self, idle_seconds=None):
        self.idle_seconds = idle_seconds

    def current_idle_seconds(self):
        return self.idle_seconds


class _FailingIdleSource:
    def current_idle_seconds(self):
        raise OSError("display unavailable")


class _ListPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [type(event).__name__ for event in self.events]


def _build(
    micro: float = 1200,
    long: float = 3600,
    *,
    idle_seconds=None,
    idle_source=None,
):
    clock = _FakeClock()
    idle = idle_source or _FakeIdleSource(idle_seconds)
    publisher = _ListPublisher()
    scheduler = BreakScheduler(
        BreakConfig(micro_interval_seconds=micro, long_interval_seconds=long),
        clock=clock,
        idle_source=idle,
        publisher=publisher,
    )
    return scheduler, clock, idle, publisher


class ActivationTests(unittest.TestCase):
    def test_starts_inactive(self) -> None:
        scheduler, _, _, publisher = _build()

        self.assertEqual("inactive", scheduler.phase)
        self.assertFalse(scheduler.segment("micro").is_running)
        self.assertEqual([], publisher.events)

    def test_activate_arms_both_segments(self) -> None:
        scheduler, _, _, publisher = _build()

        result = scheduler.activate()

        self.assertTrue(result.accepted)
        self.assertEqual("activated", result.reason)
        self.assertEqual("running", scheduler.phase)
        self.assertTrue(scheduler.segment("micro").is_running)
        self.assertTrue(scheduler.segment("long").is_running)
        self.assertEqual(["MenuRefreshEvent"], publisher.types())

    def test_activate_rejected_when_already_running(self) -> None:
        scheduler, _, _, publisher = _build()
        scheduler.activate()
        publisher.events.clear()

        result = scheduler.activate()

        self.assertFalse(result.accepted)
        self.assertEqual("already_active", result.reason)
        self.assertEqual([], publisher.events)

    def test_activate_rejected_while_awaiting_confirmation(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")

        result = scheduler.activate()

        self.assertFalse(result.accepted)
        self.assertEqual("awaiting_confirmation", result.reason)

    def test_tick_does_nothing_when_inactive(self) -> None:
        scheduler, clock, _, publisher = _build()
        clock.advance(5000)

        stats = scheduler.tick()

        self.assertEqual("inactive", stats.phase)
        self.assertEqual([], publisher.events)


class FireTransitionTests(unittest.TestCase):
    def test_tick_before_due_publishes_nothing(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        publisher.events.clear()
        clock.advance(600)

        stats = scheduler.tick()

        self.assertEqual("running", stats.phase)
        self.assertEqual(600.0, stats.time_until_micro)
        self.assertEqual([], publisher.events)

    def test_micro_fire_parks_long_with_credited_progress(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        publisher.events.clear()
        clock.now = 1200

        stats = scheduler.tick()

        self.assertEqual("awaiting_confirmation", stats.phase)
        self.assertEqual("micro", stats.current_break_kind)
        long_segment = scheduler.segment("long")
        self.assertFalse(long_segment.is_running)
        self.assertEqual(1200.0, long_segment.accumulated)
        self.assertFalse(scheduler.segment("micro").is_running)
        self.assertEqual(0.0, scheduler.segment("micro").accumulated)

        self.assertEqual(["BreakStartedEvent", "MenuRefreshEvent"], publisher.types())
        started = publisher.events[0]
        self.assertIsInstance(started, BreakStartedEvent)
        self.assertEqual("micro", started.kind)
        self.assertEqual(20, started.duration_seconds)

    def test_long_fire_discards_micro_progress(self) -> None:
        scheduler, clock, _, publisher = _build(micro=4000, long=3600)
        scheduler.activate()
        clock.now = 3600

        stats = scheduler.tick()

        self.assertEqual("long", stats.current_break_kind)
        micro_segment = scheduler.segment("micro")
        self.assertFalse(micro_segment.is_running)
        self.assertEqual(0.0, micro_segment.accumulated)
        started = [e for e in publisher.events if isinstance(e, BreakStartedEvent)]
        self.assertEqual(["long"], [e.kind for e in started])
        self.assertEqual(600, started[0].duration_seconds)

    def test_micro_wins_when_both_due_on_same_tick(self) -> None:
        scheduler, clock, _, _ = _build(micro=1200, long=1200)
        scheduler.activate()
        clock.now = 1200

        stats = scheduler.tick()

        self.assertEqual("micro", stats.current_break_kind)

    def test_owed_long_break_fires_when_micro_is_confirmed(self) -> None:
        scheduler, clock, _, publisher = _build(micro=1200, long=1200)
        scheduler.activate()
        clock.now = 1200
        scheduler.tick()
        publisher.events.clear()

        result = scheduler.confirm_break()

        self.assertTrue(result.accepted)
        self.assertEqual("long", result.stats.current_break_kind)
        self.assertEqual("awaiting_confirmation", result.stats.phase)
        started = [e for e in publisher.events if isinstance(e, BreakStartedEvent)]
        self.assertEqual(["long"], [e.kind for e in started])

    def test_ticks_while_awaiting_do_not_refire(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        clock.now = 1200
        scheduler.tick()
        publisher.events.clear()

        clock.now = 9000
        scheduler.tick()

        self.assertEqual([], publisher.events)
        self.assertEqual("awaiting_confirmation", scheduler.phase)


class ConfirmationTests(unittest.TestCase):
    def test_confirm_rejected_when_nothing_pending(self) -> None:
        scheduler, _, _, publisher = _build()
        scheduler.activate()
        publisher.events.clear()

        result = scheduler.confirm_break()

        self.assertFalse(result.accepted)
        self.assertEqual("not_awaiting_confirmation", result.reason)
        self.assertEqual([], publisher.events)

    def test_confirm_micro_rearms_and_keeps_long_progress(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        clock.now = 1200
        scheduler.tick()
        clock.now = 1210

        result = scheduler.confirm_break()

        stats = result.stats
        self.assertEqual("running", stats.phase)
        self.assertIsNone(stats.current_break_kind)
        self.assertEqual(1, stats.micro_taken)
        self.assertEqual(0, stats.long_taken)
        self.assertEqual(1, stats.micro_in_cycle)
        self.assertEqual(1200.0, stats.time_until_micro)
        self.assertEqual(2400.0, stats.time_until_long)

    def test_confirm_long_resets_cycle(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")
        scheduler.confirm_break()
        scheduler.manual_break("micro")
        scheduler.confirm_break()
        self.assertEqual(2, scheduler.stats().micro_in_cycle)

        scheduler.manual_break("long")
        result = scheduler.confirm_break()

        self.assertEqual(0, result.stats.micro_in_cycle)
        self.assertEqual(2, result.stats.micro_taken)
        self.assertEqual(1, result.stats.long_taken)
        self.assertEqual(1200.0, result.stats.time_until_micro)
        self.assertEqual(3600.0, result.stats.time_until_long)

    def test_micro_in_cycle_counts_confirmations(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()

        for _ in range(4):
            scheduler.manual_break("micro")
            scheduler.confirm_break()

        self.assertEqual(4, scheduler.stats().micro_in_cycle)
        self.assertEqual(4, scheduler.stats().micro_taken)


class ManualBreakTests(unittest.TestCase):
    def test_manual_micro_while_running(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        clock.now = 300
        publisher.events.clear()

        result = scheduler.manual_break("micro")

        self.assertTrue(result.accepted)
        self.assertEqual("break_started", result.reason)
        self.assertEqual("micro", result.stats.current_break_kind)
        self.assertEqual(300.0, scheduler.segment("long").accumulated)
        self.assertEqual(["BreakStartedEvent", "MenuRefreshEvent"], publisher.types())

    def test_manual_break_rejects_unknown_kind(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()

        result = scheduler.manual_break("lunch")

        self.assertFalse(result.accepted)
        self.assertEqual("unknown_break_kind", result.reason)
        self.assertEqual("running", scheduler.phase)

    def test_manual_break_rejected_while_awaiting(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")

        result = scheduler.manual_break("long")

        self.assertFalse(result.accepted)
        self.assertEqual("awaiting_confirmation", result.reason)
        self.assertEqual("micro", scheduler.last_break_kind)

    def test_manual_break_rejected_while_paused(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.toggle_pause()

        result = scheduler.manual_break("micro")

        self.assertFalse(result.accepted)
        self.assertEqual("not_active", result.reason)
        self.assertEqual("paused", scheduler.phase)

    def test_manual_break_rejected_before_activation(self) -> None:
        scheduler, _, _, _ = _build()

        result = scheduler.manual_break("micro")

        self.assertFalse(result.accepted)
        self.assertEqual("not_active", result.reason)

    def test_manual_break_allowed_while_idle_paused(self) -> None:
        scheduler, clock, idle, _ = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()
        self.assertEqual("idle_paused", scheduler.phase)

        result = scheduler.manual_break("micro")

        self.assertTrue(result.accepted)
        self.assertEqual("awaiting_confirmation", scheduler.phase)

    def test_manual_long_break_from_idle_pause_discards_micro_progress(self) -> None:
        scheduler, clock, idle, publisher = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()
        self.assertEqual("idle_paused", scheduler.phase)
        self.assertEqual(400.0, scheduler.segment("micro").accumulated)
        publisher.events.clear()

        result = scheduler.manual_break("long")

        self.assertTrue(result.accepted)
        self.assertEqual("awaiting_confirmation", scheduler.phase)
        self.assertEqual("long", result.stats.current_break_kind)
        micro = scheduler.segment("micro")
        self.assertEqual(0.0, micro.accumulated)
        self.assertIsNone(micro.running_since)
        self.assertEqual(0.0, scheduler.segment("long").accumulated)
        self.assertEqual(1200.0, result.stats.time_until_micro)
        self.assertEqual(["BreakStartedEvent", "MenuRefreshEvent"], publisher.types())


class PauseTests(unittest.TestCase):
    def test_toggle_pause_rejected_before_activation(self) -> None:
        scheduler, _, _, publisher = _build()

        result = scheduler.toggle_pause()

        self.assertFalse(result.accepted)
        self.assertEqual("not_active", result.reason)
        self.assertEqual("inactive", scheduler.phase)
        self.assertEqual([], publisher.events)

    def test_pause_and_resume_continue_from_accumulated(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        clock.now = 100

        paused = scheduler.toggle_pause()
        clock.now = 500
        resumed = scheduler.toggle_pause()

        self.assertEqual("paused", paused.reason)
        self.assertEqual("paused", paused.stats.phase)
        self.assertEqual(1100.0, paused.stats.time_until_micro)
        self.assertEqual("resumed", resumed.reason)
        self.assertEqual("running", resumed.stats.phase)
        self.assertEqual(1100.0, resumed.stats.time_until_micro)
        self.assertEqual(3500.0, resumed.stats.time_until_long)

        clock.now = 600
        self.assertEqual(1000.0, scheduler.stats().time_until_micro)

    def test_ticks_while_paused_never_fire(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        scheduler.toggle_pause()
        publisher.events.clear()

        clock.now = 10_000
        scheduler.tick()

        self.assertEqual([], publisher.events)
        self.assertEqual("paused", scheduler.phase)

    def test_activate_from_paused_resumes(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        clock.now = 200
        scheduler.toggle_pause()

        result = scheduler.activate()

        self.assertTrue(result.accepted)
        self.assertEqual("running", scheduler.phase)
        self.assertEqual(1000.0, result.stats.time_until_micro)

    def test_pause_during_confirmation_keeps_pending_break(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")

        paused = scheduler.toggle_pause()
        resumed = scheduler.toggle_pause()

        self.assertEqual("paused", paused.stats.phase)
        self.assertEqual("micro", paused.stats.current_break_kind)
        self.assertEqual("awaiting_confirmation", resumed.stats.phase)
        self.assertEqual("micro", resumed.stats.current_break_kind)

    def test_confirm_while_paused_stays_paused(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        clock.now = 400
        scheduler.manual_break("micro")
        scheduler.toggle_pause()

        confirmed = scheduler.confirm_break()

        self.assertTrue(confirmed.accepted)
        self.assertEqual("paused", confirmed.stats.phase)
        self.assertIsNone(confirmed.stats.current_break_kind)
        self.assertFalse(scheduler.segment("micro").is_running)
        self.assertFalse(scheduler.segment("long").is_running)

        clock.now = 1000
        resumed = scheduler.toggle_pause()
        self.assertEqual("running", resumed.stats.phase)
        self.assertEqual(1200.0, resumed.stats.time_until_micro)
        self.assertEqual(3200.0, resumed.stats.time_until_long)

    def test_pause_from_idle_paused(self) -> None:
        scheduler, clock, idle, _ = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()

        paused = scheduler.toggle_pause()
        idle.idle_seconds = 0
        clock.now = 700
        resumed = scheduler.toggle_pause()

        self.assertEqual("paused", paused.stats.phase)
        self.assertEqual("running", resumed.stats.phase)
        self.assertEqual(800.0, resumed.stats.time_until_micro)


class IdleTests(unittest.TestCase):
    def test_idle_over_threshold_credits_only_active_time(self) -> None:
        scheduler, clock, idle, publisher = _build()
        scheduler.activate()
        publisher.events.clear()
        clock.now = 500
        idle.idle_seconds = 100

        stats = scheduler.tick()

        self.assertEqual("idle_paused", stats.phase)
        self.assertEqual(400.0, scheduler.segment("micro").accumulated)
        self.assertEqual(400.0, scheduler.segment("long").accumulated)
        self.assertFalse(scheduler.segment("micro").is_running)
        self.assertEqual(["MenuRefreshEvent"], publisher.types())

    def test_idle_at_threshold_is_not_idle(self) -> None:
        scheduler, clock, idle, _ = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 60

        stats = scheduler.tick()

        self.assertEqual("running", stats.phase)

    def test_idle_correction_happens_once(self) -> None:
        scheduler, clock, idle, publisher = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()
        publisher.events.clear()

        clock.now = 900
        idle.idle_seconds = 500
        scheduler.tick()

        self.assertEqual([], publisher.events)
        self.assertEqual(400.0, scheduler.segment("micro").accumulated)

    def test_activity_resumes_from_preserved_progress(self) -> None:
        scheduler, clock, idle, _ = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()

        clock.now = 800
        idle.idle_seconds = 1
        stats = scheduler.tick()

        self.assertEqual("running", stats.phase)
        self.assertEqual(800.0, stats.time_until_micro)
        self.assertEqual(3200.0, stats.time_until_long)

    def test_unavailable_idle_source_resumes_idle_pause(self) -> None:
        scheduler, clock, idle, _ = _build()
        scheduler.activate()
        clock.now = 500
        idle.idle_seconds = 100
        scheduler.tick()

        idle.idle_seconds = None
        clock.now = 510
        stats = scheduler.tick()

        self.assertEqual("running", stats.phase)

    def test_failing_idle_source_is_treated_as_active(self) -> None:
        scheduler, clock, _, _ = _build(idle_source=_FailingIdleSource())
        scheduler.activate()
        clock.now = 1200

        stats = scheduler.tick()

        self.assertEqual("awaiting_confirmation", stats.phase)
        self.assertEqual("micro", stats.current_break_kind)


class ResetTests(unittest.TestCase):
    def test_reset_clears_counters_and_rearms(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")
        scheduler.confirm_break()
        clock.now = 700
        scheduler.manual_break("long")

        result = scheduler.reset_all()

        self.assertTrue(result.accepted)
        self.assertEqual("reset", result.reason)
        stats = result.stats
        self.assertEqual("running", stats.phase)
        self.assertIsNone(stats.current_break_kind)
        self.assertEqual(0, stats.micro_taken)
        self.assertEqual(0, stats.long_taken)
        self.assertEqual(0, stats.micro_in_cycle)
        self.assertEqual(1200.0, stats.time_until_micro)
        self.assertEqual(3600.0, stats.time_until_long)

    def test_reset_from_paused_runs_again(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.toggle_pause()

        result = scheduler.reset_all()

        self.assertEqual("running", result.stats.phase)


class ReconfigureTests(unittest.TestCase):
    def test_reconfigure_applies_on_next_activation(self) -> None:
        scheduler, clock, _, _ = _build()
        scheduler.activate()
        clock.now = 100

        result = scheduler.reconfigure(
            BreakConfig(micro_interval_seconds=600, long_interval_seconds=1800)
        )
        self.assertTrue(result.accepted)
        self.assertEqual("reconfigured", result.reason)
        self.assertEqual(1200.0, scheduler.config.micro_interval_seconds)

        scheduler.toggle_pause()
        resumed = scheduler.toggle_pause()

        self.assertEqual(600.0, scheduler.config.micro_interval_seconds)
        self.assertEqual(500.0, resumed.stats.time_until_micro)
        self.assertEqual(1700.0, resumed.stats.time_until_long)
        self.assertEqual(3, resumed.stats.max_micro_per_long_cycle)

    def test_shrunk_interval_fires_overdue_break_on_activation(self) -> None:
        scheduler, clock, _, publisher = _build()
        scheduler.activate()
        clock.now = 500
        scheduler.toggle_pause()
        scheduler.reconfigure(
            BreakConfig(micro_interval_seconds=300, micro_duration_seconds=15)
        )
        publisher.events.clear()

        resumed = scheduler.toggle_pause()

        self.assertEqual("awaiting_confirmation", resumed.stats.phase)
        self.assertEqual("micro", resumed.stats.current_break_kind)
        started = [e for e in publisher.events if isinstance(e, BreakStartedEvent)]
        self.assertEqual(15, started[0].duration_seconds)
        long_segment = scheduler.segment("long")
        self.assertFalse(long_segment.is_running)
        self.assertEqual(500.0, long_segment.accumulated)

    def test_reconfigure_applies_after_confirmation(self) -> None:
        scheduler, _, _, _ = _build()
        scheduler.activate()
        scheduler.manual_break("micro")
        scheduler.reconfigure(BreakConfig(micro_interval_seconds=900))

        result = scheduler.confirm_break()

        self.assertEqual(900.0, result.stats.time_until_micro)


class PublishingTests(unittest.TestCase):
    def test_listener_can_call_back_into_scheduler(self) -> None:
        clock = _FakeClock()
        seen = []

        class _ReentrantPublisher:
            def publish(self, event) -> None:
                seen.append((type(event).__name__, scheduler.phase))

        scheduler = BreakScheduler(
            BreakConfig(),
            clock=clock,
            publisher=_ReentrantPublisher(),
        )

        scheduler.activate()
        scheduler.manual_break("long")

        self.assertEqual(
            [
                ("MenuRefreshEvent", "running"),
                ("BreakStartedEvent", "awaiting_confirmation"),
                ("MenuRefreshEvent", "awaiting_confirmation"),
            ],
            seen,
        )

    def test_menu_refresh_carries_current_stats(self) -> None:
        scheduler, _, _, publisher = _build()
        scheduler.activate()

        event = publisher.events[-1]

        self.assertIsInstance(event, MenuRefreshEvent)
        self.assertEqual("running", event.stats.phase)


if __name__ == "__main__":
    unittest.main()
