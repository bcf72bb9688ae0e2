"""Tests for roseboard/timer.py — drift resistance, flip/stop policies, presentation."""

import pytest

from roseboard.timer import (
    BREAK,
    COUNTDOWN,
    FOCUS,
    Presentation,
    Timer,
    TimerConfig,
    countdown_config,
    format_hms,
    pomodoro_config,
    round_minutes,
)


def _pomodoro(clock, reports=None):
    return Timer(pomodoro_config(25, 5), clock=clock,
                 on_focus_time=None if reports is None else reports.append)


def _countdown(clock, seconds=600, reports=None):
    return Timer(countdown_config(seconds), clock=clock,
                 on_focus_time=None if reports is None else reports.append)


# ── Config ─────────────────────────────────────────────────────


def test_pomodoro_config():
    cfg = pomodoro_config(25, 5)
    assert cfg.duration(FOCUS) == 1500
    assert cfg.duration(BREAK) == 300
    assert cfg.initial_mode == FOCUS


def test_flip_config_needs_focus_and_break():
    with pytest.raises(ValueError):
        TimerConfig(durations={FOCUS: 60}, initial_mode=FOCUS, completion="flip")


def test_invalid_completion_policy():
    with pytest.raises(ValueError):
        TimerConfig(durations={COUNTDOWN: 60}, initial_mode=COUNTDOWN, completion="loop")


def test_round_minutes_half_up():
    assert round_minutes(89) == 1
    assert round_minutes(90) == 2
    assert round_minutes(29) == 0
    assert round_minutes(1500) == 25


# ── Basic state ────────────────────────────────────────────────


def test_initial_state(clock):
    t = _pomodoro(clock)
    state = t.snapshot()
    assert state.mode == FOCUS
    assert state.remaining == 1500
    assert state.running is False


def test_tick_while_idle_does_nothing(clock):
    t = _pomodoro(clock)
    clock.advance(100)
    assert t.tick() is False
    assert t.remaining == 1500


def test_remaining_derives_from_clock(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(10.4)
    t.tick()
    assert t.remaining == pytest.approx(1489.6)
    assert t.snapshot().display_seconds == 1489


def test_late_ticks_lose_no_time(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(0.1)
    t.tick()
    # one very late tick
    clock.advance(59.9)
    t.tick()
    assert t.remaining == pytest.approx(1440)


def test_start_is_idempotent(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(30)
    t.start()
    t.tick()
    assert t.remaining == pytest.approx(1470)


def test_pause_freezes_remaining(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(20)
    t.tick()
    t.pause()
    clock.advance(500)
    t.tick()
    assert t.running is False
    assert t.remaining == pytest.approx(1480)


def test_resume_continues_from_paused_value(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(100)
    t.tick()
    t.pause()
    clock.advance(1000)
    t.start()
    clock.advance(50)
    t.tick()
    assert t.remaining == pytest.approx(1350)


def test_reset_restores_duration(clock):
    t = _pomodoro(clock)
    t.start()
    clock.advance(100)
    t.tick()
    t.reset()
    assert t.running is False
    assert t.remaining == 1500


def test_reset_to_other_mode(clock):
    t = _pomodoro(clock)
    t.reset(BREAK)
    assert t.mode == BREAK
    assert t.remaining == 300


def test_reset_unknown_mode(clock):
    t = _pomodoro(clock)
    with pytest.raises(ValueError):
        t.reset("nap")


# ── Flip policy ────────────────────────────────────────────────


def test_focus_completion_flips_and_reports(clock):
    reports = []
    t = _pomodoro(clock, reports)
    t.start()
    clock.advance(1500)
    assert t.tick() is True
    assert t.mode == BREAK
    assert t.remaining == 300
    assert t.running is True
    assert reports == [25]


def test_break_completion_does_not_report(clock):
    reports = []
    t = _pomodoro(clock, reports)
    t.start()
    clock.advance(1500)
    t.tick()
    t.tick()  # arms the break session
    clock.advance(300)
    assert t.tick() is True
    assert t.mode == FOCUS
    assert t.remaining == 1500
    assert reports == [25]


def test_pomodoro_pause_does_not_report(clock):
    reports = []
    t = _pomodoro(clock, reports)
    t.start()
    clock.advance(600)
    t.tick()
    t.pause()
    t.reset()
    assert reports == []


def test_flip_reports_configured_minutes_after_adjust(clock):
    reports = []
    t = _pomodoro(clock, reports)
    t.adjust_by(-1440)
    t.start()
    clock.advance(60)
    t.tick()
    assert reports == [25]


# ── Stop policy ────────────────────────────────────────────────


def test_countdown_stops_at_zero_and_reports(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(600)
    assert t.tick() is True
    assert t.running is False
    assert t.remaining == 0
    assert t.mode == COUNTDOWN
    assert reports == [10]


def test_countdown_pause_reports_elapsed_minutes(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(90)
    t.tick()
    t.pause()
    assert reports == [2]


def test_countdown_short_run_reports_nothing(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(20)
    t.pause()
    assert reports == []


def test_countdown_reset_while_running_reports(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(180)
    t.reset()
    assert reports == [3]
    assert t.remaining == 600


def test_countdown_reports_each_run_once(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(120)
    t.pause()
    t.pause()
    t.start()
    clock.advance(60)
    t.pause()
    assert reports == [2, 1]


def test_callback_failure_does_not_break_timer(clock):
    def boom(_minutes):
        raise RuntimeError("store down")

    t = Timer(countdown_config(60), clock=clock, on_focus_time=boom)
    t.start()
    clock.advance(60)
    assert t.tick() is True
    assert t.running is False


# ── Adjustments ────────────────────────────────────────────────


def test_adjust_while_idle(clock):
    t = _countdown(clock, 600)
    t.adjust_by(60)
    assert t.remaining == 660
    t.adjust_by(-1000)
    assert t.remaining == 0


def test_adjust_while_running_keeps_elapsed(clock):
    t = _countdown(clock, 600)
    t.start()
    clock.advance(100)
    t.adjust_by(60)
    assert t.remaining == pytest.approx(560)
    clock.advance(10)
    t.tick()
    assert t.remaining == pytest.approx(550)


def test_adjust_below_zero_completes_on_next_tick(clock):
    reports = []
    t = _countdown(clock, 600, reports)
    t.start()
    clock.advance(120)
    t.adjust_by(-600)
    assert t.remaining == 0
    assert t.tick() is True
    assert t.running is False
    assert reports == [2]


# ── Presentation ───────────────────────────────────────────────


class RecordingDisplay:
    def __init__(self, fail=False):
        self.calls = []
        self.fail = fail

    def request_fullscreen(self):
        self.calls.append("enter")
        if self.fail:
            raise RuntimeError("denied")

    def release_fullscreen(self):
        self.calls.append("exit")
        if self.fail:
            raise RuntimeError("denied")


def test_presentation_toggles_display():
    display = RecordingDisplay()
    p = Presentation(display)
    p.enter()
    assert p.open is True
    p.exit()
    assert p.open is False
    assert display.calls == ["enter", "exit"]


def test_presentation_ignores_display_errors():
    p = Presentation(RecordingDisplay(fail=True))
    p.enter()
    assert p.open is True
    p.exit()
    assert p.open is False


def test_presentation_without_display():
    p = Presentation()
    p.enter()
    assert p.open is True


def test_presentation_is_independent_of_running(clock):
    t = _countdown(clock, 600)
    p = Presentation()
    t.start()
    p.enter()
    p.exit()
    assert t.running is True


# ── Formatting ─────────────────────────────────────────────────


def test_format_hms():
    assert format_hms(0) == "00:00"
    assert format_hms(59.9) == "00:59"
    assert format_hms(1500) == "25:00"
    assert format_hms(3661) == "01:01:01"
    assert format_hms(-5) == "00:00"


# ── Time to zero ───────────────────────────────────────────────


def test_late_tick_past_zero_stops_countdown(clock):
    t = Timer(countdown_config(5), clock=clock)
    t.start()
    clock.advance(5.2)
    assert t.tick() is True
    assert t.remaining == 0
    assert t.running is False
    assert t.mode == COUNTDOWN


def test_late_tick_past_zero_flips_pomodoro(clock):
    t = Timer(TimerConfig(durations={FOCUS: 5, BREAK: 3}, initial_mode=FOCUS, completion="flip"), clock=clock)
    t.start()
    clock.advance(5.2)
    assert t.tick() is True
    assert t.mode == BREAK
    assert t.remaining == 3
    assert t.running is True
    assert t.session_start is None


@pytest.mark.parametrize("make_timer, duration", [
    (lambda clock: Timer(countdown_config(60), clock=clock), 60),
    (lambda clock: Timer(pomodoro_config(1, 1), clock=clock), 60),
])
def test_pause_resume_cycles_keep_total_running_time(clock, make_timer, duration):
    t = make_timer(clock)
    ran = 0.0
    for run in (10, 20, 15):
        t.start()
        clock.advance(run)
        t.tick()
        t.pause()
        ran += run
        clock.advance(100)

    t.start()
    while not t.tick():
        clock.advance(0.1)
        ran += 0.1
    assert ran == pytest.approx(duration, abs=0.11)
