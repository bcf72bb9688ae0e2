"""Tests for roseboard/dashboard.py — session lifecycle and cross-concern wiring."""

import json
from datetime import datetime
from zoneinfo import ZoneInfo

from roseboard.dashboard import Dashboard
from roseboard.local_prefs import KEY_FOCUS_TIME


def _today_iso(dashboard):
    return dashboard.now().date().isoformat()


def test_starts_as_guest(dashboard):
    assert dashboard.signed_in is False
    assert dashboard.uid is None
    assert dashboard.header.title == "Your Space"


def test_guest_cannot_add_tasks(dashboard):
    task, errors = dashboard.add_task("Write")
    assert task is None
    assert errors == []


def test_sign_in_attaches_user(dashboard, store):
    assert dashboard.sign_in("rose", "s3cret") is True
    assert dashboard.uid == "rose"
    assert dashboard.stats.streak == 1
    assert store.get_user("rose").last_login_date == "Thu Jan 02 2025"


def test_failed_sign_in_stays_guest(dashboard):
    assert dashboard.sign_in("rose", "wrong") is False
    assert dashboard.signed_in is False


def test_restore_session(auth, store, prefs, clock, now):
    auth.sign_in("rose", "s3cret")
    with Dashboard(auth, store, prefs, clock=clock, now=now) as d:
        assert d.restore_session() is True
        assert d.uid == "rose"


def test_tasks_follow_subscription(dashboard):
    dashboard.sign_in("rose", "s3cret")
    task, _ = dashboard.add_task("Write")
    assert [t.id for t in dashboard.tasks.tasks] == [task.id]
    dashboard.toggle_task(task.id)
    assert dashboard.tasks.remaining == 0
    dashboard.remove_task(task.id)
    assert dashboard.tasks.tasks == []


def test_low_energy_locks_non_essential_tasks(dashboard):
    dashboard.sign_in("rose", "s3cret")
    later, _ = dashboard.add_task("Someday")
    today, _ = dashboard.add_task("Today", due_date=_today_iso(dashboard))
    dashboard.low_energy = True

    assert dashboard.is_locked(dashboard.tasks.find(later.id)) is True
    assert dashboard.toggle_task(later.id) is None
    assert dashboard.remove_task(later.id) is False
    assert dashboard.toggle_task(today.id).done is True

    dashboard.low_energy = False
    assert dashboard.toggle_task(later.id).done is True


def test_pomodoro_completion_adds_focus_time(dashboard, clock, store):
    dashboard.sign_in("rose", "s3cret")
    dashboard.pomodoro.start()
    clock.advance(25 * 60)
    dashboard.tick()
    assert dashboard.stats.focus_time == 25
    assert store.get_user("rose").focus_time == 25


def test_guest_countdown_adds_focus_time_locally(dashboard, clock, prefs):
    dashboard.countdown.start()
    clock.advance(5 * 60)
    dashboard.countdown.pause()
    assert dashboard.stats.focus_time == 5
    assert prefs.get(KEY_FOCUS_TIME) == "5"


def test_sign_out_returns_to_guest(dashboard, prefs):
    prefs.set(KEY_FOCUS_TIME, "12")
    dashboard.sign_in("rose", "s3cret")
    dashboard.add_task("Write")
    dashboard.sign_out()
    assert dashboard.signed_in is False
    assert dashboard.tasks.tasks == []
    assert dashboard.stats.focus_time == 12
    assert dashboard.stats.streak == 0


def test_close_stops_task_updates(dashboard, store):
    dashboard.sign_in("rose", "s3cret")
    dashboard.close()
    store.add_task("rose", {"title": "Late"})
    assert dashboard.tasks.tasks == []
    dashboard.close()


def test_streak_across_days(dashboard, now):
    dashboard.sign_in("rose", "s3cret")
    dashboard.sign_out()
    now.value = datetime(2025, 1, 3, 8, 0, tzinfo=ZoneInfo("UTC"))
    dashboard.sign_in("rose", "s3cret")
    assert dashboard.stats.streak == 2


def test_notes_saved_for_signed_in_user(dashboard, store):
    dashboard.sign_in("rose", "s3cret")
    dashboard.save_notes("remember the milk")
    assert store.get_user("rose").global_notes == "remember the milk"


def test_header_and_theme_sync(dashboard, store):
    dashboard.sign_in("rose", "s3cret")
    dashboard.set_header(title="Rose", initial="r")
    assert dashboard.toggle_theme() == "light"
    settings = store.get_user("rose").settings
    assert settings.header_title == "Rose"
    assert settings.header_initial == "R"
    assert settings.theme_mode == "light"
    assert dashboard.is_dark() is False


def test_auto_theme_uses_local_hour(dashboard, now):
    dashboard.set_auto_theme(True)
    assert dashboard.is_dark() is False
    now.value = datetime(2025, 1, 2, 20, 0, tzinfo=ZoneInfo("UTC"))
    assert dashboard.is_dark() is True


def test_evening_message_cached_per_day(dashboard, now):
    assert dashboard.evening_message() is None
    now.value = datetime(2025, 1, 2, 21, 30, tzinfo=ZoneInfo("UTC"))
    assert dashboard.evening_message() == "Fetched message"
    assert dashboard.evening_message() == "Fetched message"
    assert len(dashboard.fetch_calls) == 1


def test_fullscreen_uses_display(dashboard):
    calls = []

    class Display:
        def request_fullscreen(self):
            calls.append("enter")

        def release_fullscreen(self):
            calls.append("exit")

    dashboard.presentation.display = Display()
    dashboard.enter_fullscreen()
    assert dashboard.presentation.open is True
    dashboard.exit_fullscreen()
    assert calls == ["enter", "exit"]


def test_sign_in_with_malformed_record_keeps_defaults(dashboard, store):
    path = store.root / "users" / "rose" / "user.json"
    path.parent.mkdir(parents=True)
    path.write_text(json.dumps({"streak": "many", "settings": {"themeMode": "light"}}), encoding="utf-8")
    assert dashboard.sign_in("rose", "s3cret") is True
    assert dashboard.signed_in is True
    assert dashboard.stats.streak == 0
    assert dashboard.theme.mode == "dark"
    assert dashboard.notes == ""


def test_sign_in_defaults_header_from_name(dashboard, store):
    dashboard.sign_in("rose", "s3cret")
    assert dashboard.header.title == "Your Space"
    assert dashboard.header.initial == "R"
    assert store.get_user("rose").settings.header_initial == "R"
