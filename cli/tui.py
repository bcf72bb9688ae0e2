#!/usr/bin/env python3
"""Roseboard TUI: to-do list, Pomodoro timer and notes, powered by Textual."""

from __future__ import annotations

import logging
import sys
from typing import Any

from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    Checkbox,
    Footer,
    Header,
    Input,
    Label,
    Static,
    TextArea,
)

from roseboard.auth import CredentialAuth
from roseboard.config import configure_logging
from roseboard.dashboard import Dashboard
from roseboard.local_prefs import LocalPrefs
from roseboard.models import Task
from roseboard.store import FileDocumentStore
from roseboard.timer import BREAK, FOCUS, format_hms
from roseboard.workspace import get_config, prefs_path, store_dir, workspace_root

logger = logging.getLogger(__name__)


# ── Stylesheet ─────────────────────────────────────────────────

CSS = """
Screen {
    background: $surface;
}

#main-layout {
    height: 1fr;
}

#left-pane {
    width: 1fr;
    min-width: 34;
    border-right: tall $primary-background-darken-2;
    padding: 0 1;
}

#right-pane {
    width: 1fr;
    min-width: 30;
    padding: 0 1;
}

.section-title {
    text-style: bold;
    color: $text;
    margin: 1 0 0 0;
    padding: 0 1;
}

#header-line {
    height: auto;
    padding: 0 1;
    color: $text;
    text-style: bold;
}

#stats-line {
    height: auto;
    padding: 0 1;
    color: $warning;
}

#low-energy-banner {
    height: auto;
    padding: 0 1;
    color: $accent;
    display: none;
}

.new-task-row {
    height: auto;
}

#new-task {
    width: 2fr;
}

#new-due {
    width: 1fr;
}

.task-row {
    height: auto;
}

.task-row Checkbox {
    width: 1fr;
}

.task-row Button {
    min-width: 5;
    width: 5;
}

.task-locked {
    opacity: 40%;
}

#pomodoro-display {
    height: 3;
    content-align: center middle;
    text-style: bold;
}

.timer-buttons {
    height: auto;
}

#notes {
    height: 1fr;
    min-height: 6;
}

#eod-line {
    dock: bottom;
    height: auto;
    padding: 0 2;
    color: $accent;
}

#countdown-display {
    height: 1fr;
    content-align: center middle;
    text-style: bold;
}

#countdown-hint {
    dock: bottom;
    height: 1;
    color: $text-muted;
    content-align: center middle;
}

.dialog {
    width: 50;
    height: auto;
    padding: 1 2;
    border: tall $primary;
    background: $surface;
}
"""


# ── Dialogs ────────────────────────────────────────────────────


class LoginScreen(ModalScreen[Any]):
    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Label("Sign in", classes="section-title")
            yield Input(placeholder="username", id="login-user")
            yield Input(placeholder="password", password=True, id="login-pass")
            with Horizontal(classes="timer-buttons"):
                yield Button("Sign in", variant="primary", id="login-ok")
                yield Button("Cancel", id="login-cancel")

    @on(Button.Pressed, "#login-ok")
    @on(Input.Submitted, "#login-pass")
    def _submit(self) -> None:
        user = self.query_one("#login-user", Input).value
        password = self.query_one("#login-pass", Input).value
        self.dismiss((user, password))

    @on(Button.Pressed, "#login-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)


class HeaderEditScreen(ModalScreen[Any]):
    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, title: str, initial: str) -> None:
        super().__init__()
        self._title = title
        self._initial = initial

    def compose(self) -> ComposeResult:
        with Vertical(classes="dialog"):
            yield Label("Header", classes="section-title")
            yield Input(value=self._title, placeholder="title", id="header-title")
            yield Input(value=self._initial, placeholder="initial", max_length=2, id="header-initial")
            with Horizontal(classes="timer-buttons"):
                yield Button("Save", variant="primary", id="header-ok")
                yield Button("Cancel", id="header-cancel")

    @on(Button.Pressed, "#header-ok")
    @on(Input.Submitted)
    def _submit(self) -> None:
        title = self.query_one("#header-title", Input).value
        initial = self.query_one("#header-initial", Input).value
        self.dismiss((title, initial))

    @on(Button.Pressed, "#header-cancel")
    def action_cancel(self) -> None:
        self.dismiss(None)


class CountdownScreen(Screen):
    """Full-screen countdown with minute adjustments."""

    BINDINGS = [
        Binding("space", "toggle_run", "Start/Pause"),
        Binding("up,plus", "more", "+1 min"),
        Binding("down,minus", "less", "-1 min"),
        Binding("escape", "close", "Exit"),
    ]

    def __init__(self, dashboard: Dashboard) -> None:
        super().__init__()
        self.dashboard = dashboard

    def compose(self) -> ComposeResult:
        yield Static(id="countdown-display")
        yield Static("space start/pause · ↑/↓ adjust · esc exit", id="countdown-hint")

    def on_mount(self) -> None:
        self.refresh_display()

    def refresh_display(self) -> None:
        state = self.dashboard.countdown.snapshot()
        marker = "" if state.running else "  (paused)"
        self.query_one("#countdown-display", Static).update(format_hms(state.remaining) + marker)

    def action_toggle_run(self) -> None:
        timer = self.dashboard.countdown
        if timer.running:
            timer.pause()
        else:
            timer.start()
        self.refresh_display()

    def action_more(self) -> None:
        self.dashboard.countdown.adjust_by(self.dashboard.config.adjust_step_seconds)
        self.refresh_display()

    def action_less(self) -> None:
        self.dashboard.countdown.adjust_by(-self.dashboard.config.adjust_step_seconds)
        self.refresh_display()

    def action_close(self) -> None:
        self.dashboard.exit_fullscreen()


class ScreenDisplay:
    """Full-screen port backed by pushing/popping the countdown screen."""

    def __init__(self, app: RoseboardApp) -> None:
        self.app = app

    def request_fullscreen(self) -> None:
        if isinstance(self.app.screen, CountdownScreen):
            return
        self.app.push_screen(CountdownScreen(self.app.dashboard))

    def release_fullscreen(self) -> None:
        if isinstance(self.app.screen, CountdownScreen):
            self.app.pop_screen()


# ── Widgets ────────────────────────────────────────────────────


class TaskRow(Horizontal):
    """One task: checkbox + repeat (recurring only) + delete."""

    def __init__(self, task: Task, locked: bool, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.task_item = task
        self.locked = locked

    def compose(self) -> ComposeResult:
        t = self.task_item
        label = t.title
        if t.due_date:
            label += f"  [{t.due_date}]"
        if t.is_recurring:
            label += "  ↻"
        yield Checkbox(label, value=t.done, id=f"task-{t.id}", disabled=self.locked)
        if t.is_recurring:
            yield Button("↻", id=f"rep-{t.id}", disabled=self.locked)
        yield Button("✕", id=f"del-{t.id}", variant="error", disabled=self.locked)

    def on_mount(self) -> None:
        self.add_class("task-row")
        if self.locked:
            self.add_class("task-locked")


# ── Main app ───────────────────────────────────────────────────


class RoseboardApp(App):
    """Roseboard personal dashboard in the terminal."""

    TITLE = "Roseboard"
    CSS = CSS
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("p", "pomodoro_toggle", "Start/Pause"),
        Binding("r", "pomodoro_reset", "Reset"),
        Binding("m", "pomodoro_mode", "Focus/Break"),
        Binding("f", "fullscreen_timer", "Countdown"),
        Binding("l", "low_energy", "Low energy"),
        Binding("t", "toggle_theme", "Theme"),
        Binding("a", "auto_theme", "Auto theme"),
        Binding("h", "edit_header", "Header"),
        Binding("i", "sign_in_out", "Sign in/out"),
        Binding("escape", "blur_focus", "Back", show=False),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self, dashboard: Dashboard) -> None:
        super().__init__()
        self.dashboard = dashboard
        self.dashboard.presentation.display = ScreenDisplay(self)
        self._ticker = None
        self._slow_ticker = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        yield Horizontal(
            VerticalScroll(
                Static(id="header-line"),
                Static(id="stats-line"),
                Static("Doing less is still doing something. Focus on what matters most.",
                       id="low-energy-banner"),
                Label("To-do", classes="section-title"),
                Horizontal(
                    Input(placeholder="What needs to be done?", id="new-task"),
                    Input(placeholder="YYYY-MM-DD", id="new-due"),
                    Checkbox("Recurring", id="new-recurring"),
                    classes="new-task-row",
                ),
                Vertical(id="task-list"),
                id="left-pane",
                can_focus=False,
            ),
            Vertical(
                Label("Pomodoro", classes="section-title"),
                Static(id="pomodoro-display"),
                Horizontal(
                    Button("Start/Pause", id="pomo-toggle"),
                    Button("Reset", id="pomo-reset"),
                    Button("Full-screen timer", id="open-countdown"),
                    classes="timer-buttons",
                ),
                Label("Notes", classes="section-title"),
                TextArea(id="notes"),
                id="right-pane",
            ),
            id="main-layout",
        )
        yield Static(id="eod-line")
        yield Footer()

    def on_mount(self) -> None:
        self.dashboard.restore_session()
        self._ticker = self.set_interval(self.dashboard.config.tick_interval, self._on_tick)
        self._slow_ticker = self.set_interval(30, self._refresh_slow)
        self._load_data()

    def on_unmount(self) -> None:
        for ticker in (self._ticker, self._slow_ticker):
            if ticker is not None:
                ticker.stop()
        self.dashboard.close()

    def _load_data(self) -> None:
        self.query_one("#notes", TextArea).load_text(self.dashboard.notes)
        self._rebuild_task_list()
        self._refresh_header()
        self._refresh_timers()
        self._refresh_slow()

    # ── Rendering ──────────────────────────────────────────────

    def _rebuild_task_list(self) -> None:
        task_list = self.query_one("#task-list", Vertical)
        task_list.remove_children()
        d = self.dashboard
        if not d.signed_in:
            task_list.mount(Static("Sign in to save tasks (press i).", classes="section-title"))
            return
        for t in d.tasks.tasks:
            task_list.mount(TaskRow(t, locked=d.is_locked(t)))

    def _refresh_header(self) -> None:
        d = self.dashboard
        who = d.identity.name if d.identity else "Guest Mode"
        self.query_one("#header-line", Static).update(f"[{d.header.initial}] {d.header.title}  ·  {who}")
        days = "day" if d.stats.streak == 1 else "days"
        left = f"{d.tasks.remaining} left" + (" (focus mode)" if d.low_energy else " today")
        self.query_one("#stats-line", Static).update(
            f"🔥 {d.stats.streak} {days}  ·  ⏱ {d.stats.focus_time} min  ·  {left}"
        )
        self.query_one("#low-energy-banner", Static).display = d.low_energy

    def _refresh_timers(self) -> None:
        state = self.dashboard.pomodoro.snapshot()
        label = "Focus" if state.mode == FOCUS else "Break"
        marker = "▶" if state.running else "⏸"
        self.query_one("#pomodoro-display", Static).update(f"{marker} {label}  {format_hms(state.remaining)}")
        if isinstance(self.screen, CountdownScreen):
            self.screen.refresh_display()

    def _refresh_slow(self) -> None:
        self.theme = "textual-dark" if self.dashboard.is_dark() else "textual-light"
        self._fetch_evening_message()

    @work(thread=True, exclusive=True)
    def _fetch_evening_message(self) -> None:
        message = self.dashboard.evening_message()
        self.call_from_thread(self._show_evening_message, message)

    def _show_evening_message(self, message: str | None) -> None:
        line = self.query_one("#eod-line", Static)
        line.update(message or "")
        line.display = bool(message)

    def _on_tick(self) -> None:
        focus_before = self.dashboard.stats.focus_time
        self.dashboard.tick()
        self._refresh_timers()
        if self.dashboard.stats.focus_time != focus_before:
            self._refresh_header()

    def _after_task_change(self) -> None:
        self._rebuild_task_list()
        self._refresh_header()

    # ── Task events ────────────────────────────────────────────

    @on(Input.Submitted, "#new-task")
    def _on_new_task(self, event: Input.Submitted) -> None:
        due = self.query_one("#new-due", Input).value.strip() or None
        recurring = self.query_one("#new-recurring", Checkbox).value
        task, errors = self.dashboard.add_task(event.value, due_date=due, is_recurring=recurring)
        if errors:
            self.notify("; ".join(errors), title="Task not added", severity="warning")
            return
        if task is None:
            self.notify("Sign in to save tasks.", severity="warning")
            return
        event.input.value = ""
        self.query_one("#new-due", Input).value = ""
        self.query_one("#new-recurring", Checkbox).value = False
        self._after_task_change()

    @on(Checkbox.Changed)
    def _on_task_toggle(self, event: Checkbox.Changed) -> None:
        widget_id = event.checkbox.id or ""
        if not widget_id.startswith("task-"):
            return
        task_id = widget_id.removeprefix("task-")
        task = self.dashboard.tasks.find(task_id)
        if task is None or task.done == event.value:
            return
        self.dashboard.toggle_task(task_id)
        self._after_task_change()

    @on(Button.Pressed)
    def _on_button(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id.startswith("del-"):
            self.dashboard.remove_task(button_id.removeprefix("del-"))
            self._after_task_change()
        elif button_id.startswith("rep-"):
            self.dashboard.repeat_task(button_id.removeprefix("rep-"))
            self._after_task_change()
        elif button_id == "pomo-toggle":
            self.action_pomodoro_toggle()
        elif button_id == "pomo-reset":
            self.action_pomodoro_reset()
        elif button_id == "open-countdown":
            self.action_fullscreen_timer()

    @on(TextArea.Changed, "#notes")
    def _on_notes_change(self, event: TextArea.Changed) -> None:
        text = event.text_area.text
        if text != self.dashboard.notes:
            self.dashboard.save_notes(text)

    # ── Actions ────────────────────────────────────────────────

    def action_pomodoro_toggle(self) -> None:
        timer = self.dashboard.pomodoro
        if timer.running:
            timer.pause()
        else:
            timer.start()
        self._refresh_timers()

    def action_pomodoro_reset(self) -> None:
        self.dashboard.pomodoro.reset(FOCUS)
        self._refresh_timers()

    def action_pomodoro_mode(self) -> None:
        timer = self.dashboard.pomodoro
        timer.reset(BREAK if timer.mode == FOCUS else FOCUS)
        self._refresh_timers()

    def action_fullscreen_timer(self) -> None:
        self.dashboard.enter_fullscreen()

    def action_low_energy(self) -> None:
        self.dashboard.low_energy = not self.dashboard.low_energy
        self._after_task_change()

    def action_toggle_theme(self) -> None:
        mode = self.dashboard.toggle_theme()
        if mode == "auto":
            self.notify("Auto theme is on; press a to turn it off.")
        self._refresh_slow()

    def action_auto_theme(self) -> None:
        self.dashboard.set_auto_theme(self.dashboard.theme.mode != "auto")
        self._refresh_slow()

    def action_edit_header(self) -> None:
        d = self.dashboard
        self.push_screen(HeaderEditScreen(d.header.title, d.header.initial), self._on_header_edited)

    def _on_header_edited(self, result: Any) -> None:
        if result is None:
            return
        title, initial = result
        self.dashboard.set_header(title=title, initial=initial)
        self._refresh_header()

    def action_sign_in_out(self) -> None:
        if self.dashboard.signed_in:
            self.dashboard.sign_out()
            self._load_data()
            self.notify("Signed out. Guest mode.")
            return
        self.push_screen(LoginScreen(), self._on_login)

    def _on_login(self, result: Any) -> None:
        if result is None:
            return
        username, password = result
        if not self.dashboard.sign_in(username, password):
            self.notify("Sign-in failed. Still in guest mode.", severity="warning")
            return
        self._load_data()
        self.notify(f"Signed in as {self.dashboard.identity.name}.")

    def action_blur_focus(self) -> None:
        self.set_focus(None)

    def action_quit_app(self) -> None:
        self.exit()


# ── Entry point ────────────────────────────────────────────────


def main() -> None:
    configure_logging()
    root = workspace_root()
    if not root.exists():
        print(f"Workspace not found: {root}")
        print("Set ROSEBOARD_ROOT or create the directory first.")
        sys.exit(1)

    config = get_config(root)
    store = FileDocumentStore(store_dir(root))
    prefs = LocalPrefs(prefs_path(root))
    with Dashboard(CredentialAuth.from_env(), store, prefs, config=config) as dashboard:
        RoseboardApp(dashboard).run()


if __name__ == "__main__":
    main()
