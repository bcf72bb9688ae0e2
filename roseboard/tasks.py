"""To-do list state: validation, snapshot replacement and store pass-through."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from roseboard.models import Task
from roseboard.store import DocumentStore, StoreError

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = {"title", "done", "dueDate", "isRecurring", "notes"}


def validate_task_input(data: dict[str, Any], partial: bool = False) -> list[str]:
    """Validate task fields (camelCase) and return a list of errors (empty if valid)."""
    errors = []
    unknown = set(data) - EDITABLE_FIELDS
    if unknown:
        errors.append(f"Unknown fields: {', '.join(sorted(unknown))}")

    if "title" in data or not partial:
        title = data.get("title")
        if not isinstance(title, str) or not title.strip():
            errors.append("Missing required field: title")

    due = data.get("dueDate")
    if due:
        try:
            date.fromisoformat(str(due))
        except ValueError:
            errors.append(f"dueDate must be YYYY-MM-DD: {due}")

    for key in ("done", "isRecurring"):
        if key in data and not isinstance(data[key], bool):
            errors.append(f"{key} must be true or false")

    if "notes" in data and not isinstance(data["notes"], str):
        errors.append("notes must be text")

    return errors


def is_non_essential(task: Task, today_iso: str) -> bool:
    """Undone tasks not due today can be set aside on a low-energy day."""
    if task.done:
        return False
    if not task.due_date:
        return True
    return task.due_date != today_iso


class TaskList:
    """Locally cached task list for one view.

    Each store snapshot fully replaces the cache. Mutations go to the
    store and come back through the subscription; without a signed-in
    user they are no-ops.
    """

    def __init__(self) -> None:
        self.tasks: list[Task] = []

    def replace(self, snapshot: list[Task]) -> None:
        self.tasks = list(snapshot)

    def clear(self) -> None:
        self.tasks = []

    @property
    def remaining(self) -> int:
        return sum(1 for t in self.tasks if not t.done)

    def find(self, task_id: str) -> Task | None:
        for t in self.tasks:
            if t.id == task_id:
                return t
        return None

    def add(
        self,
        store: DocumentStore,
        uid: str | None,
        title: str,
        due_date: str | None = None,
        is_recurring: bool = False,
        notes: str = "",
    ) -> tuple[Task | None, list[str]]:
        data: dict[str, Any] = {"title": title.strip(), "isRecurring": is_recurring, "notes": notes}
        if due_date:
            data["dueDate"] = due_date
        errors = validate_task_input(data)
        if errors or uid is None:
            return None, errors
        try:
            return store.add_task(uid, data), []
        except StoreError:
            logger.exception("Error adding task")
            return None, []

    def toggle(self, store: DocumentStore, uid: str | None, task_id: str) -> Task | None:
        task = self.find(task_id)
        if uid is None or task is None:
            return None
        updated, _errors = self.update(store, uid, task_id, {"done": not task.done})
        return updated

    def update(
        self, store: DocumentStore, uid: str | None, task_id: str, updates: dict[str, Any]
    ) -> tuple[Task | None, list[str]]:
        errors = validate_task_input(updates, partial=True)
        if errors or uid is None:
            return None, errors
        if "title" in updates:
            updates = {**updates, "title": updates["title"].strip()}
        try:
            updated = store.update_task(uid, task_id, updates)
        except StoreError:
            logger.exception("Error updating task %s", task_id)
            return None, []
        if updated is None:
            return None, [f"Task not found: {task_id}"]
        return updated, []

    def remove(self, store: DocumentStore, uid: str | None, task_id: str) -> bool:
        if uid is None:
            return False
        try:
            return store.delete_task(uid, task_id)
        except StoreError:
            logger.exception("Error deleting task %s", task_id)
            return False

    def repeat(self, store: DocumentStore, uid: str | None, task_id: str) -> Task | None:
        """Add a fresh copy of a recurring task."""
        task = self.find(task_id)
        if task is None or not task.is_recurring:
            return None
        copy, _errors = self.add(store, uid, task.title, task.due_date, True, task.notes)
        return copy
