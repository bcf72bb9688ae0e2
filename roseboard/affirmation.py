"""Deterministic daily affirmation messages.

A date string is folded into a 32-bit seed, and the seed picks one
template plus one entry from each slot pool. The same date string always
yields the same message, so the message stays stable for a whole day.
"""

from __future__ import annotations

from datetime import date

TEMPLATES = (
    "You {action} today. {encouragement}",
    "{encouragement} You've {verb} through another day.",
    "Rest now. {future_action}",
    "{accomplishment}, and that's enough.",
    "Your {quality} matters. Take care of yourself.",
)

ACTIONS = (
    "did enough",
    "showed up",
    "made it through",
    "gave your best",
    "tried your hardest",
)

ENCOURAGEMENTS = (
    "Well done",
    "Good work",
    "You've got this",
    "Keep going",
    "Be proud",
)

VERBS = (
    "made it",
    "pushed through",
    "powered through",
    "persevered",
    "carried on",
)

ACCOMPLISHMENTS = (
    "You showed up today",
    "You tried your best",
    "You kept going",
    "You made progress",
    "You did your part",
)

QUALITIES = (
    "effort",
    "courage",
    "persistence",
    "strength",
    "resilience",
)

FUTURE_ACTIONS = (
    "Tomorrow is a fresh start.",
    "Tomorrow awaits your greatness.",
    "Tomorrow will be better.",
    "Tomorrow needs you.",
    "Tomorrow is a new opportunity.",
)

# slot name -> (pool, offset added to the seed before picking)
SLOTS: dict[str, tuple[tuple[str, ...], int]] = {
    "action": (ACTIONS, 1),
    "encouragement": (ENCOURAGEMENTS, 2),
    "verb": (VERBS, 3),
    "accomplishment": (ACCOMPLISHMENTS, 4),
    "quality": (QUALITIES, 5),
    "future_action": (FUTURE_ACTIONS, 6),
}

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def to_int32(n: int) -> int:
    """Wrap *n* to a signed 32-bit integer."""
    n &= 0xFFFFFFFF
    return n - 0x100000000 if n & 0x80000000 else n


def _code_units(s: str) -> list[int]:
    data = s.encode("utf-16-le", errors="surrogatepass")
    return [int.from_bytes(data[i:i + 2], "little") for i in range(0, len(data), 2)]


def date_seed(date_key: str) -> int:
    """Rolling ``seed * 31 + c`` hash over UTF-16 code units, wrapped at 32 bits."""
    seed = 0
    for c in _code_units(date_key):
        seed = to_int32(seed * 31 + c)
    return seed


def pick_indices(seed: int) -> dict[str, int]:
    """Template and slot indices for *seed*.

    ``abs(-2**31)`` is ``2**31`` here, so indices are never negative.
    """
    base = abs(seed)
    picks = {"template": base % len(TEMPLATES)}
    for name, (pool, offset) in SLOTS.items():
        picks[name] = (base + offset) % len(pool)
    return picks


def generate(date_key: str) -> str:
    """Build the affirmation for *date_key*. Any string, including "", is valid."""
    picks = pick_indices(date_seed(date_key))
    fills = {name: pool[picks[name]] for name, (pool, _offset) in SLOTS.items()}
    return TEMPLATES[picks["template"]].format(**fills)


def format_date_key(d: date) -> str:
    """Locale-independent long date, e.g. ``Thu Jan 02 2025``."""
    return f"{_WEEKDAYS[d.weekday()]} {_MONTHS[d.month - 1]} {d.day:02d} {d.year:04d}"
