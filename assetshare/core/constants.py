from __future__ import annotations

ANONYMOUS_DISPLAY_NAME = "Anonymous"

DEFAULT_STATUSES: tuple[tuple[str, str], ...] = (
    ("draft", "Items that are still being prepared"),
    ("general", "Items in regular use"),
    ("hidden", "Items hidden from the overview"),
    ("urgent", "Items that need attention soon"),
)
