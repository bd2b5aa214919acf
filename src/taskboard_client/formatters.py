# src/taskboard_client/formatters.py

from __future__ import annotations

from datetime import datetime


def format_date(value: datetime | None) -> str:
    if value is None:
        return "Invalid date"
    return value.strftime("%b %d, %Y %H:%M")


def format_relative_time(value: datetime | None, *, now: datetime | None = None) -> str:
    if value is None:
        return "Unknown time"
    if now is None:
        now = datetime.now(value.tzinfo)
    diff_s = (now - value).total_seconds()
    mins = int(diff_s // 60)
    hours = int(diff_s // 3600)
    days = int(diff_s // 86400)

    if mins < 1:
        return "Just now"
    if mins < 60:
        return f"{mins} minute{'' if mins == 1 else 's'} ago"
    if hours < 24:
        return f"{hours} hour{'' if hours == 1 else 's'} ago"
    if days < 7:
        return f"{days} day{'' if days == 1 else 's'} ago"
    return value.strftime("%b %d, %Y")


def truncate_text(text: str | None, max_length: int = 100) -> str:
    if not text or len(text) <= max_length:
        return text or ""
    return text[:max_length].strip() + "..."


def format_task_status(completed: bool) -> str:
    return "Completed" if completed else "Pending"


def format_percentage(value: int, total: int) -> str:
    if total == 0:
        return "0%"
    # Half-up, not round()'s half-to-even: 1 of 8 is "13%".
    return f"{int(value / total * 100 + 0.5)}%"
