# src/taskboard_client/validators.py

"""
Form validators: raw field value -> None or one error message.

Pure and synchronous; they never look at the network or the session. Every form runs the same
functions, so the console and any other UI report identical messages.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 50
PASSWORD_MIN_LENGTH = 6
PASSWORD_MAX_LENGTH = 100
TASK_TITLE_MAX_LENGTH = 255
TASK_DESCRIPTION_MAX_LENGTH = 1000

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def validate_username(username: str | None) -> str | None:
    if username is None or not username.strip():
        return "Username is required"
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters"
    if len(username) > USERNAME_MAX_LENGTH:
        return f"Username must be less than {USERNAME_MAX_LENGTH} characters"
    return None


def validate_email(email: str | None) -> str | None:
    if email is None or not email.strip():
        return "Email is required"
    if not EMAIL_RE.match(email):
        return "Please enter a valid email address"
    return None


def validate_password(password: str | None) -> str | None:
    if not password:
        return "Password is required"
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
    if len(password) > PASSWORD_MAX_LENGTH:
        return f"Password must be less than {PASSWORD_MAX_LENGTH} characters"
    return None


def validate_password_confirmation(password: str | None, confirmation: str | None) -> str | None:
    if (confirmation or "") != (password or ""):
        return "Passwords do not match"
    return None


def validate_task_title(title: str | None) -> str | None:
    if title is None or not title.strip():
        return "Title is required"
    if len(title) > TASK_TITLE_MAX_LENGTH:
        return f"Title must be less than {TASK_TITLE_MAX_LENGTH} characters"
    return None


def validate_task_description(description: str | None) -> str | None:
    if description and len(description) > TASK_DESCRIPTION_MAX_LENGTH:
        return f"Description must be less than {TASK_DESCRIPTION_MAX_LENGTH} characters"
    return None


def _collect(checks: Mapping[str, str | None]) -> dict[str, str]:
    return {field: msg for field, msg in checks.items() if msg is not None}


def validate_login_form(form: Mapping[str, Any]) -> dict[str, str]:
    return _collect(
        {
            "username": "Username is required" if _blank(form.get("username")) else None,
            "password": "Password is required" if not form.get("password") else None,
        }
    )


def validate_registration_form(form: Mapping[str, Any]) -> dict[str, str]:
    return _collect(
        {
            "username": validate_username(form.get("username")),
            "email": validate_email(form.get("email")),
            "password": validate_password(form.get("password")),
            "confirm_password": validate_password_confirmation(
                form.get("password"), form.get("confirm_password")
            ),
        }
    )


def validate_task_form(form: Mapping[str, Any]) -> dict[str, str]:
    return _collect(
        {
            "title": validate_task_title(form.get("title")),
            "description": validate_task_description(form.get("description")),
        }
    )
