"""Field checks for the login, register and post forms."""

import re
from typing import Dict

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 15


def _check_email(email: str, errors: Dict[str, str]):
    if not email.strip():
        errors["email"] = "Email is required."
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Email is not valid."


def _check_password(password: str, errors: Dict[str, str]):
    if not password.strip():
        errors["password"] = "Password is required."
    elif len(password) < PASSWORD_MIN_LENGTH or len(password) > PASSWORD_MAX_LENGTH:
        errors["password"] = f"Password must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters long."


def validate_login(email: str, password: str) -> Dict[str, str]:
    """Returns field -> message; an empty dict means the form can be submitted."""
    errors: Dict[str, str] = {}
    _check_email(email, errors)
    _check_password(password, errors)
    return errors


def validate_register(name: str, email: str, password: str, confirm_password: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not name.strip():
        errors["name"] = "Name is required."
    _check_email(email, errors)
    _check_password(password, errors)
    if not confirm_password.strip():
        errors["confirm_password"] = "Confirm your password."
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match."
    return errors


def validate_post(title: str, content: str) -> Dict[str, str]:
    errors: Dict[str, str] = {}
    if not title.strip():
        errors["title"] = "Title is required."
    if not content.strip():
        errors["content"] = "Content is required."
    return errors
