"""
client/validation.py -- Form checks run before a request is sent.

These duplicate a subset of the server's checks so obviously bad input is
caught without a round trip. They are a convenience, not a security
boundary: the server validates everything again and its answer wins.

Each function returns None when the input is acceptable, or the message to
show the user.
"""

import math
from typing import Optional

MIN_PASSWORD_LENGTH = 6


def check_login(email: str, password: str) -> Optional[str]:
    if not email or not password:
        return "Please fill in all fields"
    return None


def check_registration(name: str, email: str, password: str, confirm_password: str) -> Optional[str]:
    if not name or not email or not password or not confirm_password:
        return "Please fill in all fields"
    if password != confirm_password:
        return "Passwords do not match"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def parse_price(raw: str) -> Optional[float]:
    """Return raw as a non-negative float, or None if it is not one."""
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def check_product(name: str, price: str) -> Optional[str]:
    """Validate the product form fields (price as typed, i.e. a string)."""
    if not name or not price:
        return "Name and price are required"
    if parse_price(price) is None:
        return "Price must be a valid number"
    return None
