from __future__ import annotations

from healthcare.schemas.shared import UserOut


class AuthResponse(UserOut):
    """User fields (never the password) plus a freshly issued bearer token."""
    token: str
