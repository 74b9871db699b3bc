from __future__ import annotations

import os
import secrets

from fastapi import Header

ADMIN_SECRET_HEADER = "X-Admin-Secret"


class AdminDisabledError(Exception):
    pass


class AdminUnauthorizedError(Exception):
    pass


def verify_admin_secret(candidate: str | None) -> None:
    expected = os.getenv("ADMIN_SECRET")
    if not expected:
        raise AdminDisabledError("admin access is disabled: ADMIN_SECRET is not set")
    if candidate is None or not secrets.compare_digest(candidate, expected):
        raise AdminUnauthorizedError("invalid admin secret")


def require_admin(
    x_admin_secret: str | None = Header(default=None, alias=ADMIN_SECRET_HEADER),
) -> None:
    verify_admin_secret(x_admin_secret)
