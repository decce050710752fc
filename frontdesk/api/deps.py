from __future__ import annotations

from typing import Callable, Literal, get_args

from fastapi import Depends, Header, HTTPException, status

from frontdesk.core.config import AppConfig, get_settings

Role = Literal["admin", "staff", "patient"]
ROLES: tuple[str, ...] = get_args(Role)

STAFF_ROLES = ("admin", "staff")


def get_app_settings() -> AppConfig:
    return get_settings()


def current_role(
    settings: AppConfig = Depends(get_app_settings),
    x_demo_role: str | None = Header(default=None, alias="x-demo-role"),
) -> str:
    """Role for this request.

    The ``x-demo-role`` header is a development override standing in for the role
    switcher; it is not authentication.
    """
    if x_demo_role and settings.allow_role_override:
        role = x_demo_role.strip().lower()
        if role not in ROLES:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown role '{x_demo_role}'")
        return role
    return settings.default_role


def require_roles(*allowed: str) -> Callable[..., str]:
    def _guard(role: str = Depends(current_role)) -> str:
        if role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{role}' may not perform this action",
            )
        return role

    return _guard
