# -*- coding: utf-8 -*-
"""cbt_admin.security.security
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Caller identity and role checks for the BFF routes.

Tokens are issued and verified by the remote exam API; this side only
requires that one is present and asks ``/me`` who it belongs to.
"""

from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from cbt_admin.clients.exam_api_client import ExamApiClient, get_exam_api
from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.enums import Role
from cbt_admin.domain.models import Me
from cbt_admin.utils.exceptions import PermissionDeniedError, RemoteAPIError

logger = configure_logger(__name__)


def _extract_token(request: Request) -> str:
    auth: str | None = request.headers.get("Authorization")
    if not auth or not auth.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token tidak ditemukan",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth.split(" ", 1)[1]


async def get_current_user(
    request: Request, api: ExamApiClient = Depends(get_exam_api)
) -> Me:
    """
    Current user, as reported by the remote API.

    Raises:
        HTTPException: No token, or the remote API rejected it
        RemoteAPIError: The remote API failed for another reason
    """
    _extract_token(request)
    try:
        return await api.get_me()
    except RemoteAPIError as exc:
        if exc.remote_status in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN):
            logger.warning(f"Token ditolak oleh API untuk {request.url.path}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token tidak valid atau kedaluwarsa",
                headers={"WWW-Authenticate": "Bearer"},
            ) from exc
        raise


def require_roles(*allowed_roles: Role) -> Callable:
    allowed = {role.value for role in allowed_roles}

    async def checker(request: Request, me: Me = Depends(get_current_user)) -> Me:
        if not allowed.intersection(me.role_names):
            logger.warning(
                f"Akses ditolak: pengguna {me.id} dengan role {me.role_names} ke {request.url.path}"
            )
            raise PermissionDeniedError()
        return me

    return checker


superadmin_only = require_roles(Role.SUPERADMIN)

staff = require_roles(Role.SUPERADMIN, Role.PENGAWAS)
