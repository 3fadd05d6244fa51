# -*- coding: utf-8 -*-

"""
cbt_admin/security/access_control.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Role checks and test-list scoping.

A supervisor (``pengawas``) that is not also a superadmin may only ever see
the tests it owns. The scoping here runs last, after every user-provided
filter, so nothing typed in the search box can widen it.
"""
from typing import Any, Dict

from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.enums import Role
from cbt_admin.domain.models import Me

logger = configure_logger(__name__)


def has_role(me: Me | None, role: Role) -> bool:
    if me is None:
        return False
    return role.value in me.role_names


def is_superadmin(me: Me | None) -> bool:
    return has_role(me, Role.SUPERADMIN)


def is_supervisor(me: Me | None) -> bool:
    """Supervisor without superadmin rights."""
    return has_role(me, Role.PENGAWAS) and not is_superadmin(me)


def scope_test_query(query: Dict[str, Any], me: Me | None) -> Dict[str, Any]:
    """
    Apply role scoping to a test-list query.

    Args:
        query: Query built from user input
        me: Current user

    Returns:
        Dict[str, Any]: A new query; for supervisors ``searchBySpecific`` is
        ``"user_id"`` and ``search`` is their own id
    """
    scoped = dict(query)
    if is_supervisor(me):
        scoped["searchBySpecific"] = "user_id"
        scoped["search"] = str(me.id)
        logger.debug(f"🔐 Daftar ujian dibatasi ke pengawas {me.id}")
    return scoped

