# -*- coding: utf-8 -*-
"""
Sidebar menu of the current user.
"""

from fastapi import APIRouter, Depends

from cbt_admin.domain.models import Me
from cbt_admin.security.navigation import MenuBundle, menu_for
from cbt_admin.security.security import get_current_user

router = APIRouter(prefix="/navigation", tags=["🧭 Navigasi"])


@router.get("", response_model=MenuBundle)
async def get_navigation(me: Me = Depends(get_current_user)):
    """Menu of the caller's first role; unknown roles get the supervisor menu."""
    return menu_for(me)
