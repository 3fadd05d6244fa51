# -*- coding: utf-8 -*-
"""
cbt_admin/api/v1/__init__.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Root router of the BFF, mounted under ``/api/v1/cms``.
"""

from fastapi import APIRouter

from .navigation import router as navigation_router
from .questions import router as questions_router
from .tests import router as tests_router
from .uploads import router as uploads_router

router = APIRouter()

router.include_router(navigation_router)
router.include_router(questions_router)
router.include_router(uploads_router)
router.include_router(tests_router)
