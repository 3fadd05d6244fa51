# -*- coding: utf-8 -*-
"""
cbt_admin/api/v1/questions/routes.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Category-scoped question list and import/export jobs.
"""

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from cbt_admin.api.v1.shared.schemas import (ActionResultSchema,
                                             ExportQuestionsRequest,
                                             QuestionListSchema,
                                             TemplateSchema)
from cbt_admin.clients.exam_api_client import ExamApiClient, get_exam_api
from cbt_admin.config.logger import configure_logger
from cbt_admin.config.settings import settings
from cbt_admin.domain.models import Me
from cbt_admin.security.security import superadmin_only
from cbt_admin.service.question_list import (PICK_CATEGORY_MESSAGE,
                                             QuestionListController)
from cbt_admin.service.reporting import LoggingReporter
from cbt_admin.utils.exceptions import ValidationError

logger = configure_logger(__name__)

router = APIRouter(prefix="/questions", tags=["📚 Bank Soal"])


@router.get("", response_model=QuestionListSchema)
async def list_questions(
    question_category_id: int | None = Query(None, gt=0),
    page: int = Query(1, ge=1),
    search: str = Query(""),
    api: ExamApiClient = Depends(get_exam_api),
    _: Me = Depends(superadmin_only),
):
    """
    One page of questions of a category.

    A category is required; nothing is fetched without one.
    """
    if not question_category_id:
        raise ValidationError(PICK_CATEGORY_MESSAGE)

    controller = QuestionListController(api, LoggingReporter())
    await controller.load_categories()
    controller.category_id = question_category_id
    controller.page = page
    controller.query = search.strip()
    rows = await controller.load_page()
    return QuestionListSchema(
        data=rows,
        page=controller.page,
        last_page=controller.last_page,
        total=controller.total,
    )


@router.get("/import-template", response_model=TemplateSchema)
async def get_import_template(_: Me = Depends(superadmin_only)):
    return TemplateSchema(url=settings.question_import_template_url)


@router.post("/import", response_model=ActionResultSchema)
async def import_questions(
    question_category_id: int = Form(..., gt=0),
    file: UploadFile = File(...),
    api: ExamApiClient = Depends(get_exam_api),
    _: Me = Depends(superadmin_only),
):
    """Start an import job; the remote API processes the file asynchronously."""
    reporter = LoggingReporter()
    controller = QuestionListController(api, reporter)
    controller.category_id = question_category_id
    content = await file.read()
    ok = await controller.import_file(
        file.filename, content, file.content_type or "text/csv"
    )
    return ActionResultSchema(ok=ok, notifications=reporter.notifications)


@router.post("/export", response_model=ActionResultSchema)
async def export_questions(
    payload: ExportQuestionsRequest,
    api: ExamApiClient = Depends(get_exam_api),
    _: Me = Depends(superadmin_only),
):
    reporter = LoggingReporter()
    controller = QuestionListController(api, reporter)
    controller.category_id = payload.question_category_id
    ok = await controller.export()
    return ActionResultSchema(ok=ok, notifications=reporter.notifications)
