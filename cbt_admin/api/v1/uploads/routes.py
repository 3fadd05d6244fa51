# -*- coding: utf-8 -*-
"""
Media uploads of the rich-text editor.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, File, UploadFile

from cbt_admin.clients.exam_api_client import ExamApiClient, get_exam_api
from cbt_admin.domain.models import Me
from cbt_admin.security.security import superadmin_only
from cbt_admin.service.question_form import QuestionFormController
from cbt_admin.service.reporting import LoggingReporter

router = APIRouter(prefix="/uploads", tags=["📎 Upload"])


@router.post("")
async def upload_media(
    file: UploadFile | None = File(None),
    api: ExamApiClient = Depends(get_exam_api),
    _: Me = Depends(superadmin_only),
) -> Dict[str, Any]:
    """
    Answers in the editor's callback shape: ``{"result": [{url, name, size}]}``
    or ``{"errorMessage": ...}``.
    """
    controller = QuestionFormController(api, LoggingReporter())
    if file is None:
        return await controller.upload_media(None, None)
    content = await file.read()
    return await controller.upload_media(
        file.filename, content, file.content_type or "application/octet-stream"
    )
