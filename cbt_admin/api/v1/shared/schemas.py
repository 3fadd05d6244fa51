# -*- coding: utf-8 -*-
"""
cbt_admin/api/v1/shared/schemas.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Response schemas of the BFF routes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from cbt_admin.domain.models import Question, Test


class NotificationSchema(BaseModel):
    kind: str
    message: str
    detail: Optional[str] = None


class ActionResultSchema(BaseModel):
    """Outcome of a fire-and-forget action, with the notifications it raised."""

    ok: bool
    notifications: List[NotificationSchema] = Field(default_factory=list)


class QuestionListSchema(BaseModel):
    data: List[Question]
    page: int
    last_page: int
    total: int = Field(..., description="Rows after the category filter")


class TestRowSchema(Test):
    pengawas_label: str = "-"


class TestListSchema(BaseModel):
    data: List[TestRowSchema]
    page: int
    last_page: int
    total: int
    query: Dict[str, Any] = Field(..., description="Query sent to the API, after role scoping")


class ExportQuestionsRequest(BaseModel):
    question_category_id: int


class TemplateSchema(BaseModel):
    url: str
