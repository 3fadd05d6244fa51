# -*- coding: utf-8 -*-
"""
cbt_admin/domain/models.py
~~~~~~~~~~~~~~~~~~~~~~~~~~
Pydantic models for records returned by the remote exam API.

The API is the system of record; these models only describe what comes over
the wire. Unknown fields are ignored so additions on the server side do not
break the admin.
"""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class RemoteModel(BaseModel):
    """Base for every wire model."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ApiMessage(RemoteModel):
    """Plain ``{code, message, data}`` answer of a mutation."""

    code: int = 200
    message: str = ""
    data: Any = None

    def display_text(self, fallback: str) -> str:
        """Text for a notification: ``data`` when it is a string, then ``message``."""
        if isinstance(self.data, str) and self.data:
            return self.data
        return self.message or fallback


class Paginated(RemoteModel, Generic[T]):
    """Laravel-style paginated envelope."""

    data: List[T] = Field(default_factory=list)
    current_page: int = 1
    last_page: int = 1
    total: int = 0
    per_page: int = 10


class CategoryQuestion(RemoteModel):
    """Question-bank category."""

    id: int
    name: str
    code: Optional[str] = None


class Question(RemoteModel):
    """A question as stored by the API."""

    id: int
    question_category_id: Optional[int] = None
    category_name: Optional[str] = None
    type: str
    question: str = ""
    explanation: Optional[str] = None
    answer: Optional[str] = None
    total_point: Optional[float] = None
    # Heterogeneous on purpose, shape depends on ``type``
    options: Optional[List[Any]] = None


class RoleRef(RemoteModel):
    id: Optional[int] = None
    name: str


class Me(RemoteModel):
    """The authenticated user, as returned by ``/me``."""

    id: int
    name: str = ""
    email: Optional[str] = None
    roles: List[RoleRef] = Field(default_factory=list)

    @property
    def role_names(self) -> List[str]:
        return [role.name for role in self.roles]


class User(RemoteModel):
    id: int
    name: str
    email: Optional[str] = None


class School(RemoteModel):
    id: int
    name: str
    email: Optional[str] = None


class Test(RemoteModel):
    """An exam (tryout) definition."""

    id: int
    school_id: int = 0
    school_name: Optional[str] = None
    title: str = ""
    sub_title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    total_time: Optional[int] = None
    total_questions: Optional[int] = None
    pass_grade: Optional[float] = None
    shuffle_questions: bool = False
    assessment_type: Optional[str] = None
    timer_type: Optional[str] = None
    score_type: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    code: Optional[str] = None
    max_attempts: Optional[str] = None
    is_graded: bool = False
    is_explanation_released: bool = False
    user_id: Optional[int] = None
    pengawas_name: Optional[str] = None
    status: bool = False


class TestForm(BaseModel):
    """Editable state of the test form, before it is turned into a payload."""

    model_config = ConfigDict(validate_assignment=True)

    school_id: int = 0
    title: str = ""
    sub_title: str = ""
    slug: str = ""
    description: str = ""
    total_time: int = 3600
    total_questions: int = 0
    pass_grade: float = 70
    shuffle_questions: bool = False
    assessment_type: str = "irt"
    timer_type: str = "per_test"
    score_type: str = "default"
    start_date: str = ""
    end_date: str = ""
    code: str = ""
    max_attempts: str = ""
    is_graded: bool = False
    is_explanation_released: bool = False
    user_id: int = 0
    status: int = 1


# ----------------------------- EXPORT -----------------------------------------


class ExportOption(RemoteModel):
    option: Optional[str] = None
    text: str = ""
    point: Optional[float] = None


class ExportQuestionDetail(RemoteModel):
    id: int
    question: str = ""
    type: str = ""
    answer: Optional[str] = None
    options: List[ExportOption] = Field(default_factory=list)


class ExportQuestionWrapper(RemoteModel):
    id: int
    question: ExportQuestionDetail


class ExportCategoryRef(RemoteModel):
    name: Optional[str] = None


class ExportCategory(RemoteModel):
    id: int
    question_category: Optional[ExportCategoryRef] = None
    questions: List[ExportQuestionWrapper] = Field(default_factory=list)


class ExportTest(RemoteModel):
    title: str = ""
    sub_title: Optional[str] = None
    school_id: Optional[int] = None


class ExportData(RemoteModel):
    """Nested test-with-questions payload used for the printable export."""

    test: ExportTest
    question_categories: List[ExportCategory] = Field(default_factory=list)
