# -*- coding: utf-8 -*-
"""
cbt_admin/service/tryout.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~
Tryout (test) management: role-scoped listing, create/update/delete,
export jobs and the printable PDF export.
"""

from typing import Any, Dict, List, Optional

from cbt_admin.clients.exam_api_client import ExamApiClient
from cbt_admin.config.logger import configure_logger
from cbt_admin.config.settings import settings
from cbt_admin.domain.enums import NotificationKind, TimerType
from cbt_admin.domain.models import Me, Paginated, School, Test, TestForm
from cbt_admin.security.access_control import (is_superadmin, is_supervisor,
                                               scope_test_query)
from cbt_admin.service.export_pdf import (DEFAULT_SCHOOL_NAME, RenderedPdf,
                                          TestPdfExporter)
from cbt_admin.service.reporting import Reporter
from cbt_admin.utils.dates import date_only
from cbt_admin.utils.exceptions import (NotFoundError, RemoteAPIError,
                                        ValidationError, error_message)

logger = configure_logger(__name__)

PAGE_SIZES = (10, 15, 25, 50)
LOAD_FAILED_MESSAGE = "Gagal memuat data ujian"


def to_form(test: Test) -> TestForm:
    """Map a listed test back onto the editable form."""
    return TestForm(
        school_id=test.school_id,
        title=test.title,
        sub_title=test.sub_title or "",
        slug=test.slug or "",
        description=test.description or "",
        total_time=test.total_time or 0,
        total_questions=test.total_questions or 0,
        pass_grade=test.pass_grade or 0,
        shuffle_questions=test.shuffle_questions,
        assessment_type=test.assessment_type or "irt",
        timer_type=test.timer_type or TimerType.PER_TEST.value,
        score_type=test.score_type or "default",
        start_date=date_only(test.start_date),
        end_date=date_only(test.end_date),
        code=test.code or "",
        max_attempts=test.max_attempts or "",
        is_graded=test.is_graded,
        is_explanation_released=test.is_explanation_released,
        user_id=test.user_id or 0,
        status=1 if test.status else 0,
    )


def to_payload(form: TestForm) -> Dict[str, Any]:
    """
    Request body of a test create/update.

    ``total_time`` is only sent for per-test timers and empty dates are left
    out.
    """
    payload: Dict[str, Any] = {
        "school_id": form.school_id,
        "title": form.title,
        "sub_title": form.sub_title or None,
        "shuffle_questions": 1 if form.shuffle_questions else 0,
        "timer_type": form.timer_type,
        "score_type": form.score_type,
        "slug": form.slug,
        "description": form.description,
        "total_questions": form.total_questions,
        "pass_grade": form.pass_grade,
        "assessment_type": form.assessment_type,
        "code": form.code or "",
        "max_attempts": form.max_attempts or "",
        "is_graded": form.is_graded,
        "is_explanation_released": form.is_explanation_released,
        "user_id": int(form.user_id or 0),
        "status": int(form.status or 0),
    }

    if form.timer_type == TimerType.PER_TEST.value:
        payload["total_time"] = int(form.total_time or 0)

    start_date = date_only(form.start_date)
    end_date = date_only(form.end_date)
    if start_date:
        payload["start_date"] = start_date
    if end_date:
        payload["end_date"] = end_date

    return payload


class TryoutController:
    """Test list of the current user."""

    ORDER_BY = "tests.updated_at"
    ORDER_DIRECTION = "desc"

    def __init__(self, api: ExamApiClient, reporter: Reporter, me: Me | None = None):
        self.api = api
        self.reporter = reporter
        self.me = me

        self.page = 1
        self.paginate = settings.default_paginate
        self.search = ""
        self.search_by_specific = ""
        self.school_id: Optional[int] = None
        self.rows: List[Test] = []
        self.last_page = 1
        self.total = 0
        self.schools: List[School] = []
        self.pengawas_names: Dict[int, str] = {}
        self.exporting_id: Optional[int] = None
        self.export_job_id: Optional[int] = None

    @property
    def is_superadmin(self) -> bool:
        return is_superadmin(self.me)

    @property
    def is_supervisor(self) -> bool:
        return is_supervisor(self.me)

    async def load_me(self) -> Me:
        self.me = await self.api.get_me()
        return self.me

    # ---------------------------------------------------------------- list

    def set_paginate(self, paginate: int) -> None:
        if paginate not in PAGE_SIZES:
            raise ValidationError(f"Ukuran halaman harus salah satu dari {PAGE_SIZES}")
        self.paginate = paginate
        self.page = 1

    def list_query(self) -> Dict[str, Any]:
        """Query of the current filters, with role scoping applied last."""
        query = {
            "page": self.page,
            "paginate": self.paginate,
            "search": self.search,
            "searchBySpecific": self.search_by_specific,
            "orderBy": self.ORDER_BY,
            "orderDirection": self.ORDER_DIRECTION,
            "school_id": self.school_id,
        }
        return scope_test_query(query, self.me)

    async def load_page(self) -> List[Test]:
        """
        Fetch the current page.

        Raises:
            RemoteAPIError: The list could not be fetched
        """
        result: Paginated[Test] = await self.api.get_tests(self.list_query())
        self.rows = result.data
        self.last_page = result.last_page or 1
        self.total = result.total
        return self.rows

    async def refresh(self) -> List[Test]:
        """Same as :meth:`load_page`; a failure is reported and the rows are kept."""
        try:
            return await self.load_page()
        except RemoteAPIError as e:
            logger.error(f"❌ Gagal memuat daftar ujian: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, LOAD_FAILED_MESSAGE, error_message(e))
            return self.rows

    async def owns_test(self, test_id: int) -> bool:
        """
        Whether the test is visible to the current user.

        Everyone but a supervisor sees every test. A supervisor's own tests
        are looked up through the scoped list, page by page.
        """
        if not self.is_supervisor:
            return True
        if any(row.id == test_id and row.user_id == self.me.id for row in self.rows):
            return True

        page = 1
        while True:
            query = scope_test_query(
                {
                    "page": page,
                    "paginate": PAGE_SIZES[-1],
                    "orderBy": self.ORDER_BY,
                    "orderDirection": self.ORDER_DIRECTION,
                },
                self.me,
            )
            result = await self.api.get_tests(query)
            if any(row.id == test_id and row.user_id == self.me.id for row in result.data):
                return True
            if page >= (result.last_page or 1) or not result.data:
                return False
            page += 1

    async def reset_filters(self) -> List[Test]:
        self.search = ""
        if self.is_superadmin:
            self.search_by_specific = ""
        self.school_id = None
        self.page = 1
        return await self.refresh()

    async def load_schools(self, search: str = "") -> List[School]:
        result = await self.api.get_schools(page=1, paginate=100, search=search)
        self.schools = result.data
        return self.schools

    async def load_pengawas(self) -> Dict[int, str]:
        """Supervisor names by user id, for the list column."""
        result = await self.api.get_users(role_id=settings.pengawas_role_id, page=1, paginate=200)
        self.pengawas_names = {user.id: user.name for user in result.data}
        return self.pengawas_names

    def pengawas_name(self, test: Test) -> str:
        if test.pengawas_name:
            return test.pengawas_name
        if test.user_id and test.user_id in self.pengawas_names:
            return self.pengawas_names[test.user_id]
        return "-"

    # ------------------------------------------------------------- mutations

    async def save(self, form: TestForm, test_id: int | None = None) -> Optional[Test]:
        """
        Create (``test_id`` is ``None``) or update a test.

        Supervisors always own what they save.

        Returns:
            Test | None: The saved test, ``None`` on failure
        """
        if self.is_supervisor:
            form = form.model_copy(update={"user_id": self.me.id})
        payload = to_payload(form)

        try:
            if test_id is not None:
                saved = await self.api.update_test(test_id, payload)
            else:
                saved = await self.api.create_test(payload)
        except RemoteAPIError as e:
            logger.error(f"❌ Gagal menyimpan ujian '{form.title}': {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, "Gagal", error_message(e))
            return None

        action = "diperbarui" if test_id is not None else "dibuat"
        logger.info(f"✅ Ujian {saved.id} {action}")
        self.reporter.notify(
            NotificationKind.SUCCESS,
            "Updated" if test_id is not None else "Created",
            f'Test "{saved.title}" {action}.',
        )
        await self.refresh()
        return saved

    async def delete(self, test_id: int, label: str) -> bool:
        confirmed = await self.reporter.confirm(
            "Hapus Test?", f'Data "{label}" akan dihapus permanen.'
        )
        if not confirmed:
            return False

        try:
            await self.api.delete_test(test_id)
        except RemoteAPIError as e:
            logger.error(f"❌ Gagal menghapus ujian {test_id}: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, "Gagal", error_message(e))
            return False

        logger.info(f"🗑️ Ujian {test_id} dihapus")
        self.reporter.notify(NotificationKind.SUCCESS, "Terhapus", f'"{label}" dihapus.')
        await self.refresh()
        return True

    # --------------------------------------------------------------- exports

    async def export(self, test_id: int) -> bool:
        """Start the server-side export job of a test; one job at a time."""
        if self.export_job_id is not None:
            logger.warning(f"⚠️ Export job ujian {self.export_job_id} masih berjalan")
            return False

        self.export_job_id = test_id
        try:
            response = await self.api.export_test(test_id)
        except RemoteAPIError as e:
            self.reporter.notify(NotificationKind.ERROR, "Export gagal", error_message(e))
            return False
        finally:
            self.export_job_id = None

        self.reporter.notify(
            NotificationKind.SUCCESS, "Export dimulai", response.display_text("")
        )
        return True

    def school_name_for(self, test_id: int) -> str:
        for row in self.rows:
            if row.id == test_id and row.school_name:
                return row.school_name
        return DEFAULT_SCHOOL_NAME

    async def build_pdf(
        self, test_id: int, school_name: str | None = None
    ) -> RenderedPdf:
        """
        Fetch the export payload of a test and render it.

        The school name defaults to the one of the listed row. Supervisors
        only get the tests they own.

        Raises:
            NotFoundError: The test is not visible to the user, or the API
                returned no question data
            RemoteAPIError: The API call failed
        """
        if not await self.owns_test(test_id):
            logger.warning(f"🔐 Pengawas {self.me.id} meminta PDF ujian {test_id} milik orang lain")
            raise NotFoundError("Test", test_id)

        data = await self.api.export_test_questions(test_id)
        if data is None:
            raise NotFoundError("Data soal")
        return TestPdfExporter.render(data, school_name or self.school_name_for(test_id))

    async def export_pdf(self, test_id: int) -> Optional[RenderedPdf]:
        """PDF export with notifications; one export per test at a time."""
        if self.exporting_id is not None:
            logger.warning(f"⚠️ Export ujian {self.exporting_id} masih berjalan")
            return None

        self.exporting_id = test_id
        try:
            rendered = await self.build_pdf(test_id)
        except (RemoteAPIError, NotFoundError) as e:
            logger.error(f"❌ Export PDF ujian {test_id} gagal: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, "Export gagal", error_message(e))
            return None
        finally:
            self.exporting_id = None

        self.reporter.notify(
            NotificationKind.SUCCESS,
            "Download Berhasil",
            "File PDF telah berhasil di-generate.",
        )
        return rendered
