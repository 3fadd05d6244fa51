# -*- coding: utf-8 -*-
"""
cbt_admin/service/question_list.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Category-scoped question list: paging, debounced search and row actions.

Nothing is queried until a category is selected. Rows returned by the server
are filtered again by category on this side. Concurrent refreshes are not
deduplicated: the last one to finish wins.
"""

import asyncio
from typing import List, Optional

from cbt_admin.clients.exam_api_client import ExamApiClient
from cbt_admin.config.logger import configure_logger
from cbt_admin.config.settings import settings
from cbt_admin.domain.enums import NotificationKind
from cbt_admin.domain.models import CategoryQuestion, Question
from cbt_admin.service.reporting import Reporter
from cbt_admin.utils.exceptions import RemoteAPIError, error_message

logger = configure_logger(__name__)

PICK_CATEGORY_MESSAGE = "Pilih kategori terlebih dahulu"
LOAD_FAILED_MESSAGE = "Gagal memuat soal"


def filter_rows_by_category(
    rows: List[Question],
    category_id: int | None,
    category_name: str | None = None,
) -> List[Question]:
    """
    Keep the rows of one category.

    A row matches on ``question_category_id``; rows without that id fall
    back to ``category_name``. No category selected means no rows.
    """
    if not category_id:
        return []

    kept = []
    for row in rows:
        if row.question_category_id is not None:
            if row.question_category_id == category_id:
                kept.append(row)
        elif category_name and row.category_name:
            if row.category_name == category_name:
                kept.append(row)
    return kept


class QuestionListController:
    """Question bank screen of one category."""

    ORDER_BY = "questions.updated_at"
    ORDER = "asc"

    def __init__(
        self,
        api: ExamApiClient,
        reporter: Reporter,
        debounce_seconds: float | None = None,
        paginate: int | None = None,
    ):
        self.api = api
        self.reporter = reporter
        self.debounce_seconds = (
            settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds
        )
        self.paginate = paginate or settings.default_paginate

        self.categories: List[CategoryQuestion] = []
        self.category_id: Optional[int] = None
        self.page = 1
        self.search_input = ""
        self.query = ""
        self.rows: List[Question] = []
        self.last_page = 1
        self.server_total = 0
        self.loading = False
        self.importing = False
        self.exporting = False
        self._search_task: Optional[asyncio.Task] = None

    # ---------------------------------------------------------------- state

    @property
    def selected_category(self) -> Optional[CategoryQuestion]:
        for category in self.categories:
            if category.id == self.category_id:
                return category
        return None

    @property
    def can_create(self) -> bool:
        return bool(self.category_id)

    @property
    def can_import(self) -> bool:
        return bool(self.category_id) and not self.importing

    @property
    def can_export(self) -> bool:
        return bool(self.category_id) and not self.exporting

    @property
    def total(self) -> int:
        """Rows shown after the category filter."""
        return len(self.rows)

    @property
    def template_url(self) -> str:
        return settings.question_import_template_url

    def query_params(self) -> dict:
        """
        Keyword arguments of :meth:`ExamApiClient.get_questions`.

        On the wire ``order_by`` is sent as ``orderBy``; the other keys keep
        their names.
        """
        return {
            "page": self.page,
            "paginate": self.paginate,
            "search": self.query,
            "question_category_id": self.category_id or None,
            "order_by": self.ORDER_BY,
            "order": self.ORDER,
        }

    # -------------------------------------------------------------- loading

    async def load_categories(self) -> List[CategoryQuestion]:
        page = await self.api.get_question_categories(
            page=1, paginate=settings.category_paginate
        )
        self.categories = page.data
        return self.categories

    async def select_category(self, category_id: int | None) -> List[Question]:
        """Select a category and show its first page."""
        self.category_id = category_id or None
        self.page = 1
        return await self.refresh()

    async def load_page(self) -> List[Question]:
        """
        Fetch the current page.

        Returns:
            List[Question]: Rows after the category filter

        Raises:
            RemoteAPIError: The list could not be fetched
        """
        if not self.category_id:
            self.rows = []
            return self.rows

        self.loading = True
        try:
            result = await self.api.get_questions(**self.query_params())
        finally:
            self.loading = False

        selected = self.selected_category
        self.rows = filter_rows_by_category(
            result.data, self.category_id, selected.name if selected else None
        )
        self.last_page = result.last_page or 1
        self.server_total = result.total
        logger.debug(
            f"🔍 Kategori {self.category_id} halaman {self.page}: {len(self.rows)} soal"
        )
        return self.rows

    async def refresh(self) -> List[Question]:
        """
        Same as :meth:`load_page`, but a failure is reported and the rows
        already shown are kept.
        """
        try:
            return await self.load_page()
        except RemoteAPIError as e:
            logger.error(f"❌ Gagal memuat soal kategori {self.category_id}: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, LOAD_FAILED_MESSAGE, error_message(e))
            return self.rows

    async def go_to_page(self, page: int) -> List[Question]:
        self.page = max(1, min(page, self.last_page))
        return await self.refresh()

    async def next_page(self) -> List[Question]:
        return await self.go_to_page(self.page + 1)

    async def prev_page(self) -> List[Question]:
        return await self.go_to_page(self.page - 1)

    # --------------------------------------------------------------- search

    def set_search(self, text: str) -> asyncio.Task:
        """
        Record a keystroke; the refresh runs after the quiet period.

        A newer keystroke cancels the pending refresh.
        """
        self.search_input = text
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.get_running_loop().create_task(self._apply_search())
        return self._search_task

    async def _apply_search(self) -> List[Question]:
        await asyncio.sleep(self.debounce_seconds)
        self.query = self.search_input.strip()
        return await self.refresh()

    async def flush_search(self) -> None:
        """Wait for a pending debounced refresh, if any."""
        task = self._search_task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    # -------------------------------------------------------------- actions

    async def delete(self, question_id: int) -> bool:
        """
        Delete a question after confirmation.

        Returns:
            bool: ``True`` when it was deleted
        """
        confirmed = await self.reporter.confirm(
            "Hapus pertanyaan ini?", "Aksi ini tidak bisa dibatalkan."
        )
        if not confirmed:
            return False

        try:
            await self.api.delete_question(question_id)
        except RemoteAPIError as e:
            logger.error(f"❌ Gagal menghapus soal {question_id}: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, "Gagal menghapus", error_message(e))
            return False

        logger.info(f"🗑️ Soal {question_id} dihapus")
        self.reporter.notify(NotificationKind.SUCCESS, "Berhasil dihapus")
        await self.refresh()
        return True

    async def import_file(
        self,
        filename: str | None,
        content: bytes | None,
        content_type: str = "text/csv",
    ) -> bool:
        """Start an import job for the selected category."""
        if not self.category_id:
            self.reporter.notify(NotificationKind.INFO, PICK_CATEGORY_MESSAGE)
            return False
        if not filename or content is None:
            return False

        self.importing = True
        try:
            response = await self.api.import_questions(
                self.category_id, filename, content, content_type
            )
        except RemoteAPIError as e:
            logger.error(f"❌ Import {filename} gagal: {e.detail}")
            self.reporter.notify(
                NotificationKind.ERROR, "Gagal memulai import", error_message(e)
            )
            return False
        finally:
            self.importing = False

        logger.info(f"📥 Import {filename} ke kategori {self.category_id} dimulai")
        self.reporter.notify(
            NotificationKind.SUCCESS, "Success", response.display_text("Import diproses.")
        )
        await self.refresh()
        return True

    async def export(self) -> bool:
        """Start an export job for the selected category."""
        if not self.category_id:
            self.reporter.notify(NotificationKind.INFO, PICK_CATEGORY_MESSAGE)
            return False

        self.exporting = True
        try:
            response = await self.api.export_questions(self.category_id)
        except RemoteAPIError as e:
            logger.error(f"❌ Export kategori {self.category_id} gagal: {e.detail}")
            self.reporter.notify(
                NotificationKind.ERROR, "Gagal memulai export", error_message(e)
            )
            return False
        finally:
            self.exporting = False

        logger.info(f"📤 Export kategori {self.category_id} dimulai")
        self.reporter.notify(
            NotificationKind.SUCCESS, "Success", response.display_text("Export diproses.")
        )
        return True
