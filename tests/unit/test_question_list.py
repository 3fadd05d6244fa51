# -*- coding: utf-8 -*-
"""
Unit tests for QuestionListController
"""

import pytest

from cbt_admin.domain.models import Question
from cbt_admin.service.question_list import (LOAD_FAILED_MESSAGE,
                                             PICK_CATEGORY_MESSAGE,
                                             QuestionListController,
                                             filter_rows_by_category)
from tests.fixtures import envelope, make_question, paginated


@pytest.fixture
def controller(api_client, reporter):
    return QuestionListController(api_client, reporter, debounce_seconds=0.01, paginate=10)


def _rows(*records):
    return [Question.model_validate(record) for record in records]


class TestFilterRowsByCategory:
    def test_keeps_matching_ids(self):
        rows = _rows(make_question(1, category_id=1), make_question(2, category_id=2))

        kept = filter_rows_by_category(rows, 1)

        assert [row.id for row in kept] == [1]

    def test_rows_without_id_match_on_name(self):
        rows = _rows(
            make_question(1, category_id=None, category_name="Matematika"),
            make_question(2, category_id=None, category_name="Biologi"),
        )

        kept = filter_rows_by_category(rows, 5, "Matematika")

        assert [row.id for row in kept] == [1]

    def test_no_category_keeps_nothing(self):
        rows = _rows(make_question(1))

        assert filter_rows_by_category(rows, None) == []


class TestQuestionListLoading:
    """Tests for paging and category selection"""

    @pytest.mark.asyncio
    async def test_no_category_sends_no_request(self, controller, mock_api):
        rows = await controller.refresh()

        assert rows == []
        assert mock_api.requests == []
        assert controller.can_create is False
        assert controller.can_import is False
        assert controller.can_export is False

    @pytest.mark.asyncio
    async def test_select_category_queries_and_filters(self, controller, mock_api):
        # Arrange
        mock_api.add(
            "GET",
            "/master/questions",
            paginated(
                [make_question(1, category_id=1), make_question(2, category_id=2)],
                last_page=3,
            ),
        )

        # Act
        rows = await controller.select_category(1)

        # Assert
        assert [row.id for row in rows] == [1]
        assert controller.total == 1
        assert controller.server_total == 2
        assert controller.last_page == 3
        request = mock_api.calls("GET", "/master/questions")[0]
        params = dict(request.url.params)
        assert params == {
            "page": "1",
            "paginate": "10",
            "question_category_id": "1",
            "orderBy": "questions.updated_at",
            "order": "asc",
        }

    @pytest.mark.asyncio
    async def test_name_fallback_uses_selected_category(self, controller, mock_api):
        mock_api.add(
            "GET",
            "/master/question-categories",
            paginated([{"id": 4, "name": "Fisika"}]),
        )
        mock_api.add(
            "GET",
            "/master/questions",
            paginated([make_question(1, category_id=None, category_name="Fisika")]),
        )
        await controller.load_categories()

        rows = await controller.select_category(4)

        assert [row.id for row in rows] == [1]
        assert controller.selected_category.name == "Fisika"

    @pytest.mark.asyncio
    async def test_paging_is_clamped(self, controller, mock_api):
        mock_api.add("GET", "/master/questions", paginated([], last_page=2))
        await controller.select_category(1)

        await controller.next_page()
        await controller.next_page()
        assert controller.page == 2

        await controller.prev_page()
        await controller.prev_page()
        assert controller.page == 1


class TestQuestionListSearch:
    @pytest.mark.asyncio
    async def test_keystrokes_are_debounced(self, controller, mock_api):
        # Arrange
        mock_api.add("GET", "/master/questions", paginated([]))
        controller.category_id = 1

        # Act
        controller.set_search("a")
        controller.set_search("ab ")
        await controller.flush_search()

        # Assert
        calls = mock_api.calls("GET", "/master/questions")
        assert len(calls) == 1
        assert calls[0].url.params["search"] == "ab"
        assert controller.query == "ab"

    @pytest.mark.asyncio
    async def test_failed_search_keeps_rows(self, controller, mock_api, reporter):
        # Arrange
        mock_api.add("GET", "/master/questions", paginated([make_question(1)]))
        await controller.select_category(1)
        mock_api.add("GET", "/master/questions", {"message": "Server sibuk"}, status=500)

        # Act
        controller.set_search("ab")
        await controller.flush_search()

        # Assert
        assert [row.id for row in controller.rows] == [1]
        assert controller.query == "ab"
        assert not controller.loading
        assert reporter.last == ("error", LOAD_FAILED_MESSAGE, "Server sibuk")

    @pytest.mark.asyncio
    async def test_flush_without_pending_search(self, controller, mock_api):
        await controller.flush_search()

        assert mock_api.requests == []


class TestQuestionListActions:
    """Tests for delete, import and export"""

    @pytest.mark.asyncio
    async def test_delete_confirmed(self, controller, mock_api, reporter):
        # Arrange
        mock_api.add("DELETE", "/master/questions/1", envelope(None, "Deleted"))
        mock_api.add("GET", "/master/questions", paginated([]))
        controller.category_id = 1

        # Act
        deleted = await controller.delete(1)

        # Assert
        assert deleted is True
        assert reporter.prompts == ["Hapus pertanyaan ini?"]
        assert reporter.last == ("success", "Berhasil dihapus", None)
        assert len(mock_api.calls("GET", "/master/questions")) == 1

    @pytest.mark.asyncio
    async def test_delete_then_reload_failure(self, controller, mock_api, reporter):
        # Arrange
        mock_api.add("GET", "/master/questions", paginated([make_question(1), make_question(2)]))
        await controller.select_category(1)
        mock_api.add("DELETE", "/master/questions/1", envelope(None, "Deleted"))
        mock_api.add("GET", "/master/questions", {"message": "Server sibuk"}, status=500)

        # Act
        deleted = await controller.delete(1)

        # Assert
        assert deleted is True
        assert reporter.kinds() == ["success", "error"]
        assert reporter.notifications[0][1] == "Berhasil dihapus"
        assert reporter.last == ("error", LOAD_FAILED_MESSAGE, "Server sibuk")
        assert [row.id for row in controller.rows] == [1, 2]

    @pytest.mark.asyncio
    async def test_delete_declined(self, controller, mock_api, reporter):
        reporter.answer = False

        deleted = await controller.delete(1)

        assert deleted is False
        assert mock_api.requests == []
        assert reporter.notifications == []

    @pytest.mark.asyncio
    async def test_delete_failure(self, controller, mock_api, reporter):
        mock_api.add(
            "DELETE", "/master/questions/1", {"message": "Soal dipakai ujian"}, status=409
        )

        deleted = await controller.delete(1)

        assert deleted is False
        assert reporter.last == ("error", "Gagal menghapus", "Soal dipakai ujian")

    @pytest.mark.asyncio
    async def test_import_without_category(self, controller, mock_api, reporter):
        imported = await controller.import_file("soal.csv", b"a,b")

        assert imported is False
        assert reporter.last == ("info", PICK_CATEGORY_MESSAGE, None)
        assert mock_api.requests == []

    @pytest.mark.asyncio
    async def test_import_uses_server_text_and_refetches(self, controller, mock_api, reporter):
        # Arrange
        mock_api.add(
            "POST", "/master/questions/import", envelope("Import sedang diproses")
        )
        mock_api.add("GET", "/master/questions", paginated([]))
        controller.category_id = 2

        # Act
        imported = await controller.import_file("soal.csv", b"a,b")

        # Assert
        assert imported is True
        assert controller.importing is False
        assert reporter.last == ("success", "Success", "Import sedang diproses")
        request = mock_api.calls("POST", "/master/questions/import")[0]
        assert b'name="question_category_id"' in request.content
        assert b'filename="soal.csv"' in request.content
        assert len(mock_api.calls("GET", "/master/questions")) == 1

    @pytest.mark.asyncio
    async def test_export_falls_back_to_default_text(self, controller, mock_api, reporter):
        mock_api.add(
            "POST", "/master/questions/export", {"code": 200, "message": "", "data": None}
        )
        controller.category_id = 2

        exported = await controller.export()

        assert exported is True
        assert reporter.last == ("success", "Success", "Export diproses.")
        assert controller.exporting is False
