# -*- coding: utf-8 -*-
"""
Unit tests for the reporter implementations
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from cbt_admin.domain.enums import NotificationKind
from cbt_admin.service.question_list import QuestionListController
from cbt_admin.service.reporting import LoggingReporter, Reporter
from tests.fixtures import FakeReporter


class TestLoggingReporter:
    def test_is_a_reporter(self):
        assert isinstance(LoggingReporter(), Reporter)
        assert isinstance(FakeReporter(), Reporter)

    def test_notifications_are_recorded_and_logged(self):
        reporter = LoggingReporter()

        with patch("cbt_admin.service.reporting.logger") as mock_logger:
            reporter.notify(NotificationKind.ERROR, "Gagal", "Server sibuk")
            reporter.notify(NotificationKind.SUCCESS, "Berhasil")

        assert reporter.notifications == [
            {"kind": "error", "message": "Gagal", "detail": "Server sibuk"},
            {"kind": "success", "message": "Berhasil", "detail": None},
        ]
        mock_logger.warning.assert_called_once()
        mock_logger.info.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("auto_confirm", [True, False])
    async def test_confirm_answers_with_setting(self, auto_confirm):
        reporter = LoggingReporter(auto_confirm=auto_confirm)

        assert await reporter.confirm("Hapus?") is auto_confirm

    @pytest.mark.asyncio
    async def test_non_interactive_delete_is_declined(self):
        # Arrange
        api = MagicMock()
        api.delete_question = AsyncMock()
        controller = QuestionListController(api, LoggingReporter())

        # Act
        deleted = await controller.delete(5)

        # Assert
        assert deleted is False
        api.delete_question.assert_not_awaited()
