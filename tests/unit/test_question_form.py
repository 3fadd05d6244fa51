# -*- coding: utf-8 -*-
"""
Unit tests for QuestionFormController
"""

import pytest

from cbt_admin.clients.exam_api_client import INVALID_RESPONSE_MESSAGE
from cbt_admin.domain.enums import FormStatus, QuestionType
from cbt_admin.domain.models import Question
from cbt_admin.service.question_form import (FILE_MISSING_MESSAGE,
                                             SAVE_FAILED_MESSAGE,
                                             SAVE_OK_MESSAGE,
                                             QuestionFormController)
from cbt_admin.utils.exceptions import ValidationError
from cbt_admin.utils.upload_url import URL_NOT_FOUND_MESSAGE
from tests.fixtures import (echo_saved_question, envelope, json_body,
                            make_question)


@pytest.fixture
def form(api_client, reporter):
    return QuestionFormController(api_client, reporter, default_category_id=3)


class TestOptionEditing:
    """Tests for option editing"""

    def test_new_form_starts_idle_with_seeds(self, form):
        assert form.status == FormStatus.IDLE
        assert form.type == QuestionType.MULTIPLE_CHOICE
        assert form.question_category_id == 3
        assert len(form.current_options) == 5

    def test_type_switch_keeps_each_variant_options(self, form):
        # Arrange
        form.update_option(0, text="Jakarta")

        # Act
        form.set_type(QuestionType.TRUE_FALSE)
        form.update_option(0, text="Benar")
        form.set_type(QuestionType.MULTIPLE_CHOICE)

        # Assert
        assert form.current_options[0].text == "Jakarta"
        assert form.options[QuestionType.TRUE_FALSE][0].text == "Benar"

    def test_add_option_after_five_gets_f(self, form):
        option = form.add_option()

        assert option.option == "f"
        assert len(form.current_options) == 6

    def test_remove_option_keeps_letters(self, form):
        form.remove_option(2)

        assert [o.option for o in form.current_options] == ["a", "b", "d", "e"]

    def test_add_after_removal_does_not_duplicate(self, form):
        form.remove_option(2)

        option = form.add_option()

        assert option.option == "f"
        assert [o.option for o in form.current_options] == ["a", "b", "d", "e", "f"]

    def test_true_false_cannot_add_or_remove(self, form):
        form.set_type(QuestionType.TRUE_FALSE)

        with pytest.raises(ValidationError):
            form.add_option()
        with pytest.raises(ValidationError):
            form.remove_option(0)
        assert len(form.current_options) == 2

    def test_categorized_add_appends_blank_statement(self, form):
        form.set_type(QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY)

        option = form.add_option()

        assert len(form.current_options) == 2
        assert option.point == 1
        assert option.accurate is False

    def test_accurate_and_not_accurate_are_exclusive(self, form):
        # Arrange
        form.set_type(QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY)

        # Act
        form.set_accurate(0, True)
        form.set_not_accurate(0, True)

        # Assert
        option = form.current_options[0]
        assert option.not_accurate is True
        assert option.accurate is False

        form.set_accurate(0, True)
        assert option.accurate is True
        assert option.not_accurate is False

    def test_accurate_only_for_categorized(self, form):
        with pytest.raises(ValidationError):
            form.set_accurate(0, True)

    def test_update_option_rejects_bad_index(self, form):
        with pytest.raises(ValidationError):
            form.update_option(9, text="x")

    def test_update_option_rejects_unknown_field(self, form):
        with pytest.raises(ValidationError):
            form.update_option(0, accurate=True)

    def test_edit_rejects_unknown_field(self, form):
        with pytest.raises(ValidationError):
            form.edit(record_id=5)


class TestHydrate:
    """Tests for loading a stored question"""

    def test_hydrate_fills_form(self, form):
        record = Question.model_validate(
            make_question(7, category_id=4, question_type="true_false", answer="b")
        )

        assert form.hydrate(record) is True

        assert form.is_edit
        assert form.record_id == 7
        assert form.question_category_id == 4
        assert form.type == QuestionType.TRUE_FALSE
        assert form.answer == "b"
        assert form.total_point == 5
        assert [o.text for o in form.current_options] == ["Satu", "Dua"]

    def test_hydrate_is_one_shot_per_id(self, form):
        # Arrange
        record = Question.model_validate(make_question(7))
        form.hydrate(record)
        form.edit(question="<p>Diubah</p>")

        # Act
        refilled = form.hydrate(record)

        # Assert
        assert refilled is False
        assert form.question == "<p>Diubah</p>"

    def test_other_record_resets_form(self, form):
        form.hydrate(Question.model_validate(make_question(7)))
        form.set_type(QuestionType.ESSAY)

        refilled = form.hydrate(
            Question.model_validate(make_question(8, question="<p>Lain</p>"))
        )

        assert refilled is True
        assert form.record_id == 8
        assert form.type == QuestionType.MULTIPLE_CHOICE
        assert form.question == "<p>Lain</p>"

    def test_corrupt_options_fall_back_to_seed(self, form):
        record = Question.model_validate(
            make_question(
                9,
                question_type="multiple_choice_multiple_category",
                options=[{"option": "a", "text": "bukan pernyataan"}],
            )
        )

        form.hydrate(record)

        assert len(form.current_options) == 1
        assert form.current_options[0].text == ""
        assert form.current_options[0].point == 1

    def test_unknown_type_keeps_current_variant(self, form):
        # Arrange
        form.update_option(0, text="Tetap")
        record = Question.model_validate(
            make_question(5, question_type="short_answer", question="<p>Isian</p>")
        )

        # Act
        refilled = form.hydrate(record)

        # Assert
        assert refilled is True
        assert form.record_id == 5
        assert form.type == QuestionType.MULTIPLE_CHOICE
        assert form.question == "<p>Isian</p>"
        assert form.status == FormStatus.EDITING
        assert len(form.current_options) == 5
        assert form.current_options[0].text == "Tetap"

    def test_none_record_is_ignored(self, form):
        assert form.hydrate(None) is False
        assert form.status == FormStatus.IDLE


class TestSubmit:
    """Tests for saving"""

    @pytest.mark.asyncio
    async def test_create_posts_payload(self, form, mock_api, reporter):
        # Arrange
        mock_api.add("POST", "/master/questions", echo_saved_question(55))
        saved_records = []
        form.on_saved = saved_records.append
        form.edit(question="<p>Ibu kota?</p>", answer="a")

        # Act
        saved = await form.submit()

        # Assert
        assert saved.id == 55
        assert form.status == FormStatus.SAVED
        assert form.record_id == 55
        assert saved_records == [saved]
        assert reporter.last == ("success", SAVE_OK_MESSAGE, None)
        body = json_body(mock_api.calls("POST", "/master/questions")[0])
        assert body["type"] == "multiple_choice"
        assert len(body["options"]) == 5

    @pytest.mark.asyncio
    async def test_edit_sends_put(self, form, mock_api):
        mock_api.add("PUT", "/master/questions/7", echo_saved_question(7))
        form.hydrate(Question.model_validate(make_question(7)))

        saved = await form.submit()

        assert saved.id == 7
        assert len(mock_api.calls("PUT", "/master/questions/7")) == 1

    @pytest.mark.asyncio
    async def test_missing_category_sends_nothing(self, api_client, reporter, mock_api):
        form = QuestionFormController(api_client, reporter)
        form.edit(question="<p>Soal</p>")

        saved = await form.submit()

        assert saved is None
        assert mock_api.requests == []
        assert form.status == FormStatus.FAILED
        assert reporter.last == ("error", SAVE_FAILED_MESSAGE, "Kategori belum dipilih")

    @pytest.mark.asyncio
    async def test_remote_failure_keeps_state(self, form, mock_api, reporter):
        # Arrange
        mock_api.add(
            "POST",
            "/master/questions",
            {"code": 422, "message": "Jawaban wajib diisi"},
            status=422,
        )
        form.edit(question="<p>Soal</p>")
        form.update_option(1, text="Tetap")

        # Act
        saved = await form.submit()

        # Assert
        assert saved is None
        assert form.status == FormStatus.FAILED
        assert form.record_id is None
        assert form.question == "<p>Soal</p>"
        assert form.current_options[1].text == "Tetap"
        assert reporter.last == ("error", SAVE_FAILED_MESSAGE, "Jawaban wajib diisi")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("data", [None, {"message": "ok"}])
    async def test_unexpected_answer_fails_submit(self, form, mock_api, reporter, data):
        # Arrange
        mock_api.add("POST", "/master/questions", envelope(data))
        form.edit(question="<p>Soal</p>", answer="a")

        # Act
        saved = await form.submit()

        # Assert
        assert saved is None
        assert form.status == FormStatus.FAILED
        assert not form.submitting
        assert form.record_id is None
        assert reporter.last == ("error", SAVE_FAILED_MESSAGE, INVALID_RESPONSE_MESSAGE)


class TestUploadMedia:
    """Tests for editor uploads"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            "https://cdn.test/a.png",
            {"data": "https://cdn.test/a.png"},
            {"url": "https://cdn.test/a.png"},
            {"data": {"file_url": "https://cdn.test/a.png"}},
        ],
    )
    async def test_upload_shapes(self, form, mock_api, body):
        mock_api.add("POST", "/master/service-upload", body)

        result = await form.upload_media("a.png", b"12345", "image/png")

        assert result == {
            "result": [{"url": "https://cdn.test/a.png", "name": "a.png", "size": 5}]
        }

    @pytest.mark.asyncio
    async def test_upload_without_url(self, form, mock_api):
        mock_api.add("POST", "/master/service-upload", envelope({"id": 3}))

        result = await form.upload_media("a.png", b"1", "image/png")

        assert result == {"errorMessage": URL_NOT_FOUND_MESSAGE}

    @pytest.mark.asyncio
    async def test_upload_remote_failure(self, form, mock_api):
        mock_api.add(
            "POST", "/master/service-upload", {"message": "File terlalu besar"}, status=413
        )
        form.edit(question="<p>Draft</p>")

        result = await form.upload_media("a.mp4", b"1", "video/mp4")

        assert result == {"errorMessage": "File terlalu besar"}
        assert form.question == "<p>Draft</p>"

    @pytest.mark.asyncio
    async def test_missing_file(self, form, mock_api):
        result = await form.upload_media(None, None)

        assert result == {"errorMessage": FILE_MISSING_MESSAGE}
        assert mock_api.requests == []
