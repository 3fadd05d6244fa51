# -*- coding: utf-8 -*-
"""
cbt_admin/service/question_form.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Editor state of a single bank question.

Lifecycle: ``idle -> editing -> submitting -> saved | failed``. Each variant
keeps its own option list, so switching the type back and forth never loses
what was typed. A failed submit leaves the editor untouched so the user can
retry.
"""

from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from cbt_admin.clients.exam_api_client import ExamApiClient
from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.enums import FormStatus, NotificationKind, QuestionType
from cbt_admin.domain.models import Question
from cbt_admin.domain.variants import (BaseQuestionPayload, CategorizedOption,
                                       MCOption, Option, QuestionDraft,
                                       build_payload, coerce_options,
                                       default_options, new_option,
                                       next_option_letter, rule_for)
from cbt_admin.service.reporting import Reporter
from cbt_admin.utils.exceptions import (RemoteAPIError, UploadError,
                                        ValidationError, error_message)
from cbt_admin.utils.upload_url import extract_upload_url

logger = configure_logger(__name__)

SAVE_FAILED_MESSAGE = "Gagal menyimpan pertanyaan."
SAVE_OK_MESSAGE = "Pertanyaan berhasil disimpan."
FILE_MISSING_MESSAGE = "File tidak ditemukan"
UPLOAD_FAILED_MESSAGE = "Upload gagal, coba lagi"

_EDITABLE_FIELDS = ("question_category_id", "question", "explanation", "answer", "total_point")
_MC_OPTION_FIELDS = ("text", "point")
_CATEGORIZED_OPTION_FIELDS = ("text", "point", "accurate_label", "not_accurate_label")


class QuestionFormController:
    """Create/edit controller of one question."""

    def __init__(
        self,
        api: ExamApiClient,
        reporter: Reporter,
        default_category_id: int | None = None,
        on_saved: Callable[[Question], Any] | None = None,
    ):
        self.api = api
        self.reporter = reporter
        self.default_category_id = default_category_id
        self.on_saved = on_saved
        self.saved: Optional[Question] = None
        self.reset()

    def reset(self) -> None:
        """Back to a blank create form."""
        self.status = FormStatus.IDLE
        self.record_id: Optional[int] = None
        self._hydrated_id: Optional[int] = None
        self.question_category_id: Optional[int] = self.default_category_id
        self.type = QuestionType.MULTIPLE_CHOICE
        self.question = ""
        self.explanation = ""
        self.answer = ""
        self.total_point: float | int = 5
        self.options: Dict[QuestionType, List[Option]] = {
            question_type: default_options(question_type) for question_type in QuestionType
        }

    @property
    def is_edit(self) -> bool:
        return self.record_id is not None

    @property
    def submitting(self) -> bool:
        return self.status == FormStatus.SUBMITTING

    # ------------------------------------------------------------- hydration

    def hydrate(self, record: Question | None) -> bool:
        """
        Fill the form from an existing record, once per record id.

        A second call with the same record keeps the in-progress edits.
        A record with another id resets the form first.

        Returns:
            bool: ``True`` when the form was (re)filled
        """
        if record is None:
            return False
        if self._hydrated_id == record.id:
            logger.debug(f"🔍 Soal {record.id} sudah dimuat, perubahan dipertahankan")
            return False
        if self._hydrated_id is not None:
            self.reset()

        known_type = record.type in {t.value for t in QuestionType}
        if known_type:
            question_type = QuestionType(record.type)
        else:
            # Legacy type: keep the current variant and its seeds
            logger.warning(
                f"⚠️ Tipe soal {record.type!r} tidak dikenal pada soal {record.id}, "
                f"memakai {self.type.value}"
            )
            question_type = self.type
        self.record_id = record.id
        self.question_category_id = record.question_category_id or self.default_category_id
        self.type = question_type
        self.question = record.question or ""
        self.answer = record.answer or ""
        self.total_point = record.total_point if record.total_point is not None else 5
        self.explanation = record.explanation or ""
        if known_type and rule_for(question_type).has_options:
            self.options[question_type] = coerce_options(question_type, record.options)

        self._hydrated_id = record.id
        self.status = FormStatus.EDITING
        logger.info(f"📝 Soal {record.id} ({question_type.value}) dimuat ke editor")
        return True

    # --------------------------------------------------------------- editing

    def edit(self, **changes) -> None:
        """
        Set base fields: ``question_category_id``, ``question``,
        ``explanation``, ``answer`` and ``total_point``.
        """
        for name, value in changes.items():
            if name not in _EDITABLE_FIELDS:
                raise ValidationError(f"Field {name} tidak dapat diubah")
            setattr(self, name, value)
        self.status = FormStatus.EDITING

    def set_type(self, question_type: QuestionType | str) -> None:
        """Switch variant; every variant's option list is kept as is."""
        self.type = QuestionType(question_type)
        self.status = FormStatus.EDITING

    @property
    def current_options(self) -> List[Option]:
        return self.options[self.type]

    def add_option(self) -> Option:
        """
        Append an option to the current variant.

        Lettered variants get the next letter by position; see
        :func:`next_option_letter`.
        """
        options = self.current_options
        letter = None
        if rule_for(self.type).option_model is MCOption:
            letter = next_option_letter(options)
        option = new_option(self.type, letter)
        options.append(option)
        self.status = FormStatus.EDITING
        return option

    def remove_option(self, index: int) -> None:
        """Remove one option. Remaining letters are left as they are."""
        if not rule_for(self.type).allows_add_remove:
            raise ValidationError(
                f"Opsi tidak dapat dihapus untuk tipe {self.type.value}"
            )
        options = self.current_options
        self._check_index(options, index)
        del options[index]
        self.status = FormStatus.EDITING

    def update_option(self, index: int, **changes) -> Option:
        """Change text, point or labels of one option of the current variant."""
        options = self.current_options
        self._check_index(options, index)
        option = options[index]
        allowed = (
            _CATEGORIZED_OPTION_FIELDS
            if isinstance(option, CategorizedOption)
            else _MC_OPTION_FIELDS
        )
        unknown = set(changes) - set(allowed)
        if unknown:
            raise ValidationError(f"Field opsi tidak dikenal: {', '.join(sorted(unknown))}")

        try:
            updated = type(option).model_validate({**option.model_dump(), **changes})
        except PydanticValidationError as e:
            raise ValidationError(f"Nilai opsi tidak valid: {e.errors()[0]['msg']}") from e
        options[index] = updated
        self.status = FormStatus.EDITING
        return updated

    def set_accurate(self, index: int, value: bool) -> CategorizedOption:
        """Mark a categorized statement accurate; clears ``not_accurate`` when on."""
        option = self._categorized_option(index)
        option.accurate = bool(value)
        if value:
            option.not_accurate = False
        self.status = FormStatus.EDITING
        return option

    def set_not_accurate(self, index: int, value: bool) -> CategorizedOption:
        """Mark a categorized statement not accurate; clears ``accurate`` when on."""
        option = self._categorized_option(index)
        option.not_accurate = bool(value)
        if value:
            option.accurate = False
        self.status = FormStatus.EDITING
        return option

    def _categorized_option(self, index: int) -> CategorizedOption:
        if self.type != QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY:
            raise ValidationError("Hanya soal kategori yang memiliki pilihan sesuai/tidak sesuai")
        options = self.current_options
        self._check_index(options, index)
        return options[index]

    @staticmethod
    def _check_index(options: List[Option], index: int) -> None:
        if index < 0 or index >= len(options):
            raise ValidationError(f"Opsi ke-{index} tidak ditemukan")

    # -------------------------------------------------------------- payload

    def draft(self) -> QuestionDraft:
        return QuestionDraft(
            question_category_id=self.question_category_id,
            type=self.type,
            question=self.question,
            explanation=self.explanation,
            answer=self.answer,
            total_point=self.total_point,
            options=self.options,
        )

    def build_payload(self) -> BaseQuestionPayload:
        """
        Payload of the current variant.

        Raises:
            ValidationError: The form is not ready to be submitted
        """
        return build_payload(self.draft())

    async def submit(self) -> Optional[Question]:
        """
        Create or update the question.

        Returns:
            Question | None: The saved record, ``None`` when nothing was saved
        """
        try:
            payload = self.build_payload()
        except ValidationError as e:
            self.status = FormStatus.FAILED
            logger.warning(f"⚠️ Soal tidak dikirim: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, SAVE_FAILED_MESSAGE, e.detail)
            return None

        self.status = FormStatus.SUBMITTING
        try:
            if self.is_edit:
                logger.info(f"💾 Memperbarui soal {self.record_id}")
                saved = await self.api.update_question(self.record_id, payload)
            else:
                logger.info(f"💾 Membuat soal baru ({self.type.value})")
                saved = await self.api.create_question(payload)
        except RemoteAPIError as e:
            self.status = FormStatus.FAILED
            logger.error(f"❌ Gagal menyimpan soal: {e.detail}")
            self.reporter.notify(NotificationKind.ERROR, SAVE_FAILED_MESSAGE, error_message(e))
            return None

        self.status = FormStatus.SAVED
        self.saved = saved
        self.record_id = saved.id
        self._hydrated_id = saved.id
        logger.info(f"✅ Soal {saved.id} tersimpan")
        self.reporter.notify(NotificationKind.SUCCESS, SAVE_OK_MESSAGE)
        if self.on_saved is not None:
            self.on_saved(saved)
        return saved

    # --------------------------------------------------------------- uploads

    async def upload_media(
        self,
        filename: str | None,
        content: bytes | None,
        content_type: str = "application/octet-stream",
    ) -> Dict[str, Any]:
        """
        Upload an image or video for the rich-text editor.

        The answer uses the editor's callback shape: ``{"result": [...]}`` on
        success, ``{"errorMessage": ...}`` otherwise. Failures never touch
        the rest of the form.
        """
        if not filename or content is None:
            return {"errorMessage": FILE_MISSING_MESSAGE}

        try:
            response = await self.api.upload_file(filename, content, content_type)
            url = extract_upload_url(response)
        except UploadError as e:
            logger.error(f"❌ URL upload tidak ditemukan untuk {filename}")
            return {"errorMessage": e.detail}
        except RemoteAPIError as e:
            logger.error(f"❌ Upload {filename} gagal: {e.detail}")
            return {"errorMessage": e.detail or UPLOAD_FAILED_MESSAGE}

        logger.info(f"📎 {filename} terunggah: {url}")
        return {"result": [{"url": url, "name": filename, "size": len(content)}]}
