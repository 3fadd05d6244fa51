# -*- coding: utf-8 -*-
"""
cbt_admin/domain/variants.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Option/answer model of the six question variants.

Every question type owns a fixed set of fields: which option shape it uses,
whether it keys on a literal ``answer`` and whether it is scored through an
explicit ``total_point``. This module holds:

* the option models and their default seeds;
* :data:`VARIANT_RULES`, the per-type rule table;
* :func:`coerce_options`, used when hydrating a stored record;
* the payload models, a tagged union discriminated on ``type``;
* :func:`build_payload`, which dispatches through :data:`PAYLOAD_BUILDERS`.

Both tables are checked against :class:`QuestionType` at import time, so a new
variant without a rule and a builder fails as soon as the package loads.
"""

from dataclasses import dataclass, field
from string import ascii_lowercase
from typing import Annotated, Callable, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.enums import QuestionType
from cbt_admin.utils.exceptions import ValidationError

logger = configure_logger(__name__)

Number = Union[int, float]


# ----------------------------- OPTIONS ----------------------------------------


class MCOption(BaseModel):
    """Lettered option of multiple choice, true/false and multi-answer."""

    model_config = ConfigDict(extra="ignore")

    option: str
    text: str = ""
    point: Number = 0


class CategorizedOption(BaseModel):
    """Statement of a categorized question, judged accurate or not accurate."""

    model_config = ConfigDict(extra="ignore")

    text: str = ""
    point: Number = 1
    accurate: bool = False
    not_accurate: bool = False
    accurate_label: str = ""
    not_accurate_label: str = ""


Option = Union[MCOption, CategorizedOption]


@dataclass(frozen=True)
class VariantRule:
    """What a question type carries besides the base fields."""

    option_model: Optional[Type[BaseModel]]
    seed: tuple = ()
    allows_add_remove: bool = False
    has_answer: bool = False
    has_total_point: bool = False
    # Keys a stored option must carry to be read as this variant's shape
    shape_keys: frozenset = frozenset()

    @property
    def has_options(self) -> bool:
        return self.option_model is not None


def _lettered(count: int) -> tuple:
    return tuple({"option": ascii_lowercase[i], "text": "", "point": 0} for i in range(count))


VARIANT_RULES: Dict[QuestionType, VariantRule] = {
    QuestionType.MULTIPLE_CHOICE: VariantRule(
        option_model=MCOption,
        seed=_lettered(5),
        allows_add_remove=True,
        has_answer=True,
        shape_keys=frozenset({"option"}),
    ),
    QuestionType.TRUE_FALSE: VariantRule(
        option_model=MCOption,
        seed=(
            {"option": "a", "text": "True", "point": 1},
            {"option": "b", "text": "False", "point": 0},
        ),
        has_answer=True,
        shape_keys=frozenset({"option"}),
    ),
    QuestionType.MULTIPLE_CHOICE_MULTIPLE_ANSWER: VariantRule(
        option_model=MCOption,
        seed=_lettered(3),
        allows_add_remove=True,
        has_answer=True,
        has_total_point=True,
        shape_keys=frozenset({"option"}),
    ),
    QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY: VariantRule(
        option_model=CategorizedOption,
        seed=(
            {
                "text": "",
                "point": 1,
                "accurate": False,
                "not_accurate": False,
                "accurate_label": "",
                "not_accurate_label": "",
            },
        ),
        allows_add_remove=True,
        has_total_point=True,
        shape_keys=frozenset({"accurate", "not_accurate"}),
    ),
    QuestionType.ESSAY: VariantRule(
        option_model=None,
        has_answer=True,
        has_total_point=True,
    ),
    # No option or answer shape has been settled for matching questions
    QuestionType.MATCHING: VariantRule(option_model=None),
}


def rule_for(question_type: QuestionType | str) -> VariantRule:
    return VARIANT_RULES[QuestionType(question_type)]


def default_options(question_type: QuestionType | str) -> List[Option]:
    """
    Fresh copy of the default seed of a variant.

    Args:
        question_type: Question type

    Returns:
        List of option models, empty for variants without options
    """
    rule = rule_for(question_type)
    if not rule.has_options:
        return []
    return [rule.option_model(**item) for item in rule.seed]


def new_option(question_type: QuestionType | str, letter: str | None = None) -> Option:
    """Blank option for a variant that allows adding options."""
    rule = rule_for(question_type)
    if not rule.allows_add_remove:
        raise ValidationError(
            f"Opsi tidak dapat ditambah untuk tipe {QuestionType(question_type).value}"
        )
    if rule.option_model is MCOption:
        return MCOption(option=letter or "a", text="", point=0)
    return rule.option_model(**rule.seed[0])


def next_option_letter(options: List[MCOption]) -> str:
    """
    Letter for an appended option.

    The letter follows the position (``a`` for an empty list, ``f`` after
    five options). When a deletion left that letter in use, the first unused
    letter after it is taken. Existing letters are never changed.
    """
    used = {opt.option for opt in options}
    start = len(options)
    for index in range(start, len(ascii_lowercase)):
        letter = ascii_lowercase[index]
        if letter not in used:
            return letter
    for letter in ascii_lowercase:
        if letter not in used:
            return letter
    raise ValidationError("Jumlah opsi sudah maksimal")


def coerce_options(question_type: QuestionType | str, raw) -> List[Option]:
    """
    Map a stored ``options`` array onto the option type of ``question_type``.

    Legacy or corrupt data (not a list, empty, items of another variant's
    shape, or values that do not validate) falls back to the default seed.

    Args:
        question_type: Type of the stored question
        raw: Whatever the API returned in ``options``

    Returns:
        List of option models
    """
    question_type = QuestionType(question_type)
    rule = VARIANT_RULES[question_type]
    if not rule.has_options:
        return []

    if not isinstance(raw, list) or not raw:
        return default_options(question_type)

    if not all(isinstance(item, dict) and rule.shape_keys <= item.keys() for item in raw):
        logger.warning(
            f"⚠️ Opsi tersimpan tidak cocok dengan tipe {question_type.value}, memakai default"
        )
        return default_options(question_type)

    try:
        return TypeAdapter(List[rule.option_model]).validate_python(raw)
    except PydanticValidationError as e:
        logger.warning(
            f"⚠️ Opsi tersimpan tidak valid untuk tipe {question_type.value}: {e.error_count()} kesalahan"
        )
        return default_options(question_type)


# ----------------------------- PAYLOADS ---------------------------------------


class BaseQuestionPayload(BaseModel):
    """Fields shared by every variant."""

    model_config = ConfigDict(extra="forbid")

    question_category_id: int
    question: str
    explanation: Optional[str] = None

    def to_wire(self) -> dict:
        """JSON body for the remote API, without unset optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


class MultipleChoicePayload(BaseQuestionPayload):
    type: Literal[QuestionType.MULTIPLE_CHOICE]
    options: List[MCOption] = Field(min_length=2)
    answer: str


class TrueFalsePayload(BaseQuestionPayload):
    type: Literal[QuestionType.TRUE_FALSE]
    options: List[MCOption] = Field(min_length=2, max_length=2)
    answer: str


class MultipleAnswerPayload(BaseQuestionPayload):
    type: Literal[QuestionType.MULTIPLE_CHOICE_MULTIPLE_ANSWER]
    options: List[MCOption]
    answer: str
    total_point: Number


class CategorizedPayload(BaseQuestionPayload):
    type: Literal[QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY]
    options: List[CategorizedOption]
    total_point: Number


class EssayPayload(BaseQuestionPayload):
    type: Literal[QuestionType.ESSAY]
    answer: str
    total_point: Number


class MatchingPayload(BaseQuestionPayload):
    type: Literal[QuestionType.MATCHING]


QuestionPayload = Annotated[
    Union[
        MultipleChoicePayload,
        TrueFalsePayload,
        MultipleAnswerPayload,
        CategorizedPayload,
        EssayPayload,
        MatchingPayload,
    ],
    Field(discriminator="type"),
]

question_payload_adapter = TypeAdapter(QuestionPayload)


@dataclass
class QuestionDraft:
    """Snapshot of the editor that a payload is built from."""

    question_category_id: Optional[int]
    type: QuestionType
    question: str = ""
    explanation: str = ""
    answer: str = ""
    total_point: Number = 5
    options: Dict[QuestionType, List[Option]] = field(default_factory=dict)

    def options_for(self, question_type: QuestionType) -> List[Option]:
        return [opt.model_copy() for opt in self.options.get(question_type, [])]


def _base_fields(draft: QuestionDraft) -> dict:
    return {
        "question_category_id": draft.question_category_id,
        "question": draft.question,
        "type": QuestionType(draft.type),
        "explanation": draft.explanation or None,
    }


def _build_multiple_choice(draft: QuestionDraft) -> MultipleChoicePayload:
    return MultipleChoicePayload(
        **_base_fields(draft),
        options=draft.options_for(QuestionType.MULTIPLE_CHOICE),
        answer=draft.answer,
    )


def _build_true_false(draft: QuestionDraft) -> TrueFalsePayload:
    return TrueFalsePayload(
        **_base_fields(draft),
        options=draft.options_for(QuestionType.TRUE_FALSE),
        answer=draft.answer,
    )


def _build_multiple_answer(draft: QuestionDraft) -> MultipleAnswerPayload:
    return MultipleAnswerPayload(
        **_base_fields(draft),
        options=draft.options_for(QuestionType.MULTIPLE_CHOICE_MULTIPLE_ANSWER),
        answer=draft.answer,
        total_point=draft.total_point,
    )


def _build_categorized(draft: QuestionDraft) -> CategorizedPayload:
    return CategorizedPayload(
        **_base_fields(draft),
        options=draft.options_for(QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY),
        total_point=draft.total_point,
    )


def _build_essay(draft: QuestionDraft) -> EssayPayload:
    return EssayPayload(
        **_base_fields(draft),
        answer=draft.answer,
        total_point=draft.total_point,
    )


def _build_matching(draft: QuestionDraft) -> MatchingPayload:
    return MatchingPayload(**_base_fields(draft))


PAYLOAD_BUILDERS: Dict[QuestionType, Callable[[QuestionDraft], BaseQuestionPayload]] = {
    QuestionType.MULTIPLE_CHOICE: _build_multiple_choice,
    QuestionType.TRUE_FALSE: _build_true_false,
    QuestionType.MULTIPLE_CHOICE_MULTIPLE_ANSWER: _build_multiple_answer,
    QuestionType.MULTIPLE_CHOICE_MULTIPLE_CATEGORY: _build_categorized,
    QuestionType.ESSAY: _build_essay,
    QuestionType.MATCHING: _build_matching,
}


def build_payload(draft: QuestionDraft) -> BaseQuestionPayload:
    """
    Assemble the submission payload of a draft.

    Pure: nothing is sent and the draft is not modified.

    Args:
        draft: Editor snapshot

    Returns:
        Payload model of the draft's variant

    Raises:
        ValidationError: No category selected, empty question text, or the
            variant's fields do not validate
    """
    if not draft.question_category_id:
        raise ValidationError("Kategori belum dipilih")
    if not draft.question or not draft.question.strip():
        raise ValidationError("Pertanyaan tidak boleh kosong")

    builder = PAYLOAD_BUILDERS[QuestionType(draft.type)]
    try:
        return builder(draft)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Data soal tidak valid ({location}): {first['msg']}") from e


def _check_exhaustive() -> None:
    for table_name, table in (
        ("VARIANT_RULES", VARIANT_RULES),
        ("PAYLOAD_BUILDERS", PAYLOAD_BUILDERS),
    ):
        missing = set(QuestionType) - set(table)
        if missing:
            names = ", ".join(sorted(t.value for t in missing))
            raise RuntimeError(f"{table_name} has no entry for: {names}")


_check_exhaustive()
