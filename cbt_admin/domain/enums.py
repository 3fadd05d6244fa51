# -*- coding: utf-8 -*-
"""
cbt_admin/domain/enums.py
~~~~~~~~~~~~~~~~~~~~~~~~~
Enumerations shared across the CBT admin domain.

Roles, question types, timer types and notification kinds used by the
controllers and the HTTP surface.
"""

import enum


class Role(str, enum.Enum):
    """Role names issued by the authentication provider."""

    SUPERADMIN = "superadmin"
    PENGAWAS = "pengawas"  # Supervisor, sees only tests it owns


class QuestionType(str, enum.Enum):
    """Supported question variants."""

    MULTIPLE_CHOICE = "multiple_choice"
    TRUE_FALSE = "true_false"
    MULTIPLE_CHOICE_MULTIPLE_ANSWER = "multiple_choice_multiple_answer"
    MULTIPLE_CHOICE_MULTIPLE_CATEGORY = "multiple_choice_multiple_category"
    ESSAY = "essay"
    MATCHING = "matching"  # Reserved, no option shape yet


class TimerType(str, enum.Enum):
    """How the exam timer is applied."""

    PER_TEST = "per_test"
    PER_CATEGORY = "per_category"


class FormStatus(str, enum.Enum):
    """Lifecycle of the question editor."""

    IDLE = "idle"
    EDITING = "editing"
    SUBMITTING = "submitting"
    SAVED = "saved"
    FAILED = "failed"


class NotificationKind(str, enum.Enum):
    """Severity of a transient user notification."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"
