# -*- coding: utf-8 -*-
"""
Notification and confirmation capability injected into controllers.

Controllers never talk to a UI toolkit; they report through a ``Reporter``.
The BFF uses :class:`LoggingReporter`, tests use a recording fake.
"""

from typing import Any, Protocol, runtime_checkable

from cbt_admin.config.logger import configure_logger
from cbt_admin.domain.enums import NotificationKind

logger = configure_logger(__name__)


@runtime_checkable
class Reporter(Protocol):
    """Transient notifications and yes/no confirmations."""

    def notify(
        self, kind: NotificationKind, message: str, detail: str | None = None
    ) -> None:
        ...

    async def confirm(self, prompt: str, detail: str | None = None) -> bool:
        ...


class LoggingReporter:
    """
    Reporter for non-interactive callers.

    Notifications go to the log and are kept in ``notifications``;
    confirmations answer with ``auto_confirm``.
    """

    def __init__(self, auto_confirm: bool = False):
        self.auto_confirm = auto_confirm
        self.notifications: list[dict[str, Any]] = []

    def notify(
        self, kind: NotificationKind, message: str, detail: str | None = None
    ) -> None:
        self.notifications.append(
            {"kind": NotificationKind(kind).value, "message": message, "detail": detail}
        )
        if kind == NotificationKind.ERROR:
            logger.warning(f"🔔 {message}" + (f" ({detail})" if detail else ""))
        else:
            logger.info(f"🔔 {message}" + (f" ({detail})" if detail else ""))

    async def confirm(self, prompt: str, detail: str | None = None) -> bool:
        logger.info(f"❓ {prompt} -> {'ya' if self.auto_confirm else 'tidak'}")
        return self.auto_confirm
