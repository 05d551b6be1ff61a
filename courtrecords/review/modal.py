"""Confirmation and notification service injected into the review workflow."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfirmOptions:
    title: str
    message: str
    confirm_text: str = "OK"
    cancel_text: str = "Cancel"
    kind: str = "info"
    input_placeholder: Optional[str] = None


@dataclass(frozen=True)
class ConfirmResult:
    confirmed: bool
    value: Optional[str] = None


class ModalService(Protocol):
    """Anything that can ask the user to confirm and show a notification."""

    def confirm(self, options: ConfirmOptions) -> ConfirmResult:
        ...

    def notify(self, level: str, title: str, message: str) -> None:
        ...


@dataclass
class AutoConfirmModal:
    """Confirms every prompt and keeps notifications for later display."""

    answer: bool = True
    notifications: List[Tuple[str, str, str]] = field(default_factory=list)

    def confirm(self, options: ConfirmOptions) -> ConfirmResult:
        return ConfirmResult(confirmed=self.answer)

    def notify(self, level: str, title: str, message: str) -> None:
        self.notifications.append((level, title, message))
        logger.info("[%s] %s: %s", level, title, message)


class ConsoleModal:
    """Terminal prompts for the CLI."""

    def __init__(
        self,
        prompt: Optional[Callable[[str], str]] = None,
        echo: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._prompt = prompt or input
        self._echo = echo or print

    def confirm(self, options: ConfirmOptions) -> ConfirmResult:
        self._echo(f"{options.title}: {options.message}")
        answer = self._prompt(f"{options.confirm_text}? [y/N] ").strip().lower()
        return ConfirmResult(confirmed=answer in {"y", "yes"})

    def notify(self, level: str, title: str, message: str) -> None:
        self._echo(f"[{level.upper()}] {title}: {message}")
