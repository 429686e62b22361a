"""Optional voice collaborators.

Recognition and synthesis live outside this package. Both are optional: with
neither present the assistant behaves exactly as it does for typed input.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from cryptochat.core.models import Reply

if TYPE_CHECKING:
    from cryptochat.conversation.orchestrator import Orchestrator

logger = logging.getLogger(__name__)


class SpeechRecognizer(Protocol):
    def start_listening(self, on_result: Callable[[str], None]) -> None: ...

    def stop_listening(self) -> None: ...


class SpeechSynthesizer(Protocol):
    def speak(self, text: str) -> None: ...


class VoiceChannel:
    """Feeds recognized speech into the same entry point as typed text."""

    def __init__(
        self,
        orchestrator: Orchestrator,
        recognizer: SpeechRecognizer | None = None,
        on_reply: Callable[[Reply], None] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.recognizer = recognizer
        self.on_reply = on_reply
        self.listening = False

    @property
    def available(self) -> bool:
        return self.recognizer is not None

    def start(self) -> bool:
        if self.recognizer is None:
            logger.info("No speech recognizer configured; text input only")
            return False
        self.recognizer.start_listening(self.on_result)
        self.listening = True
        return True

    def stop(self) -> None:
        if self.recognizer is not None and self.listening:
            self.recognizer.stop_listening()
        self.listening = False

    def on_result(self, text: str) -> Reply | None:
        text = text.strip()
        if not text:
            return None
        reply = self.orchestrator.handle_utterance(text)
        if self.on_reply is not None:
            self.on_reply(reply)
        return reply
