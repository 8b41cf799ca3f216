# /checkin/workflows/listener.py

"""
Observer contract between a check-in session and whatever presents it.

A session never talks to a UI directly. It calls these hooks in order and the
presentation surface (a web page, the HTTP routes, a test) decides what to do
with them. Every hook is a no-op by default so listeners only override what
they need.
"""

from typing import Any, Dict, List, Optional

from checkin.models.session import ChatMessage, InputRequest, MessageOrigin


class SessionListener:
    async def on_typing_start(self) -> None:
        pass

    async def on_typing_end(self) -> None:
        pass

    async def on_bot_message(self, message: ChatMessage) -> None:
        pass

    async def on_user_message(self, message: ChatMessage) -> None:
        pass

    async def on_awaiting_input(self, request: InputRequest) -> None:
        pass

    async def on_completed(self, answers: Dict[str, str], attachments: List[Any]) -> None:
        pass


class TranscriptListener(SessionListener):
    """Collects everything a session emits, for headless hosting."""

    def __init__(self):
        self.messages: List[ChatMessage] = []
        self.pending_input: Optional[InputRequest] = None
        self.completed: bool = False
        self.typing: bool = False
        self._cursor = 0

    async def on_typing_start(self) -> None:
        self.typing = True

    async def on_typing_end(self) -> None:
        self.typing = False

    async def on_bot_message(self, message: ChatMessage) -> None:
        self.messages.append(message)

    async def on_user_message(self, message: ChatMessage) -> None:
        self.messages.append(message)
        self.pending_input = None

    async def on_awaiting_input(self, request: InputRequest) -> None:
        self.pending_input = request

    async def on_completed(self, answers: Dict[str, str], attachments: List[Any]) -> None:
        self.pending_input = None
        self.completed = True

    def drain(self) -> List[ChatMessage]:
        """Messages emitted since the previous drain."""
        fresh = self.messages[self._cursor:]
        self._cursor = len(self.messages)
        return fresh

    @property
    def bot_texts(self) -> List[str]:
        return [m.text for m in self.messages if m.origin == MessageOrigin.BOT]
