# /checkin/workflows/pacing.py

import asyncio
from typing import Awaitable, Callable
from pydantic import BaseModel, ConfigDict

from checkin.config.settings import Settings

# Awaitable pause, in seconds. Injected so tests never wait on the wall clock.
Delay = Callable[[float], Awaitable[None]]


class PacingConfig(BaseModel):
    """Typing simulation constants, in milliseconds."""
    ms_per_char: int = 15
    max_typing_ms: int = 1500
    settle_ms: int = 300
    image_ms: int = 400

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_settings(cls, settings: Settings) -> "PacingConfig":
        return cls(
            ms_per_char=settings.typing_ms_per_char,
            max_typing_ms=settings.typing_max_ms,
            settle_ms=settings.typing_settle_ms,
            image_ms=settings.image_typing_ms,
        )

    def typing_ms(self, text: str, has_image: bool = False) -> int:
        """How long the typing indicator shows before a bot message is revealed."""
        if has_image:
            return self.image_ms
        # Length in UTF-16 code units: an emoji counts as two characters
        units = len((text or "").encode("utf-16-le")) // 2
        return min(units * self.ms_per_char, self.max_typing_ms)


async def real_delay(seconds: float) -> None:
    await asyncio.sleep(seconds)


async def no_delay(seconds: float) -> None:
    # Still yields to the loop so emission order matches the paced run
    await asyncio.sleep(0)
