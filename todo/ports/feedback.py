from typing import Protocol

class FeedbackDevice(Protocol):
    """Most do natywnych funkcji urządzenia: wibracja i lampa błyskowa."""

    async def vibrate(self, duration_ms: int) -> None:
        ...

    async def flash_on(self) -> None:
        ...

    async def flash_off(self) -> None:
        ...
