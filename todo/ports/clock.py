from typing import Protocol
from datetime import datetime, date

class Clock(Protocol):
    """Abstrakcja źródła czasu."""
    def now(self) -> datetime:
        """Bieżący czas w strefie UTC (aware)."""

    def today(self) -> date:
        """Bieżąca data kalendarzowa według lokalnego zegara (do walidacji terminów)."""
