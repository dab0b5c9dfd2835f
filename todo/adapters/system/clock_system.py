from todo.ports.clock import Clock
from datetime import datetime, date, timezone

class SystemClock(Clock):
    """Adapter systemowy korzystający z bieżącego czasu."""

    def now(self) -> datetime:
        """Zwraca aktualny czas w strefie UTC (aware)."""
        return datetime.now(timezone.utc)

    def today(self) -> date:
        """Zwraca dzisiejszą datę według strefy lokalnej maszyny."""
        return datetime.now().astimezone().date()
