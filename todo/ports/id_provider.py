from typing import Protocol

class IdProvider(Protocol):
    """Port odpowiedzialny za generowanie identyfikatorów nowych dokumentów."""
    def new_id(self) -> str:
        ...
