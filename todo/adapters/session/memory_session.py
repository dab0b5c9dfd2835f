from typing import Optional
from todo.domain.task import UserId


class InMemorySession:
    """Sesja w pamięci procesu. Jedna referencja do bieżącego użytkownika."""

    def __init__(self, user_id: Optional[str] = None) -> None:
        self._user = UserId(user_id) if user_id else None

    def sign_in(self, user_id: str) -> None:
        self._user = UserId(user_id)

    def sign_out(self) -> None:
        self._user = None

    def current_user(self) -> Optional[UserId]:
        return self._user
