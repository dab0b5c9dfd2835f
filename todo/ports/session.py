from typing import Protocol, Optional
from todo.domain.task import UserId

class SessionProvider(Protocol):
    """Źródło tożsamości zalogowanego użytkownika (dostawca uwierzytelniania).

    `None` oznacza brak sesji; repozytorium traktuje to jako UnauthenticatedError.
    """
    def current_user(self) -> Optional[UserId]:
        ...
