import json
import logging
from pathlib import Path
from typing import Optional
from todo.domain.task import UserId
from todo.domain.errors import SessionStorageError

logger = logging.getLogger(__name__)


class FileSession:
    """
    Sesja zapisywana w pliku JSON (`{"userId": "..."}`), żeby kolejne
    wywołania CLI widziały zalogowanego użytkownika.
    """

    def __init__(self, path: Path) -> None:
        """Tworzy katalog nadrzędny dla pliku, jeśli nie istnieje."""
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def sign_in(self, user_id: str) -> None:
        if not user_id or not user_id.strip():
            raise ValueError("user_id must not be blank")
        try:
            self.path.write_text(json.dumps({"userId": user_id.strip()}), encoding="utf-8")
        except OSError as e:
            raise SessionStorageError(str(self.path)) from e
        logger.info("Zalogowano użytkownika %s", user_id.strip())

    def sign_out(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise SessionStorageError(str(self.path)) from e

    def current_user(self) -> Optional[UserId]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SessionStorageError(str(self.path)) from e

        try:
            user = json.loads(raw).get("userId")
        except (json.JSONDecodeError, AttributeError):
            logger.warning("Uszkodzony plik sesji %s, traktuję jako brak sesji", self.path)
            return None
        if not isinstance(user, str) or not user:
            return None
        return UserId(user)
