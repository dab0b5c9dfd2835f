import secrets
import string
from todo.ports.id_provider import IdProvider

ALPHABET = string.ascii_letters + string.digits


class AutoIdProvider(IdProvider):
    """Identyfikatory w stylu baz dokumentów: 20 losowych znaków alfanumerycznych."""

    def __init__(self, length: int = 20) -> None:
        self.length = length

    def new_id(self) -> str:
        return "".join(secrets.choice(ALPHABET) for _ in range(self.length))
