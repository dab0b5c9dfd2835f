from todo.domain.enums import ErrorKind

### COMMENTS
# ============================================
# Konwencja użycia błędów domenowych w projekcie
# ============================================
# - Adaptery (magazyn dokumentów):
#     * NIE rzucają błędów domenowych, tylko DocumentStoreError / DocumentNotFoundError
#
# - Repozytorium zadań (services/task_repository.py):
#     * sprawdza sesję, walidację, istnienie i właściciela rekordu
#     * mapuje DocumentStoreError na StoreUnavailableError
#
# - Kontroler:
#     * łapie DomainError i zamienia go na ControllerResult z `kind` i komunikatami
#
# - UI (CLI):
#     * pokazuje komunikaty z ControllerResult, wszystko inne traktuje jako błąd techniczny


class DomainError(Exception):
    """Bazowa klasa dla błędów domenowych.

    Każda klasa pochodna ustawia `kind` (ErrorKind), dzięki czemu wywołujący może
    odróżnić błąd danych wejściowych od awarii infrastruktury bez parsowania tekstu.
    Nie powinna być rzucana bezpośrednio, używaj klas pochodnych.
    """
    kind: ErrorKind = ErrorKind.STORE_UNAVAILABLE

    @property
    def messages(self) -> list[str]:
        return [str(self)]


class UnauthenticatedError(DomainError):
    """Rzucany, gdy operacja wymaga zalogowanego użytkownika, a sesja jest pusta."""
    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self):
        super().__init__(self.__str__())
    def __str__(self):
        return "Brak zalogowanego użytkownika."


class TaskValidationError(DomainError):
    """Rzucany, gdy dane wejściowe nie spełniają reguł biznesowych dla zadania.

    Przykłady:
    - tytuł jest pusty albo dłuższy niż 100 znaków,
    - opis jest dłuższy niż 500 znaków,
    - termin (due_date) jest wcześniejszy niż dzisiaj.

    Niesie pełną listę naruszonych reguł (`errors`), żeby UI mogło pokazać
    wszystkie problemy naraz.
    """
    kind = ErrorKind.INVALID_INPUT

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(self.__str__())

    @property
    def messages(self) -> list[str]:
        return list(self.errors)

    def __str__(self):
        return "Błąd walidacji: " + "; ".join(self.errors)


class TaskNotFoundError(DomainError):
    """Rzucany, gdy żądane zadanie nie istnieje w magazynie.
    Występuje w operacjach wymagających istnienia rekordu: `update()`, `delete()`,
    przełączanie statusu.
    """
    kind = ErrorKind.NOT_FOUND

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Zadanie o ID {self.task_id} nie istnieje."


class TaskAccessDeniedError(DomainError):
    """Rzucany, gdy rekord istnieje, ale należy do innego użytkownika."""
    kind = ErrorKind.FORBIDDEN

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(self.__str__())
    def __str__(self):
        return f"Brak uprawnień do zadania o ID {self.task_id}."


class StoreUnavailableError(DomainError):
    """Rzucany, gdy zawiódł sam magazyn dokumentów (sieć, dysk, baza).

    Warstwa repozytorium nie ponawia operacji, opakowuje błąd techniczny
    w ogólny komunikat (`operation` mówi, co się nie udało).
    """
    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(self.__str__())
    def __str__(self):
        return f"Nie udało się {self.operation}. Spróbuj ponownie później."


class SessionStorageError(DomainError):
    """Rzucany, gdy nie da się odczytać ani zapisać pliku sesji (dysk, uprawnienia)."""
    kind = ErrorKind.STORE_UNAVAILABLE

    def __init__(self, path: str):
        self.path = path
        super().__init__(self.__str__())
    def __str__(self):
        return f"Nie udało się obsłużyć pliku sesji {self.path}."
