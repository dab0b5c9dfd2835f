from dataclasses import dataclass, field
from datetime import date
from todo.domain.task import TaskDraft, TaskUpdate, UNSET

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))


class TaskValidator:
    """
    Bezstanowe reguły walidacji pól zadania.

    Każda metoda zwraca `ValidationResult` z pełną listą naruszeń (bez
    przerywania na pierwszym błędzie), żeby UI mogło pokazać wszystko naraz.
    """

    @staticmethod
    def validate_title(title: str | None) -> ValidationResult:
        errors = []
        if not title or not title.strip():
            errors.append("Tytuł jest wymagany")
        if title and len(title) > MAX_TITLE_LENGTH:
            errors.append(f"Tytuł nie może mieć więcej niż {MAX_TITLE_LENGTH} znaków")
        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_description(description: str | None) -> ValidationResult:
        errors = []
        if description and len(description) > MAX_DESCRIPTION_LENGTH:
            errors.append(f"Opis nie może mieć więcej niż {MAX_DESCRIPTION_LENGTH} znaków")
        return ValidationResult.from_errors(errors)

    @staticmethod
    def validate_due_date(due_date: date | None, today: date) -> ValidationResult:
        """`today` to początek bieżącego dnia według lokalnego zegara wywołującego."""
        errors = []
        if due_date is not None and due_date < today:
            errors.append("Termin nie może być wcześniejszy niż dzisiaj")
        return ValidationResult.from_errors(errors)

    @classmethod
    def validate(cls, payload: TaskDraft | TaskUpdate, today: date) -> ValidationResult:
        """
            Waliduje całe zadanie albo częściową aktualizację.

            - Dla `TaskDraft` tytuł jest zawsze sprawdzany.
            - Dla `TaskUpdate` sprawdzane są tylko pola różne od `UNSET`.

            :param payload: Dane nowego zadania albo częściowa aktualizacja.
            :param today: Bieżąca data (z portu Clock).
            :return: `ValidationResult` ze wszystkimi naruszeniami.
        """
        errors = []
        if payload.title is not UNSET:
            errors.extend(cls.validate_title(payload.title).errors)
        if payload.description is not UNSET:
            errors.extend(cls.validate_description(payload.description).errors)
        if payload.due_date is not UNSET:
            errors.extend(cls.validate_due_date(payload.due_date, today).errors)
        return ValidationResult.from_errors(errors)
