from dataclasses import dataclass
from todo.domain.enums import AlarmType, AlarmErrorCode
from todo.domain.validation import ValidationResult

MIN_VIBRATION_MS = 50
MAX_VIBRATION_MS = 5000
MIN_FLASH_MS = 1000
MAX_FLASH_MS = 10000


@dataclass(frozen=True)
class AlarmConfig:
    """Konfiguracja alarmu; czasy w milisekundach. Obiekt przejściowy, nie jest zapisywany."""
    vibration_duration: int = 200
    flash_duration: int = 3000
    type: AlarmType = AlarmType.BOTH


DEFAULT_ALARM_CONFIG = AlarmConfig()


@dataclass(frozen=True)
class AlarmResponse:
    success: bool
    message: str
    error: AlarmErrorCode | str | None = None


def validate_alarm_config(config: AlarmConfig) -> ValidationResult:
    errors = []
    if not MIN_VIBRATION_MS <= config.vibration_duration <= MAX_VIBRATION_MS:
        errors.append(
            f"Czas wibracji musi mieścić się w zakresie {MIN_VIBRATION_MS}-{MAX_VIBRATION_MS} ms"
        )
    if not MIN_FLASH_MS <= config.flash_duration <= MAX_FLASH_MS:
        errors.append(
            f"Czas błysku musi mieścić się w zakresie {MIN_FLASH_MS}-{MAX_FLASH_MS} ms"
        )
    return ValidationResult.from_errors(errors)
