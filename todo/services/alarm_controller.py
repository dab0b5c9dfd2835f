import logging
from dataclasses import replace, asdict
from todo.services.alarm_service import AlarmService
from todo.domain.alarm import AlarmConfig, AlarmResponse, DEFAULT_ALARM_CONFIG, validate_alarm_config
from todo.domain.validation import ValidationResult
from todo.domain.enums import AlarmErrorCode

logger = logging.getLogger(__name__)


class AlarmController:
    """Pośredniczy między widokiem a AlarmService: scala konfigurację, waliduje, loguje."""

    def __init__(self, service: AlarmService) -> None:
        self.service = service

    async def handle_alarm_request(self, **overrides) -> AlarmResponse:
        """
            Uruchamia alarm z domyślną konfiguracją nadpisaną przez `overrides`
            (vibration_duration, flash_duration, type).

            Niepoprawna konfiguracja nie dociera do urządzenia (INVALID_CONFIG).
        """
        config = self.prepare_config(**overrides)
        validation = self.validate_custom_config(config)
        if not validation.is_valid:
            return AlarmResponse(False, "; ".join(validation.errors), AlarmErrorCode.INVALID_CONFIG)

        result = await self.service.trigger_alarm(config)
        logger.info(
            "Alarm wykonany: config=%s success=%s message=%s error=%s",
            asdict(config), result.success, result.message, result.error,
        )
        return result

    async def handle_stop_alarm_request(self) -> AlarmResponse:
        return await self.service.stop_alarm()

    def is_alarm_active(self) -> bool:
        return self.service.is_active

    def default_config(self) -> AlarmConfig:
        return DEFAULT_ALARM_CONFIG

    def prepare_config(self, **overrides) -> AlarmConfig:
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(DEFAULT_ALARM_CONFIG, **values)

    def validate_custom_config(self, config: AlarmConfig) -> ValidationResult:
        return validate_alarm_config(config)
