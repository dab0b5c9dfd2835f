from __future__ import annotations
import asyncio
import logging
from todo.ports.feedback import FeedbackDevice
from todo.domain.alarm import AlarmConfig, AlarmResponse, DEFAULT_ALARM_CONFIG
from todo.domain.enums import AlarmType, AlarmErrorCode

logger = logging.getLogger(__name__)


### COMMENTS
# ==========================================================
# Serwis alarmu (services/alarm_service.py): wibracja + lampa z automatycznym wyłączeniem.
# ==========================================================
# - Lampa gaśnie sama po `flash_duration` ms (jeden timer: zadanie asyncio).
# - Śledzimy tylko jeden timer; nowy alarm w trakcie trwającego jest odrzucany,
#   nie kolejkowany. Slot lampy zajmujemy synchronicznie, zanim cokolwiek zawiesi
#   korutynę, więc dwa równoległe wywołania nie przejdą obu sprawdzeń.
# - BOTH: wibracja i lampa równolegle (asyncio.gather). Jeśli jedna akcja zawiedzie,
#   wynik to PARTIAL_FAILURE, a skutek udanej akcji zostaje (brak wycofania).


class AlarmService:
    """
    Wyzwala sygnały na urządzeniu przez port FeedbackDevice.

    :param device: Most do natywnych funkcji urządzenia.
    """
    def __init__(self, device: FeedbackDevice) -> None:
        self.device = device
        self._flash_active = False
        self._flash_timer: asyncio.Task | None = None

    @property
    def is_active(self) -> bool:
        return self._flash_active

    async def trigger_alarm(self, config: AlarmConfig = DEFAULT_ALARM_CONFIG) -> AlarmResponse:
        """
            Uruchamia alarm zgodnie z `config.type`.

            :return: AlarmResponse; `error` = ALARM_ALREADY_ACTIVE, INVALID_ALARM_TYPE
                     albo PARTIAL_FAILURE, gdy coś poszło nie tak.
        """
        if self._flash_active:
            return AlarmResponse(False, "Alarm jest już aktywny", AlarmErrorCode.ALARM_ALREADY_ACTIVE)
        if config.type in (AlarmType.FLASH, AlarmType.BOTH):
            # zajmij slot przed pierwszym await
            self._flash_active = True

        logger.debug("Uruchamiam alarm: %s", config)
        if config.type == AlarmType.VIBRATION:
            results = [await self._trigger_vibration(config.vibration_duration)]
        elif config.type == AlarmType.FLASH:
            results = [await self._trigger_flash(config.flash_duration)]
        elif config.type == AlarmType.BOTH:
            results = list(await asyncio.gather(
                self._trigger_vibration(config.vibration_duration),
                self._trigger_flash(config.flash_duration),
            ))
        else:
            return AlarmResponse(False, "Nieprawidłowy typ alarmu", AlarmErrorCode.INVALID_ALARM_TYPE)

        if any(not r.success for r in results):
            return AlarmResponse(False, "Alarm uruchomiony z błędami", AlarmErrorCode.PARTIAL_FAILURE)
        return AlarmResponse(True, "Alarm uruchomiony")

    async def _trigger_vibration(self, duration_ms: int) -> AlarmResponse:
        try:
            await self.device.vibrate(duration_ms)
        except Exception as e:
            logger.exception("Wibracja nie powiodła się")
            return AlarmResponse(False, "Nie udało się uruchomić wibracji", str(e) or AlarmErrorCode.DEVICE_ERROR)
        return AlarmResponse(True, f"Wibracja przez {duration_ms} ms")

    async def _trigger_flash(self, duration_ms: int) -> AlarmResponse:
        try:
            await self.device.flash_on()
            self._flash_timer = asyncio.create_task(self._auto_off(duration_ms / 1000))
        except asyncio.CancelledError:
            self._flash_active = False
            raise
        except Exception as e:
            logger.exception("Lampa nie powiodła się")
            await self._disable_flash()
            return AlarmResponse(False, "Nie udało się włączyć lampy", str(e) or AlarmErrorCode.DEVICE_ERROR)
        return AlarmResponse(True, f"Lampa włączona na {duration_ms} ms")

    async def _auto_off(self, delay: float) -> None:
        await asyncio.sleep(delay)
        await self._disable_flash()

    async def _disable_flash(self) -> None:
        timer = self._flash_timer
        self._flash_timer = None
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()
        self._flash_active = False
        try:
            await self.device.flash_off()
        except Exception:
            logger.exception("Nie udało się wyłączyć lampy")

    async def stop_alarm(self) -> AlarmResponse:
        await self._disable_flash()
        return AlarmResponse(True, "Alarm zatrzymany")

    async def wait_idle(self) -> None:
        """Czeka, aż lampa zgaśnie sama (np. zanim CLI zamknie pętlę zdarzeń)."""
        timer = self._flash_timer
        if timer is not None:
            await asyncio.wait({timer})
