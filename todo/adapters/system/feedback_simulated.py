import logging

logger = logging.getLogger(__name__)


class SimulatedFeedbackDevice:
    """
    Urządzenie bez natywnych wtyczek: zamiast wibrować i świecić, loguje akcje.

    Używane przez CLI i w środowisku bez sprzętu. Stan lampy jest widoczny
    przez `flash_lit`.
    """

    def __init__(self) -> None:
        self.flash_lit = False

    async def vibrate(self, duration_ms: int) -> None:
        logger.info("Wibracja przez %d ms", duration_ms)

    async def flash_on(self) -> None:
        self.flash_lit = True
        logger.info("Lampa włączona")

    async def flash_off(self) -> None:
        self.flash_lit = False
        logger.info("Lampa wyłączona")
