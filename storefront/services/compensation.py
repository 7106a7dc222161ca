# storefront/services/compensation.py
from typing import Callable, List, Tuple

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CompensationLog:
    """
    Rejestr wykonanych krokow wieloetapowej operacji.

    Kazdy krok zapisuje swoja operacje odwrotna. Przy bledzie `compensate()`
    wykonuje je w odwrotnej kolejnosci. Blad pojedynczej operacji odwrotnej
    jest logowany i nie przerywa pozostalych.
    """

    def __init__(self, operation: str, entity_id: str | None = None):
        self.operation = operation
        self.entity_id = entity_id
        self._steps: List[Tuple[str, Callable[[], object]]] = []

    def record(self, name: str, undo: Callable[[], object]):
        self._steps.append((name, undo))

    @property
    def steps(self) -> List[str]:
        return [name for name, _ in self._steps]

    def compensate(self) -> List[str]:
        """Zwraca nazwy krokow, ktorych nie udalo sie odwrocic."""
        failed = []
        while self._steps:
            name, undo = self._steps.pop()
            try:
                undo()
                logger.info(f"[{self.operation}] {self.entity_id}: compensated step '{name}'")
            except Exception as e:
                failed.append(name)
                logger.error(
                    f"[{self.operation}] {self.entity_id}: compensation of '{name}' failed: {e}"
                )
        return failed

    def discard(self):
        # sukces - nic do cofania
        self._steps.clear()
