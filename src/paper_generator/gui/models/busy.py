"""
Single-flight guard for the two long operations (generate and export).

At most one of them runs at a time; both triggers are disabled while the
guard is not idle.
"""
import logging
from enum import Enum

from PySide6.QtCore import QObject, Signal

logger = logging.getLogger(__name__)


class BusyState(str, Enum):
    IDLE = "idle"
    GENERATING = "generating"
    EXPORTING = "exporting"


class BusyGuard(QObject):
    """Tracks which long operation is running and announces changes."""

    stateChanged = Signal(object)

    def __init__(self) -> None:
        super().__init__()
        self._state = BusyState.IDLE

    @property
    def state(self) -> BusyState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return self._state is BusyState.IDLE

    def try_acquire(self, state: BusyState) -> bool:
        """Enter `state` if idle. Returns False (and changes nothing) otherwise."""
        if state is BusyState.IDLE:
            raise ValueError("Cannot acquire the idle state")
        if not self.is_idle:
            logger.debug(f"Ignoring {state.value} request while {self._state.value}")
            return False
        self._set(state)
        return True

    def release(self) -> None:
        self._set(BusyState.IDLE)

    def _set(self, state: BusyState) -> None:
        if state is self._state:
            return
        self._state = state
        self.stateChanged.emit(state)
