"""Actuation session control for pulse-train previews."""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, List, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from text2vibe.compiler.pulse import PulseTrain, compile_pulse_train
from text2vibe.model import VibrationConfig

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class Actuator(Protocol):
    """Vibration capability exposed by the host."""

    def drive(self, pattern: Sequence[int]) -> None:
        ...

    def stop(self) -> None:
        ...


class SessionState(str, enum.Enum):
    IDLE = "idle"
    DRIVING = "driving"


class RecordingActuator:
    """Simulated actuator that keeps a history of the calls it received."""

    def __init__(self) -> None:
        self.history: List[Tuple[str, Optional[Tuple[int, ...]]]] = []

    def drive(self, pattern: Sequence[int]) -> None:
        self.history.append(("drive", tuple(pattern)))

    def stop(self) -> None:
        self.history.append(("stop", None))

    def last_pattern(self) -> Optional[Tuple[int, ...]]:
        for action, pattern in reversed(self.history):
            if action == "drive":
                return pattern
        return None


class ActuationController:
    """Own the single active playback on an actuator.

    Starting a session always stops the actuator and cancels the pending
    auto-stop of the previous session first; there is no queueing. The
    auto-stop timer only returns the controller to idle if it still belongs
    to the current session.
    """

    def __init__(
        self,
        actuator: Optional[Actuator],
        *,
        timer_factory: Callable[[float, Callable[[], None]], Any] = threading.Timer,
    ) -> None:
        self._actuator = actuator
        self._timer_factory = timer_factory
        self._lock = threading.RLock()
        self._state = SessionState.IDLE
        self._timer: Any = None
        self._session = 0

    @property
    def available(self) -> bool:
        return self._actuator is not None

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_driving(self) -> bool:
        return self.state is SessionState.DRIVING

    def play(self, source: Union[VibrationConfig, PulseTrain]) -> bool:
        """Drive the actuator with *source*; return False when unavailable."""

        if self._actuator is None:
            _LOGGER.warning("Vibration actuator unavailable; skipping playback")
            return False

        train = source if isinstance(source, PulseTrain) else compile_pulse_train(source)

        with self._lock:
            self._actuator.stop()
            self._cancel_timer()
            self._session += 1
            session = self._session

            self._actuator.drive(list(train.pattern))
            self._state = SessionState.DRIVING

            timer = self._timer_factory(train.total_ms / 1000.0, lambda: self._finish(session))
            timer.daemon = True
            self._timer = timer
            timer.start()

        _LOGGER.debug("Driving session %d for %d ms: %s", session, train.total_ms, train.pattern)
        return True

    def cancel(self) -> None:
        """Stop any active session immediately."""

        with self._lock:
            self._cancel_timer()
            self._session += 1
            if self._actuator is not None:
                self._actuator.stop()
            self._state = SessionState.IDLE

    def _finish(self, session: int) -> None:
        with self._lock:
            if session != self._session:
                return
            self._timer = None
            self._state = SessionState.IDLE
        _LOGGER.debug("Session %d finished", session)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["ActuationController", "Actuator", "RecordingActuator", "SessionState"]
