"""
Hamlet - Simulation Clock
Maps real seconds onto a simulated day split into schedule blocks.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from shared.constants import DAY_LENGTH_SECONDS, START_HOUR
from shared.events import DayChanged, TimeOfDay, TimeOfDayChanged

if TYPE_CHECKING:
    from .events import EventBus

logger = logging.getLogger(__name__)

# Start (inclusive) and end (exclusive) hour of each block. Night wraps midnight.
TIME_BLOCKS: dict[TimeOfDay, tuple[float, float]] = {
    TimeOfDay.MORNING: (6.0, 12.0),
    TimeOfDay.NOON: (12.0, 14.0),
    TimeOfDay.AFTERNOON: (14.0, 18.0),
    TimeOfDay.EVENING: (18.0, 22.0),
    TimeOfDay.NIGHT: (22.0, 6.0),
}


def time_of_day_for(hour: float) -> TimeOfDay:
    """Schedule block containing an hour in [0, 24)."""
    for block, (start, end) in TIME_BLOCKS.items():
        if start < end:
            if start <= hour < end:
                return block
        elif hour >= start or hour < end:
            return block
    return TimeOfDay.MORNING


class SimulationClock:
    """
    Simulated time of day.

    One simulated day lasts ``day_length_seconds`` real seconds, so
    ``time_scale`` (simulated hours per real second) is 24 / day length.
    ``advance`` publishes DayChanged when midnight passes and
    TimeOfDayChanged whenever the schedule block changes.
    """

    def __init__(
        self,
        day_length_seconds: float = DAY_LENGTH_SECONDS,
        start_hour: float = START_HOUR,
        events: EventBus | None = None,
    ) -> None:
        if day_length_seconds <= 0:
            raise ValueError("day_length_seconds must be positive")

        self.day_length_seconds = day_length_seconds
        self.current_hour = start_hour % 24.0
        self.day = 1
        self.elapsed_seconds = 0.0
        self.time_of_day = time_of_day_for(self.current_hour)
        self._events = events

    @property
    def time_scale(self) -> float:
        """Simulated hours per real second."""
        return 24.0 / self.day_length_seconds

    @property
    def elapsed_hours(self) -> float:
        """Simulated hours since the clock started."""
        return self.elapsed_seconds * self.time_scale

    @property
    def minute(self) -> int:
        return int((self.current_hour % 1.0) * 60.0)

    def to_sim_hours(self, delta_seconds: float) -> float:
        return delta_seconds * self.time_scale

    def advance(self, delta_seconds: float) -> None:
        """Move time forward by real seconds."""
        if delta_seconds <= 0:
            return

        self.elapsed_seconds += delta_seconds
        self.current_hour += self.to_sim_hours(delta_seconds)

        while self.current_hour >= 24.0:
            self.current_hour -= 24.0
            self.day += 1
            logger.info("Day %d begins", self.day)
            self._publish(DayChanged(new_day=self.day))

        new_block = time_of_day_for(self.current_hour)
        if new_block != self.time_of_day:
            self.time_of_day = new_block
            self.broadcast_time_of_day()

    def broadcast_time_of_day(self) -> None:
        """Publish the current schedule block."""
        self._publish(
            TimeOfDayChanged(
                time_of_day=self.time_of_day,
                hour=self.current_hour,
                minute=self.minute,
            )
        )

    def _publish(self, event: Any) -> None:
        if self._events is not None:
            self._events.publish(event)

    def formatted_time(self) -> str:
        """12-hour clock string, e.g. ``6:30 AM``."""
        hour = int(self.current_hour)
        display_hour = hour % 12 or 12
        period = "PM" if hour >= 12 else "AM"
        return f"{display_hour}:{self.minute:02d} {period}"

    def get_state(self) -> dict[str, Any]:
        return {
            "day": self.day,
            "hour": round(self.current_hour, 2),
            "time_of_day": self.time_of_day.value,
            "formatted": self.formatted_time(),
        }

    def __str__(self) -> str:
        return f"Day {self.day}, {self.formatted_time()} ({self.time_of_day.value})"
