"""Event-camera samples: single pixel events and arrays of them."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator

from sensor_samples.frame import EPOCH


@dataclass
class Event:
    """A brightness change reported by one pixel of an event camera."""

    x: int = 0
    y: int = 0
    ts: datetime = EPOCH
    polarity: int = 0


@dataclass
class EventArray:
    """A batch of events from a sensor of the given size in pixels."""

    time: datetime = EPOCH
    height: int = 0
    width: int = 0
    events: list[Event] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self.events)