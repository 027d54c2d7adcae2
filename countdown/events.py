from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Optional

from . import timecalc


class IndexOutOfRangeError(IndexError):
    pass


@dataclass(frozen=True)
class Event:
    name: str
    time: int

    def local_time(self) -> datetime:
        return datetime.fromtimestamp(self.time).astimezone()

    def title(self) -> str:
        return self.name

    def description(self, now: Optional[float] = None) -> str:
        return timecalc.format_countdown(self.time, now)

    def filter_value(self) -> str:
        return self.name

    def to_basic_string(self) -> str:
        return self.local_time().strftime("%Y-%m-%d %H:%M:%S %z %Z")

    def to_rfc1123(self) -> str:
        return self.local_time().strftime("%a, %d %b %Y %H:%M:%S %Z")

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "ts": self.time}


class EventList:
    """Events kept in non-decreasing ``time`` order.

    Equal times keep insertion order: a new event lands after every
    existing event with ``time <= new.time``.
    """

    def __init__(self, events: Optional[Iterable[Event]] = None) -> None:
        self._events: List[Event] = list(events or [])

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(self._events)

    def __getitem__(self, index: int) -> Event:
        return self._events[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EventList):
            return NotImplemented
        return self._events == other._events

    def __repr__(self) -> str:
        return f"EventList({self._events!r})"

    def is_empty(self) -> bool:
        return not self._events

    def to_list(self) -> List[Event]:
        return list(self._events)

    def insert(self, event: Event) -> int:
        index = 0
        for existing in self._events:
            if existing.time <= event.time:
                index += 1
        self._events.insert(index, event)
        return index

    def remove_at(self, index: int) -> Event:
        if not 0 <= index < len(self._events):
            raise IndexOutOfRangeError(f"no event at index {index} (have {len(self._events)})")
        return self._events.pop(index)
