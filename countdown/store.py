import json
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from .config import get_events_path
from .events import Event, EventList

logger = logging.getLogger(__name__)

SEED_EVENT_NAME = "Golang's Birthday"
SEED_MONTH = 11
SEED_DAY = 10


class StorageError(Exception):
    pass


class EventsReadError(StorageError):
    pass


class EventsWriteError(StorageError):
    pass


class EventsDecodeError(StorageError):
    pass


def next_golang_birthday(now: Optional[datetime] = None) -> Event:
    if now is None:
        now = datetime.now()
    this_year = datetime(now.year, SEED_MONTH, SEED_DAY)
    if now < this_year:
        return Event(SEED_EVENT_NAME, int(this_year.timestamp()))
    next_year = datetime(now.year + 1, SEED_MONTH, SEED_DAY)
    return Event(SEED_EVENT_NAME, int(next_year.timestamp()))


def _decode_event(item: Any, position: int) -> Event:
    if not isinstance(item, dict):
        raise EventsDecodeError(f"event #{position} is not an object")
    name = item.get("name")
    ts = item.get("ts")
    if not isinstance(name, str):
        raise EventsDecodeError(f"event #{position} has no string 'name'")
    if not isinstance(ts, int) or isinstance(ts, bool):
        raise EventsDecodeError(f"event #{position} has no integer 'ts'")
    event = Event(name, ts)
    try:
        event.local_time()
    except (ValueError, OverflowError, OSError) as err:
        raise EventsDecodeError(f"event #{position} has an out-of-range 'ts': {err}") from err
    return event


def decode_events(text: str) -> EventList:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as err:
        raise EventsDecodeError(f"malformed events file: {err}") from err
    if not isinstance(data, list):
        raise EventsDecodeError("events file must hold a JSON array")
    return EventList(_decode_event(item, i) for i, item in enumerate(data))


def encode_events(events: EventList) -> str:
    items: List[dict] = [event.to_dict() for event in events]
    return json.dumps(items, indent=2, ensure_ascii=False)


class EventStore:
    def __init__(self, path: Optional[Path] = None, clock: Callable[[], float] = time.time) -> None:
        self.path = path if path is not None else get_events_path()
        self.clock = clock

    def load(self) -> EventList:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError:
            text = ""
        except UnicodeDecodeError as err:
            logger.error("could not decode %s: %s", self.path, err)
            raise EventsDecodeError(f"events file is not valid UTF-8: {err}") from err
        except OSError as err:
            logger.error("could not read %s: %s", self.path, err)
            raise EventsReadError(f"failed to read {self.path}: {err}") from err

        if not text.strip():
            return self._seed()

        try:
            events = decode_events(text)
        except EventsDecodeError as err:
            logger.error("could not decode %s: %s", self.path, err)
            raise
        logger.info("loaded %d events from %s", len(events), self.path)
        return events

    def save(self, events: EventList) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w", encoding="utf-8") as f:
                f.write(encode_events(events))
        except OSError as err:
            logger.error("could not write %s: %s", self.path, err)
            raise EventsWriteError(f"failed to write {self.path}: {err}") from err
        logger.debug("saved %d events to %s", len(events), self.path)

    def _seed(self) -> EventList:
        now = datetime.fromtimestamp(self.clock())
        events = EventList([next_golang_birthday(now)])
        logger.info("no events at %s, seeding default event", self.path)
        self.save(events)
        return events
