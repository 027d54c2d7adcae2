import re
from datetime import datetime

from .events import Event

SHORT_TIME_FORMAT = "%Y-%m-%d"
LONG_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
LONG_TIME_LENGTH = len("YYYY-MM-DD HH:MM:SS")
TIME_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}( \d{2}:\d{2}:\d{2})?", re.ASCII)


class ValidationError(Exception):
    pass


class EmptyFieldsError(ValidationError):
    def __init__(self) -> None:
        super().__init__("empty fields")


class InvalidTimeFormatError(ValidationError):
    pass


class EventInPastError(ValidationError):
    def __init__(self) -> None:
        super().__init__("event time is in the past")


def parse_local_time(text: str) -> datetime:
    """Parse ``YYYY-MM-DD`` or ``YYYY-MM-DD HH:MM:SS`` as a naive local time.

    The short form is used whenever the text is shorter than the long one.
    """
    fmt = LONG_TIME_FORMAT
    if len(text) < LONG_TIME_LENGTH:
        fmt = SHORT_TIME_FORMAT
    if not TIME_SHAPE.fullmatch(text):
        raise InvalidTimeFormatError(f"time data '{text}' does not match format '{fmt}'")
    try:
        return datetime.strptime(text, fmt)
    except ValueError as err:
        raise InvalidTimeFormatError(str(err)) from err


def validate(name: str, time_text: str, now: float) -> Event:
    if name == "" and time_text == "":
        raise EmptyFieldsError()
    parsed = parse_local_time(time_text)
    ts = parsed.timestamp()
    if ts < now:
        raise EventInPastError()
    return Event(name, int(ts))
