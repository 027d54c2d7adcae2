"""Unit tests for events.json persistence."""
import json
from datetime import datetime

import pytest

from countdown.config import get_events_path
from countdown.events import Event, EventList
from countdown.store import (
    SEED_EVENT_NAME,
    EventsDecodeError,
    EventStore,
    EventsWriteError,
    StorageError,
    next_golang_birthday,
)


def _ts(*args) -> int:
    return int(datetime(*args).timestamp())


class TestNextGolangBirthday:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (datetime(2023, 6, 15, 12, 0, 0), datetime(2023, 11, 10)),
            (datetime(2023, 11, 10, 12, 0, 0), datetime(2024, 11, 10)),
            (datetime(2023, 11, 10, 0, 0, 0), datetime(2024, 11, 10)),
            (datetime(2023, 11, 9, 23, 59, 59), datetime(2023, 11, 10)),
            (datetime(2023, 11, 15, 12, 0, 0), datetime(2024, 11, 10)),
            (datetime(2023, 12, 31, 23, 59, 59), datetime(2024, 11, 10)),
            (datetime(2024, 1, 1, 0, 0, 0), datetime(2024, 11, 10)),
        ],
    )
    def test_next_occurrence(self, now, expected):
        event = next_golang_birthday(now)
        assert event.name == "Golang's Birthday"
        assert event.time == int(expected.timestamp())


class TestLoad:
    def test_missing_file_is_seeded(self, config_home):
        """No file: one default event, written to disk."""
        store = EventStore(clock=lambda: datetime(2023, 6, 15, 12).timestamp())
        events = store.load()

        assert len(events) == 1
        assert events[0].name == SEED_EVENT_NAME
        assert events[0].time == _ts(2023, 11, 10)

        path = get_events_path()
        assert path == config_home / "countdown" / "events.json"
        assert json.loads(path.read_text(encoding="utf-8")) == [
            {"name": SEED_EVENT_NAME, "ts": _ts(2023, 11, 10)}
        ]

    def test_seed_after_birthday_rolls_to_next_year(self, config_home):
        store = EventStore(clock=lambda: datetime(2023, 11, 15).timestamp())
        assert store.load()[0].time == _ts(2024, 11, 10)

    def test_blank_file_is_seeded(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("  \n", encoding="utf-8")
        events = EventStore(path, clock=lambda: datetime(2023, 1, 1).timestamp()).load()
        assert [e.name for e in events] == [SEED_EVENT_NAME]

    def test_empty_array_loads_empty(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("[]", encoding="utf-8")
        events = EventStore(path).load()
        assert events.is_empty()

    def test_existing_file_keeps_order(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text(json.dumps([{"name": "b", "ts": 20}, {"name": "a", "ts": 10}]), encoding="utf-8")
        events = EventStore(path).load()
        assert events.to_list() == [Event("b", 20), Event("a", 10)]

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"name": "a", "ts": 1}',
            '["a"]',
            '[{"name": "a"}]',
            '[{"name": 3, "ts": 1}]',
            '[{"name": "a", "ts": "soon"}]',
            '[{"name": "a", "ts": true}]',
            '[{"name": "a", "ts": 1.5}]',
        ],
    )
    def test_malformed_file_raises_decode_error(self, tmp_path, content):
        path = tmp_path / "events.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(EventsDecodeError):
            EventStore(path).load()

    def test_invalid_utf8_raises_decode_error(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_bytes(b'[{"name": "\xff\xfe", "ts": 1}]')
        with pytest.raises(EventsDecodeError, match="UTF-8"):
            EventStore(path).load()

    @pytest.mark.parametrize("ts", [1_000_000_000_000, -(10 ** 15), 10 ** 30])
    def test_unrepresentable_timestamp_raises_decode_error(self, tmp_path, ts):
        """Timestamps outside the datetime range are rejected at load time."""
        path = tmp_path / "events.json"
        path.write_text(json.dumps([{"name": "far", "ts": ts}]), encoding="utf-8")
        with pytest.raises(EventsDecodeError, match="out-of-range"):
            EventStore(path).load()

    def test_decode_error_is_storage_error(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_text("nope", encoding="utf-8")
        with pytest.raises(StorageError):
            EventStore(path).load()


class TestSave:
    def test_round_trip(self, tmp_path):
        store = EventStore(tmp_path / "nested" / "events.json")
        events = EventList([Event("a", 10), Event("", 10), Event("Ünïcode ✓", 2_000_000_000)])
        store.save(events)
        assert store.load() == events

    def test_pretty_printed_with_two_spaces(self, tmp_path):
        store = EventStore(tmp_path / "events.json")
        store.save(EventList([Event("a", 10)]))
        text = store.path.read_text(encoding="utf-8")
        assert text == '[\n  {\n    "name": "a",\n    "ts": 10\n  }\n]'

    def test_save_overwrites(self, tmp_path):
        store = EventStore(tmp_path / "events.json")
        store.save(EventList([Event("a", 1), Event("b", 2)]))
        store.save(EventList([Event("c", 3)]))
        assert store.load().to_list() == [Event("c", 3)]

    def test_write_failure_raises(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        store = EventStore(blocker / "events.json")
        with pytest.raises(EventsWriteError):
            store.save(EventList([Event("a", 1)]))
