import logging
import time
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional

from . import timecalc
from .events import Event, EventList
from .validate import ValidationError, validate

logger = logging.getLogger(__name__)

NAME_CHAR_LIMIT = 30
TIME_CHAR_LIMIT = 19


class AppState(Enum):
    NO_EVENTS = "no_events"
    SHOWING_EVENTS = "showing_events"
    ADDING_EVENT = "adding_event"


class Command(Enum):
    ADD = "add"
    REMOVE = "remove"
    FILTER_START = "filter_start"
    NEXT = "next"
    PREV = "prev"
    ENTER = "enter"
    BACK = "back"
    QUIT = "quit"
    UP = "up"
    DOWN = "down"


class FormField(IntEnum):
    NAME = 0
    TIME = 1
    CANCEL = 2
    SUBMIT = 3


@dataclass
class AddForm:
    name: str = ""
    time: str = ""
    focus: FormField = FormField.NAME
    error: str = ""

    def clear_inputs(self) -> None:
        self.name = ""
        self.time = ""
        self.focus = FormField.NAME

    def reset(self) -> None:
        self.clear_inputs()
        self.error = ""

    def editing_text(self) -> bool:
        return self.focus in (FormField.NAME, FormField.TIME)


class App:
    def __init__(
        self,
        events: EventList,
        save: Callable[[EventList], None],
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.events = events
        self.save = save
        self.clock = clock
        self.now = clock()
        self.tick_count = 0
        self.running = True
        self.form = AddForm()
        self.selected = 0
        self.filter_text = ""
        self.filter_editing = False
        self.state = AppState.NO_EVENTS if events.is_empty() else AppState.SHOWING_EVENTS

    def visible_indices(self) -> List[int]:
        needle = self.filter_text.lower()
        if not needle:
            return list(range(len(self.events)))
        return [i for i, event in enumerate(self.events) if needle in event.filter_value().lower()]

    def visible_events(self) -> List[Event]:
        return [self.events[i] for i in self.visible_indices()]

    def selected_index(self) -> Optional[int]:
        visible = self.visible_indices()
        if not visible:
            return None
        return visible[min(self.selected, len(visible) - 1)]

    def selected_event(self) -> Optional[Event]:
        index = self.selected_index()
        if index is None:
            return None
        return self.events[index]

    def countdown_for(self, event: Event) -> str:
        return timecalc.format_countdown(event.time, self.now)

    def accepts_text(self) -> bool:
        if self.state == AppState.ADDING_EVENT:
            return self.form.editing_text()
        return self.state == AppState.SHOWING_EVENTS and self.filter_editing

    def tick(self) -> None:
        self.now = self.clock()
        self.tick_count += 1

    def handle(self, command: Command) -> None:
        if self.state == AppState.NO_EVENTS:
            self._handle_no_events(command)
        elif self.state == AppState.SHOWING_EVENTS:
            self._handle_showing_events(command)
        else:
            self._handle_adding_event(command)

    def type_text(self, text: str) -> None:
        if self.state == AppState.SHOWING_EVENTS and self.filter_editing:
            self.filter_text += text
            self.selected = 0
            return
        if self.state != AppState.ADDING_EVENT:
            return
        if self.form.focus == FormField.NAME:
            self.form.name = (self.form.name + text)[:NAME_CHAR_LIMIT]
        elif self.form.focus == FormField.TIME:
            self.form.time = (self.form.time + text)[:TIME_CHAR_LIMIT]

    def backspace(self) -> None:
        if self.state == AppState.SHOWING_EVENTS and self.filter_editing:
            self.filter_text = self.filter_text[:-1]
            self.selected = 0
            return
        if self.state != AppState.ADDING_EVENT:
            return
        if self.form.focus == FormField.NAME:
            self.form.name = self.form.name[:-1]
        elif self.form.focus == FormField.TIME:
            self.form.time = self.form.time[:-1]

    def _handle_no_events(self, command: Command) -> None:
        if command == Command.ADD:
            self.state = AppState.ADDING_EVENT
        elif command == Command.QUIT:
            self.running = False

    def _handle_showing_events(self, command: Command) -> None:
        if self.filter_editing:
            if command == Command.ENTER:
                self.filter_editing = False
            elif command == Command.BACK:
                self._clear_filter()
            elif command in (Command.UP, Command.DOWN):
                self._move_selection(command)
            return

        if command == Command.QUIT:
            self.running = False
        elif command == Command.ADD:
            self.state = AppState.ADDING_EVENT
        elif command == Command.REMOVE:
            self._remove_selected()
        elif command == Command.FILTER_START:
            self.filter_editing = True
            self.filter_text = ""
            self.selected = 0
        elif command == Command.BACK:
            self._clear_filter()
        elif command in (Command.UP, Command.DOWN):
            self._move_selection(command)

    def _handle_adding_event(self, command: Command) -> None:
        if command == Command.BACK:
            self._leave_form()
        elif command == Command.NEXT:
            self.form.focus = FormField((self.form.focus + 1) % len(FormField))
        elif command == Command.PREV:
            self.form.focus = FormField((self.form.focus - 1) % len(FormField))
        elif command == Command.ENTER:
            if self.form.focus in (FormField.NAME, FormField.TIME):
                self.form.focus = FormField(self.form.focus + 1)
            elif self.form.focus == FormField.CANCEL:
                self._leave_form()
            else:
                self._submit()

    def _leave_form(self) -> None:
        self.form.reset()
        self.state = AppState.NO_EVENTS if self.events.is_empty() else AppState.SHOWING_EVENTS

    def _submit(self) -> None:
        try:
            event = validate(self.form.name, self.form.time, self.clock())
        except ValidationError as err:
            logger.info("rejected new event: %s", err)
            self.form.clear_inputs()
            self.form.error = f"Error: {err}"
            return

        was_empty = self.events.is_empty()
        index = self.events.insert(event)
        logger.info("added event %r at position %d", event.name, index)
        if not was_empty:
            self.save(self.events)

        self._clear_filter()
        self.selected = index
        self.form.reset()
        self.state = AppState.SHOWING_EVENTS

    def _remove_selected(self) -> None:
        index = self.selected_index()
        if index is None:
            return
        removed = self.events.remove_at(index)
        logger.info("removed event %r from position %d", removed.name, index)
        self.save(self.events)
        visible = len(self.visible_indices())
        self.selected = max(0, min(self.selected, visible - 1))
        if self.events.is_empty():
            self._clear_filter()
            self.state = AppState.NO_EVENTS

    def _move_selection(self, command: Command) -> None:
        visible = len(self.visible_indices())
        if not visible:
            self.selected = 0
            return
        step = -1 if command == Command.UP else 1
        self.selected = max(0, min(visible - 1, self.selected + step))

    def _clear_filter(self) -> None:
        self.filter_text = ""
        self.filter_editing = False
        self.selected = 0
