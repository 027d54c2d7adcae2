import curses
import logging
import sys
import time
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from . import timecalc
from .app import App, AppState, Command, FormField
from .config import FRAME_DELAY, TICK_INTERVAL
from .events import Event

logger = logging.getLogger(__name__)

LIST_WIDTH = 28
DETAIL_WIDTH = 45
INPUT_WIDTH = 22
HELP_LINES = 2

KEY_ESC = 27
KEY_TAB = 9
KEY_CTRL_C = 3
BACKSPACE = "\b"

Key = Union[int, str]

COMMAND_KEYS = {
    "+": Command.ADD,
    "-": Command.REMOVE,
    "/": Command.FILTER_START,
    "q": Command.QUIT,
    "k": Command.UP,
    "j": Command.DOWN,
}


@dataclass
class Theme:
    normal: int = 0
    title: int = 0
    detail_title: int = 0
    item_title: int = 0
    item_desc: int = 0
    dimmed: int = 0
    focused: int = 0
    blurred: int = 0
    error: int = 0

    @classmethod
    def create(cls) -> "Theme":
        if not curses.has_colors():
            return cls(
                title=curses.A_REVERSE,
                detail_title=curses.A_REVERSE,
                item_title=curses.A_BOLD,
                focused=curses.A_BOLD,
                blurred=curses.A_DIM,
                error=curses.A_BOLD,
            )
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        pairs = [
            (curses.COLOR_WHITE, curses.COLOR_BLUE),
            (curses.COLOR_WHITE, curses.COLOR_MAGENTA),
            (curses.COLOR_YELLOW, background),
            (curses.COLOR_MAGENTA, background),
            (curses.COLOR_RED, background),
        ]
        for number, (fg, bg) in enumerate(pairs, start=1):
            curses.init_pair(number, fg, bg)
        return cls(
            title=curses.color_pair(1),
            detail_title=curses.color_pair(2) | curses.A_BOLD,
            item_title=curses.color_pair(3) | curses.A_BOLD,
            item_desc=curses.color_pair(3),
            dimmed=curses.A_NORMAL,
            focused=curses.color_pair(4) | curses.A_BOLD,
            blurred=curses.A_DIM,
            error=curses.color_pair(5) | curses.A_BOLD,
        )


def decode_key(key: Key, text_mode: bool) -> Tuple[Optional[Command], Optional[str]]:
    """Map a curses key to a command or to typed text.

    In text mode printable characters are returned as text, so "q" or "+"
    can appear in an event name.
    """
    if isinstance(key, str) and len(key) == 1:
        code = ord(key)
    elif isinstance(key, int):
        code = key
    else:
        return None, None

    if code in (curses.KEY_ENTER, 10, 13):
        return Command.ENTER, None
    if code == KEY_ESC:
        return Command.BACK, None
    if code == KEY_TAB:
        return Command.NEXT, None
    if code == curses.KEY_BTAB:
        return Command.PREV, None
    if code == curses.KEY_UP:
        return Command.UP, None
    if code == curses.KEY_DOWN:
        return Command.DOWN, None
    if code == KEY_CTRL_C:
        return Command.QUIT, None
    if code in (curses.KEY_BACKSPACE, 127, 8):
        return None, BACKSPACE
    if isinstance(key, int) and key > 255:
        return None, None

    ch = chr(code)
    if not ch.isprintable():
        return None, None
    if text_mode:
        return None, ch
    return COMMAND_KEYS.get(ch), None


def apply_key(app: App, key: Key) -> None:
    command, text = decode_key(key, app.accepts_text())
    if command is not None:
        app.handle(command)
    elif text == BACKSPACE:
        app.backspace()
    elif text:
        app.type_text(text)


def _addstr(stdscr, y: int, x: int, text: str, attr: int = 0) -> None:
    try:
        stdscr.addstr(y, x, text, attr)
    except curses.error:
        pass


def _draw_box(stdscr, start_y: int, start_x: int, height: int, width: int, attr: int = 0) -> None:
    for y in range(height):
        for x in range(width):
            ch = " "
            if y == 0 or y == height - 1:
                ch = "-"
            if x == 0 or x == width - 1:
                ch = "|"
            if (y == 0 or y == height - 1) and (x == 0 or x == width - 1):
                ch = "+"
            try:
                stdscr.addch(start_y + y, start_x + x, ch, attr)
            except curses.error:
                pass


def _centered(text: str, width: int) -> str:
    text = text[:width]
    pad = max(0, width - len(text))
    left = pad // 2
    return " " * left + text + " " * (pad - left)


def _draw_no_events(stdscr, rows: int, cols: int, theme: Theme) -> None:
    message = "No events, add one with '+'"
    width = min(cols, len(message) + 6)
    height = 5
    _draw_box(stdscr, 1, 1, height, width, theme.focused)
    _addstr(stdscr, 3, 4, message[: max(0, width - 6)], theme.normal)
    _addstr(stdscr, 1 + height + 1, 2, "+ add  q quit"[: max(0, cols - 2)], theme.blurred)


def _input_line(value: str, placeholder: str, focused: bool, flash_on: bool) -> str:
    caret = ">" if focused else " "
    if value:
        body = value + ("_" if focused and flash_on else "")
    else:
        body = placeholder
    return f"{caret} {body}"


def draw_form(stdscr, rows: int, cols: int, app: App, theme: Theme, flash_on: bool = True) -> None:
    form = app.form
    width = min(max(10, cols - 2), 40)
    inner = width - 4
    lines: List[Tuple[str, int]] = [
        (_centered("New Event", INPUT_WIDTH), theme.detail_title),
        ("", theme.normal),
    ]
    for field, value, placeholder in (
        (FormField.NAME, form.name, "Event Name"),
        (FormField.TIME, form.time, "YYYY-MM-DD hh:mm:ss"),
    ):
        focused = form.focus == field
        attr = theme.focused if focused else theme.normal
        if not value:
            attr = theme.focused if focused else theme.blurred
        lines.append((_input_line(value, placeholder, focused, flash_on), attr))
    lines.append(("", theme.normal))
    cancel_attr = theme.focused if form.focus == FormField.CANCEL else theme.blurred
    submit_attr = theme.focused if form.focus == FormField.SUBMIT else theme.blurred
    button_row = len(lines)
    lines.append(("", theme.normal))
    lines.append(("", theme.normal))
    lines.append((form.error, theme.error))
    lines.append(("tab next  enter select  esc back", theme.blurred))

    height = len(lines) + 2
    start_y = 1
    start_x = 1
    _draw_box(stdscr, start_y, start_x, height, width, theme.focused)
    for i, (text, attr) in enumerate(lines):
        _addstr(stdscr, start_y + 1 + i, start_x + 2, text[:inner], attr)
    _addstr(stdscr, start_y + 1 + button_row, start_x + 2, "[ Cancel ]", cancel_attr)
    _addstr(stdscr, start_y + 1 + button_row, start_x + 2 + len("[ Cancel ]") + 2, "[ Submit ]", submit_attr)


def _item_lines(visible: List[Event], selected: int, height: int) -> List[Tuple[int, Event, bool]]:
    per_page = max(1, height // 3)
    page = selected // per_page
    start = page * per_page
    out = []
    for offset, event in enumerate(visible[start : start + per_page]):
        out.append((start + offset, event, start + offset == selected))
    return out


def draw_list(stdscr, rows: int, app: App, theme: Theme) -> None:
    _addstr(stdscr, 0, 1, " Events ", theme.title)
    visible = app.visible_events()
    selected = min(app.selected, max(0, len(visible) - 1))
    row = 2
    if app.filter_editing or app.filter_text:
        cursor = "_" if app.filter_editing else ""
        _addstr(stdscr, row, 1, f"Filter: {app.filter_text}{cursor}"[:LIST_WIDTH], theme.focused)
        row += 2
    list_height = max(3, rows - row - HELP_LINES - 1)
    for _, event, is_selected in _item_lines(visible, selected, list_height):
        title = event.title() or "(unnamed)"
        desc = app.countdown_for(event)
        desc_attr = theme.error if desc == timecalc.EXPIRED else (theme.item_desc if is_selected else theme.dimmed)
        if is_selected:
            _addstr(stdscr, row, 1, ("| " + title)[:LIST_WIDTH], theme.item_title)
            _addstr(stdscr, row + 1, 1, "| ", theme.item_title)
            _addstr(stdscr, row + 1, 3, desc[: LIST_WIDTH - 2], desc_attr)
        else:
            _addstr(stdscr, row, 1, ("  " + title)[:LIST_WIDTH], theme.dimmed)
            _addstr(stdscr, row + 1, 3, desc[: LIST_WIDTH - 2], desc_attr)
        row += 3
    if not visible:
        _addstr(stdscr, row, 3, "No matches", theme.blurred)
    help_text = "/ filter  enter apply  esc clear" if app.filter_editing else "+ add  - remove  / filter  q quit"
    _addstr(stdscr, rows - HELP_LINES, 1, help_text[:LIST_WIDTH + 8], theme.blurred)


def detail_lines(event: Event, now: float) -> List[str]:
    totals = timecalc.totals(event.time, now)
    return [
        event.name,
        f"When (RFC1123): {event.to_rfc1123()}",
        f"    When (ISO): {event.to_basic_string()}",
        "",
        "Countdown",
        timecalc.format_countdown(event.time, now),
        "",
        f"{totals.seconds} seconds",
        f"{totals.minutes:.3f} minutes",
        f"{totals.hours:.4f} hours",
        f"{totals.days:.5f} days",
        f"{totals.years:.7f} years",
    ]


def draw_detail(stdscr, rows: int, cols: int, app: App, theme: Theme) -> None:
    event = app.selected_event()
    if event is None:
        return
    x = LIST_WIDTH + 4
    width = min(DETAIL_WIDTH, max(0, cols - x - 2))
    if width < 10:
        return
    for y in range(rows):
        _addstr(stdscr, y, x - 2, "|", theme.item_title)
    lines = detail_lines(event, app.now)
    _addstr(stdscr, 1, x, _centered(lines[0], width), theme.detail_title)
    _addstr(stdscr, 2, x, lines[1][:width], theme.dimmed)
    _addstr(stdscr, 3, x, lines[2][:width], theme.dimmed)
    _addstr(stdscr, 6, x, _centered(lines[4], width), theme.detail_title)
    countdown_attr = theme.error if timecalc.is_expired(event.time, app.now) else theme.item_title
    _addstr(stdscr, 7, x, _centered(lines[5], width), countdown_attr)
    for i, line in enumerate(lines[7:]):
        value, unit = line.split(" ", 1)
        half = width // 2
        _addstr(stdscr, 9 + i, x, value.rjust(half)[:half], theme.normal)
        _addstr(stdscr, 9 + i, x + half, f" {unit}"[: width - half], theme.dimmed)


def draw(stdscr, app: App, theme: Theme, flash_on: bool = True) -> None:
    rows, cols = stdscr.getmaxyx()
    stdscr.erase()
    if app.state == AppState.NO_EVENTS:
        _draw_no_events(stdscr, rows, cols, theme)
    elif app.state == AppState.ADDING_EVENT:
        draw_form(stdscr, rows, cols, app, theme, flash_on)
    else:
        draw_list(stdscr, rows, app, theme)
        draw_detail(stdscr, rows, cols, app, theme)
    stdscr.refresh()


def run(app: App) -> None:
    stdscr = curses.initscr()
    sys.stdout.write("\x1b[?1049h")
    sys.stdout.flush()
    curses.noecho()
    curses.cbreak()
    stdscr.keypad(True)
    stdscr.nodelay(True)
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        pass
    try:
        curses.curs_set(0)
    except curses.error:
        pass

    try:
        theme = Theme.create()
        last_tick = time.monotonic()
        last_flash_toggle = last_tick
        flash_on = True
        logger.debug("session started in state %s", app.state.value)
        while app.running:
            while True:
                try:
                    ch = stdscr.get_wch()
                except curses.error:
                    break
                apply_key(app, ch)
                if not app.running:
                    break
            if not app.running:
                break

            now = time.monotonic()
            if now - last_tick >= TICK_INTERVAL:
                app.tick()
                last_tick += TICK_INTERVAL * int((now - last_tick) // TICK_INTERVAL)
            if now - last_flash_toggle >= 0.5:
                flash_on = not flash_on
                last_flash_toggle = now

            draw(stdscr, app, theme, flash_on)
            time.sleep(FRAME_DELAY)
    finally:
        curses.nocbreak()
        stdscr.keypad(False)
        curses.echo()
        curses.endwin()
        sys.stdout.write("\x1b[?1049l")
        sys.stdout.flush()
        logger.debug("session ended after %d ticks", app.tick_count)
