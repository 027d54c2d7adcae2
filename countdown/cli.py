import argparse
import logging
import sys

from . import __version__
from .app import App
from .config import setup_logging
from .store import EventStore, StorageError

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    epilog = (
        "Controls: + add, - remove, / filter, tab/shift+tab move between fields, "
        "enter confirm, esc back, q quit."
    )
    parser = argparse.ArgumentParser(
        prog="countdown",
        description="Full-screen terminal countdowns to your events",
        epilog=epilog,
    )
    parser.add_argument("--version", action="version", version=f"countdown {__version__}")
    return parser.parse_args(argv)


def _fail(err: Exception) -> int:
    logger.error("fatal: %s", err)
    print(f"There was an error: {err}", file=sys.stderr)
    return 1


def main(argv=None) -> int:
    parse_args(argv)
    try:
        setup_logging()
        store = EventStore()
        events = store.load()
    except (StorageError, OSError) as err:
        return _fail(err)

    app = App(events, store.save, clock=store.clock)
    from . import ui

    try:
        ui.run(app)
    except KeyboardInterrupt:
        return 0
    except (StorageError, OSError, ui.curses.error) as err:
        return _fail(err)
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
