"""Drive a running previewer from a terminal.

    nemo-previewer show file:///tmp/a.png --window-id 12345
    nemo-previewer close
    nemo-previewer watch
"""
from __future__ import annotations

import argparse
import sys
from typing import Optional

from gi.repository import GLib

from .constants import describe_direction
from .core.previewer import get_singleton
from .core.selection import SelectionEventRouter, connect_selection_event, disconnect_selection_event
from .logging_conf import configure_logging, get_logger

log = get_logger(__name__)


class EchoView:
    """Stand-in view that prints every direction it is handed."""

    def __init__(self, out=None):
        self.out = out or sys.stdout
        self.events = []

    def preview_selection_event(self, direction: int) -> None:
        self.events.append(direction)
        print(f"SelectionEvent {describe_direction(direction)} ({direction})",
              file=self.out, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nemo-previewer",
                                     description="Talk to org.gnome.NautilusPreviewer")
    parser.add_argument("--debug", action="store_true", help="log D-Bus traffic")
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", help="preview a file")
    show.add_argument("uri")
    show.add_argument("--window-id", type=int, default=0,
                      help="XID of the window the preview belongs to")
    show.add_argument("--toggle", action="store_true",
                      help="close the preview if it is already showing this file")
    show.add_argument("--linger", type=float, default=1.0,
                      help="seconds to keep the main loop running (default: 1)")

    close = sub.add_parser("close", help="hide the previewer")
    close.add_argument("--linger", type=float, default=1.0)

    sub.add_parser("watch", help="print SelectionEvent signals until interrupted")
    return parser


def _run_loop(linger: Optional[float] = None) -> None:
    loop = GLib.MainLoop()
    if linger is not None:
        GLib.timeout_add(int(linger * 1000), loop.quit)
    try:
        loop.run()
    except KeyboardInterrupt:
        log.info("Interrupted")


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        configure_logging("DEBUG")

    view = EchoView()
    previewer = get_singleton(locate_target=lambda: view)
    if previewer.is_inert:
        return 1

    if args.command == "show":
        previewer.show_file(args.uri, args.window_id, args.toggle)
        _run_loop(args.linger)
    elif args.command == "close":
        previewer.close()
        _run_loop(args.linger)
    else:
        subscription_id = connect_selection_event(previewer.connection,
                                                  SelectionEventRouter(lambda: view))
        try:
            _run_loop()
        finally:
            disconnect_selection_event(previewer.connection, subscription_id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
