# previewer.py
"""previewer
============
Process‑wide **singleton** bridge to the out‑of‑process file previewer
(``org.gnome.NautilusPreviewer`` on the session bus).

*   ``show_file`` / ``close`` are fire‑and‑forget: they queue the D‑Bus call
    and return; the reply is only looked at to log failures.
*   Each in‑flight call keeps the bridge alive until its completion runs.
*   After ``show_file`` exactly one SelectionEvent match is live; after
    ``close`` none is.
*   If the session bus could not be reached the bridge is *inert*: every call
    logs and returns.

Everything here runs on the GLib main loop thread; nothing is locked.

Usage
-----
```python
from nemo_previewer.core.previewer import get_singleton
previewer = get_singleton()
previewer.show_file("file:///tmp/a.png", xid, False)
...
previewer.close()
```
"""

from __future__ import annotations

import weakref
from typing import Callable, Optional

from gi.repository import Gio, GLib

from ..constants import (
    PREVIEWER_DBUS_NAME, PREVIEWER_DBUS_PATH, PREVIEWER_DBUS_IFACE,
    SHOW_FILE_METHOD, CLOSE_METHOD, SHOW_FILE_SIGNATURE, DEFAULT_TIMEOUT_MSEC,
)
from ..infra.bus_manager import open_session_bus, connection_of
from ..logging_conf import get_logger
from .host import ApplicationWindowLocator
from .selection import (
    SelectionEventRouter, connect_selection_event, disconnect_selection_event,
)

log = get_logger(__name__)

# ---------------------------------------------------------------------------
# Published instance – a weak reference, so it empties itself on finalization
# ---------------------------------------------------------------------------

_singleton_ref: Optional[weakref.ref] = None

MAX_WINDOW_ID = 0xFFFFFFFF


def _as_int32(value: int) -> int:
    """Reinterpret an unsigned 32‑bit window id as the ``i`` ShowFile takes.

    *value* must already be within ``0 .. MAX_WINDOW_ID``.
    """
    return value - (1 << 32) if value >= (1 << 31) else value


class _BusHandle:
    """What the bridge owns on the bus: the connection and its one match.

    Kept apart from the bridge so the finalizer can reach it without keeping
    the bridge alive.
    """

    def __init__(self, bus):
        self.bus = bus
        self.connection = connection_of(bus)
        self.selection_id = 0          # 0 → no SelectionEvent match


def _release_bus(handle: _BusHandle) -> None:
    if handle.selection_id != 0:
        disconnect_selection_event(handle.connection, handle.selection_id)
        handle.selection_id = 0
    log.debug("Releasing DBus connection %r", handle.bus)
    # The session connection is shared process-wide; dropping our reference
    # is the release, closing it would break other users.
    handle.connection = None
    handle.bus = None


# ---------------------------------------------------------------------------
# Completion callbacks – *bridge* is the reference the call held on to
# ---------------------------------------------------------------------------

def _show_file_ready(connection, res, bridge: "PreviewerBridge") -> None:
    bridge._finish_call(connection, res, SHOW_FILE_METHOD)


def _close_ready(connection, res, bridge: "PreviewerBridge") -> None:
    bridge._finish_call(connection, res, CLOSE_METHOD)


class PreviewerBridge:
    """Owns the session‑bus connection and the single SelectionEvent match."""

    def __init__(self, bus_factory: Optional[Callable] = None,
                 locate_target: Optional[Callable] = None):
        self._handle: Optional[_BusHandle] = None
        self.pending_calls = 0
        self.router = SelectionEventRouter(locate_target or ApplicationWindowLocator())

        try:
            bus = (bus_factory or open_session_bus)()
        except GLib.Error as exc:
            log.error("Unable to initialize DBus connection: %s", exc.message)
            return

        self._handle = _BusHandle(bus)
        weakref.finalize(self, _release_bus, self._handle)
        log.debug("PreviewerBridge %#x connected", id(self))

    @property
    def connection(self):
        return self._handle.connection if self._handle is not None else None

    @property
    def selection_id(self) -> int:
        return self._handle.selection_id if self._handle is not None else 0

    @property
    def is_inert(self) -> bool:
        return self.connection is None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def show_file(self, uri: str, window_id: int, close_if_already_visible: bool) -> None:
        """Ask the previewer to show *uri* on top of window *window_id*."""
        if self.connection is None:
            log.error("No DBus connection available")
            return
        if not 0 <= window_id <= MAX_WINDOW_ID:
            log.error("Window id %r does not fit in 32 bits, not calling %s",
                      window_id, SHOW_FILE_METHOD)
            return

        self._dispatch(
            SHOW_FILE_METHOD,
            GLib.Variant(SHOW_FILE_SIGNATURE,
                         (uri, _as_int32(window_id), bool(close_if_already_visible))),
            Gio.DBusCallFlags.NONE,
            _show_file_ready,
        )

        # Drop the match of any previous preview, then follow the new one.
        self._drop_selection_subscription()
        self._handle.selection_id = connect_selection_event(self.connection, self.router)

    def close(self) -> None:
        """Hide the previewer, without starting it if it isn't running."""
        if self.connection is None:
            log.error("No DBus connection available")
            return

        self._dispatch(CLOSE_METHOD, None, Gio.DBusCallFlags.NO_AUTO_START, _close_ready)
        self._drop_selection_subscription()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _dispatch(self, method: str, parameters, flags, ready_cb) -> None:
        log.debug("Calling %s on %s", method, PREVIEWER_DBUS_NAME)
        self.pending_calls += 1
        self.connection.call(
            PREVIEWER_DBUS_NAME,
            PREVIEWER_DBUS_PATH,
            PREVIEWER_DBUS_IFACE,
            method,
            parameters,
            None,
            flags,
            DEFAULT_TIMEOUT_MSEC,
            None,
            ready_cb,
            self,
        )

    def _finish_call(self, connection, res, method: str) -> None:
        try:
            connection.call_finish(res)
        except GLib.Error as exc:
            log.debug("Unable to call %s on NemoPreviewer: %s", method, exc.message)
        finally:
            self.pending_calls -= 1

    def _drop_selection_subscription(self) -> None:
        if self.selection_id != 0:
            disconnect_selection_event(self.connection, self.selection_id)
            self._handle.selection_id = 0


# ---------------------------------------------------------------------------
# Public accessor
# ---------------------------------------------------------------------------

def get_singleton(bus_factory: Optional[Callable] = None,
                  locate_target: Optional[Callable] = None) -> PreviewerBridge:
    """Return the process‑wide :class:`PreviewerBridge`, creating it if needed.

    The arguments are only used when a new bridge has to be built.  The slot
    holds a weak reference: once every holder (callers and in‑flight calls)
    lets go, the next call builds a fresh bridge.
    """
    global _singleton_ref

    bridge = _singleton_ref() if _singleton_ref is not None else None
    if bridge is None:
        bridge = PreviewerBridge(bus_factory, locate_target)
        _singleton_ref = weakref.ref(bridge)
    return bridge
