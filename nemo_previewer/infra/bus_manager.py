# bus_manager.py
"""bus_manager
===============
Opens the **session** D‑Bus connection the previewer bridge talks over.

*   Uses **pydbus.SessionBus()**; the raw ``Gio.DBusConnection`` is reachable
    as ``bus.con`` for the async calls and signal matches pydbus does not wrap.
*   ``NEMO_PREVIEWER_BUS_ADDRESS`` points the bridge at a private bus instead
    (handy under ``dbus-run-session``).
*   Nothing is cached here – the bridge owns the handle and drops it when it
    is finalized.

Usage
-----
```python
from nemo_previewer.infra.bus_manager import open_session_bus
bus = open_session_bus()     # raises GLib.Error when no bus is reachable
bus.con.call(...)
```
"""

from __future__ import annotations

import os

from pydbus import SessionBus, connect

from ..constants import BUS_ADDRESS_ENV
from ..logging_conf import get_logger

log = get_logger(__name__)


def open_session_bus():
    """Synchronously acquire an authenticated session‑bus connection.

    Errors from GIO (``GLib.Error``) propagate; the caller decides whether
    that is fatal.
    """
    address = os.getenv(BUS_ADDRESS_ENV)
    if address:
        log.debug("Connecting to bus at %s", address)
        return connect(address)

    log.debug("Connecting to the session bus")
    return SessionBus()


def connection_of(bus):
    """Return the ``Gio.DBusConnection`` behind *bus*.

    Accepts either a pydbus bus (``.con``) or a bare connection.
    """
    return getattr(bus, "con", bus)
