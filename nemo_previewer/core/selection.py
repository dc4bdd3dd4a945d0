"""SelectionEvent match handling and routing back into the host view."""
from __future__ import annotations

from typing import Callable, Optional

from gi.repository import Gio

from ..constants import (
    PREVIEWER_DBUS_NAME, PREVIEWER_DBUS_EVENT_IFACE, PREVIEWER_DBUS_PATH,
    SELECTION_EVENT_SIGNAL, SELECTION_EVENT_SIGNATURE, describe_direction,
)
from ..logging_conf import get_logger

log = get_logger(__name__)


def connect_selection_event(connection, handler: Callable) -> int:
    """Register a match for the previewer's SelectionEvent and return its id."""
    subscription_id = connection.signal_subscribe(
        PREVIEWER_DBUS_NAME,
        PREVIEWER_DBUS_EVENT_IFACE,
        SELECTION_EVENT_SIGNAL,
        PREVIEWER_DBUS_PATH,
        None,
        Gio.DBusSignalFlags.NONE,
        handler,
    )
    log.debug("Subscribed to %s (id=%d)", SELECTION_EVENT_SIGNAL, subscription_id)
    return subscription_id


def disconnect_selection_event(connection, subscription_id: int) -> None:
    connection.signal_unsubscribe(subscription_id)
    log.debug("Unsubscribed from %s (id=%d)", SELECTION_EVENT_SIGNAL, subscription_id)


class SelectionEventRouter:
    """Signal handler that forwards a direction code to the active view.

    *locate_target* returns the view that should receive the event, or
    ``None`` when there is no eligible window/view.  The router keeps no state
    of its own.
    """

    def __init__(self, locate_target: Callable[[], Optional[object]]):
        self.locate_target = locate_target

    def __call__(self, connection, sender_name, object_path,
                 interface_name, signal_name, parameters, *user_data):
        view = self.locate_target()
        if view is None:
            log.debug("%s dropped: no file manager view to receive it", signal_name)
            return

        direction = self.decode(parameters)
        if direction is None:
            return

        log.debug("%s → %s", signal_name, describe_direction(direction))
        view.preview_selection_event(direction)

    @staticmethod
    def decode(parameters) -> Optional[int]:
        """Unpack the single ``u`` of a SelectionEvent, or None if malformed."""
        if parameters is None or parameters.get_type_string() != SELECTION_EVENT_SIGNATURE:
            log.debug("Malformed %s payload: %r", SELECTION_EVENT_SIGNAL, parameters)
            return None
        (direction,) = parameters.unpack()
        return direction
