"""All project‑wide constants & enums live here."""
from enum import IntEnum

# D-Bus names / interfaces ---------------------------------------------------
PREVIEWER_DBUS_NAME          = "org.gnome.NautilusPreviewer"
PREVIEWER_DBUS_IFACE         = "org.gnome.NautilusPreviewer"
PREVIEWER_DBUS_EVENT_IFACE   = "org.gnome.NautilusPreviewer2"
PREVIEWER_DBUS_PATH          = "/org/gnome/NautilusPreviewer"

# Members on the previewer peer
SHOW_FILE_METHOD             = "ShowFile"
CLOSE_METHOD                 = "Close"
SELECTION_EVENT_SIGNAL       = "SelectionEvent"

# GVariant signatures
SHOW_FILE_SIGNATURE          = "(sib)"
SELECTION_EVENT_SIGNATURE    = "(u)"

# Transport default reply timeout
DEFAULT_TIMEOUT_MSEC         = -1

# Environment ----------------------------------------------------------------
BUS_ADDRESS_ENV              = "NEMO_PREVIEWER_BUS_ADDRESS"
DEBUG_ENV                    = "NEMO_DEBUG"
LOG_LEVEL_ENV                = "NEMO_PREVIEWER_LOG_LEVEL"
DEBUG_CHANNEL                = "previewer"


# Direction codes carried by SelectionEvent (GtkDirectionType numbering) ------
class Direction(IntEnum):
    TAB_FORWARD  = 0
    TAB_BACKWARD = 1
    UP           = 2
    DOWN         = 3
    LEFT         = 4
    RIGHT        = 5


def describe_direction(code: int) -> str:
    """Human readable name for *code*, falling back to the raw number."""
    try:
        return Direction(code).name
    except ValueError:
        return str(code)
