import logging

import pytest
from gi.repository import GLib

from nemo_previewer.core import previewer as previewer_module


class DispatchedCall:
    """What the bridge handed to Gio.DBusConnection.call (minus the callback)."""

    def __init__(self, bus_name, object_path, interface_name, method_name,
                 parameters, reply_type, flags, timeout_msec, cancellable):
        self.bus_name = bus_name
        self.object_path = object_path
        self.interface_name = interface_name
        self.method_name = method_name
        self.parameters = parameters
        self.reply_type = reply_type
        self.flags = flags
        self.timeout_msec = timeout_msec
        self.cancellable = cancellable

    @property
    def args(self):
        return None if self.parameters is None else self.parameters.unpack()


class FakeResult:
    def __init__(self, error=None):
        self.error = error


class Subscription:
    def __init__(self, sender, interface_name, member, object_path, arg0, flags,
                 callback, user_data):
        self.sender = sender
        self.interface_name = interface_name
        self.member = member
        self.object_path = object_path
        self.arg0 = arg0
        self.flags = flags
        self.callback = callback
        self.user_data = user_data


class FakeConnection:
    """Records calls and signal matches the way a Gio.DBusConnection would see them.

    Dispatch history (``calls``) keeps no reference to the callback's user
    data; only ``pending`` does, until the call is completed.
    """

    def __init__(self):
        self.calls = []
        self.pending = []
        self.subscriptions = {}
        self.subscribed = []
        self.unsubscribed = []
        self._next_id = 41

    # Gio.DBusConnection surface ------------------------------------------

    def call(self, bus_name, object_path, interface_name, method_name,
             parameters, reply_type, flags, timeout_msec, cancellable,
             callback, user_data):
        record = DispatchedCall(bus_name, object_path, interface_name, method_name,
                                parameters, reply_type, flags, timeout_msec, cancellable)
        self.calls.append(record)
        self.pending.append((record, callback, user_data))

    def call_finish(self, res):
        if res.error is not None:
            raise res.error
        return GLib.Variant("()", ())

    def signal_subscribe(self, sender, interface_name, member, object_path,
                         arg0, flags, callback, *user_data):
        self._next_id += 1
        self.subscriptions[self._next_id] = Subscription(
            sender, interface_name, member, object_path, arg0, flags, callback, user_data)
        self.subscribed.append(self._next_id)
        return self._next_id

    def signal_unsubscribe(self, subscription_id):
        self.unsubscribed.append(subscription_id)
        del self.subscriptions[subscription_id]

    # Test helpers ----------------------------------------------------------

    def complete(self, error=None):
        """Finish the oldest pending call, failing it with *error* if given."""
        _record, callback, user_data = self.pending.pop(0)
        callback(self, FakeResult(error), user_data)

    def complete_all(self):
        while self.pending:
            self.complete()

    def emit(self, parameters, member="SelectionEvent"):
        for sub in list(self.subscriptions.values()):
            if sub.member == member:
                sub.callback(self, sub.sender, sub.object_path, sub.interface_name,
                             member, parameters, *sub.user_data)

    def calls_to(self, method_name):
        return [c for c in self.calls if c.method_name == method_name]


class FakeBus:
    """pydbus-shaped bus: the raw connection lives on ``.con``."""

    def __init__(self, con):
        self.con = con


class FakeView:
    def __init__(self):
        self.events = []

    def preview_selection_event(self, direction):
        self.events.append(direction)


class FakePane:
    def __init__(self, view):
        self.view = view

    def get_current_view(self):
        return self.view


class FakeWindow:
    def __init__(self, view=None, pane=True):
        self.pane = FakePane(view) if pane else None

    def get_active_pane(self):
        return self.pane


class OtherWindow:
    """A top-level window that is not a file manager window (e.g. a dialog)."""


class FakeApplication:
    def __init__(self, windows=()):
        self.windows = list(windows)

    def get_windows(self):
        return self.windows


@pytest.fixture(autouse=True)
def empty_singleton_slot(monkeypatch):
    monkeypatch.setattr(previewer_module, "_singleton_ref", None)


@pytest.fixture
def debug_logs(caplog):
    # The package logger does not propagate, so listen on it directly.
    package_logger = logging.getLogger("nemo_previewer")
    caplog.set_level(logging.DEBUG, logger="nemo_previewer")
    package_logger.addHandler(caplog.handler)
    yield caplog
    package_logger.removeHandler(caplog.handler)


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def view():
    return FakeView()


@pytest.fixture
def bridge(connection, view):
    return previewer_module.get_singleton(bus_factory=lambda: FakeBus(connection),
                                          locate_target=lambda: view)


def failing_bus_factory():
    raise GLib.Error("Cannot autolaunch D-Bus without X11 $DISPLAY")
