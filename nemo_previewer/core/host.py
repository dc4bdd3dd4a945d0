"""Finding the view a SelectionEvent belongs to inside the host application.

The host (the file manager) provides three things:

*   an application object – ``Gio.Application.get_default()`` by default –
    whose ``get_windows()`` lists its top-level windows in stacking order;
*   a file-manager window type exposing ``get_active_pane()``, whose pane
    exposes ``get_current_view()``;
*   views that accept ``preview_selection_event(direction)``.
"""
from __future__ import annotations

from typing import Callable, Optional

from gi.repository import Gio

from ..logging_conf import get_logger

log = get_logger(__name__)


def supports_preview_selection(view, view_type: Optional[type] = None) -> bool:
    if view is None:
        return False
    if view_type is not None:
        return isinstance(view, view_type)
    return callable(getattr(view, "preview_selection_event", None))


class ApplicationWindowLocator:
    """Callable that returns the active view of the first file-manager window."""

    def __init__(self, window_type: Optional[type] = None, view_type: Optional[type] = None,
                 get_application: Optional[Callable] = None):
        self.window_type = window_type
        self.view_type = view_type
        self.get_application = get_application or Gio.Application.get_default

    def is_file_manager_window(self, window) -> bool:
        # Without an explicit type, anything that has panes counts.
        if self.window_type is not None:
            return isinstance(window, self.window_type)
        return callable(getattr(window, "get_active_pane", None))

    def find_window(self):
        application = self.get_application()
        if application is None or not hasattr(application, "get_windows"):
            return None
        for window in application.get_windows() or ():
            if self.is_file_manager_window(window):
                return window
        return None

    def __call__(self):
        window = self.find_window()
        if window is None:
            return None

        pane = window.get_active_pane()
        view = pane.get_current_view() if pane is not None else None
        if not supports_preview_selection(view, self.view_type):
            log.debug("Active view %r cannot take preview selection events", view)
            return None
        return view
