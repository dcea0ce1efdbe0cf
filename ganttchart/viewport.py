from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal


class Viewport(QObject):
    """Scrollable area hosting the timeline.

    The host widget keeps the geometry current and forwards its mouse events
    through ``pointer_moved`` / ``pointer_released``. ``scroll_left_px`` is
    written by the timeline when it re-centers on the reference instant.
    """

    pointer_moved = pyqtSignal(float, float)
    pointer_released = pyqtSignal(float, float)
    scroll_changed = pyqtSignal(float)

    def __init__(self, width_px: float = 0.0, left_edge_px: float = 0.0) -> None:
        super().__init__()
        self.width_px = float(width_px)
        self.left_edge_px = float(left_edge_px)
        self._scroll_left_px = 0.0

    @property
    def scroll_left_px(self) -> float:
        return self._scroll_left_px

    @scroll_left_px.setter
    def scroll_left_px(self, value: float) -> None:
        value = max(0.0, float(value))
        if value == self._scroll_left_px:
            return
        self._scroll_left_px = value
        self.scroll_changed.emit(value)

    def set_geometry(self, width_px: float, left_edge_px: float) -> None:
        self.width_px = float(width_px)
        self.left_edge_px = float(left_edge_px)

    def subscribe_pointer(self, on_move, on_release):
        """Connect gesture callbacks; the returned callable disconnects them."""
        self.pointer_moved.connect(on_move)
        self.pointer_released.connect(on_release)

        def release() -> None:
            self.pointer_moved.disconnect(on_move)
            self.pointer_released.disconnect(on_release)

        return release
