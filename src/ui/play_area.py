"""
Play area - draws the thrown cursor and doubles as the mouse/keyboard
stand-in for the wrist sensor.
"""
import math
from typing import List, Optional, Tuple
from PyQt5.QtWidgets import QWidget
from PyQt5.QtCore import Qt, QPoint, QPointF, QTimer, pyqtSignal
from PyQt5.QtGui import QPainter, QPen, QColor, QFont

# Pixels of mouse travel that count as a full-strength arm direction
MOUSE_DIRECTION_SCALE = 25.0

STATE_COLORS = {
    'IDLE': QColor(60, 120, 255),
    'PENDING': QColor(255, 170, 40),
    'FLYING': QColor(230, 50, 50),
}


def qt_schedule(delay_ms: float, callback):
    """One-shot deferred call on the Qt event loop (used for the lookahead commit)."""
    QTimer.singleShot(max(0, int(round(delay_ms))), callback)


def mouse_delta_to_direction(dx: float, dy: float) -> Optional[Tuple[float, float]]:
    """Scale a mouse move into an arm direction with magnitude at most 1."""
    if dx == 0 and dy == 0:
        return None
    x, y = dx / MOUSE_DIRECTION_SCALE, dy / MOUSE_DIRECTION_SCALE
    mag = math.hypot(x, y)
    if mag > 1.0:
        x, y = x / mag, y / mag
    return (x, y)


class PlayAreaWidget(QWidget):
    """
    Renders the latest snapshot: cursor disc coloured by throw state and an
    optional yellow preview of the throw vector.
    """
    tap = pyqtSignal()
    catch_requested = pyqtSignal()
    arm_direction = pyqtSignal(float, float)
    resized = pyqtSignal(int, int)

    def __init__(self, cursor_radius: int = 10, parent=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self._radius = cursor_radius
        self._snapshot = None
        self._preview: List[Tuple[float, float]] = []
        self._last_mouse: Optional[QPoint] = None
        self._debug_text = ""

    def set_snapshot(self, snapshot, preview: Optional[List[Tuple[float, float]]] = None):
        self._snapshot = snapshot
        self._preview = preview or []
        self.update()

    def set_debug_text(self, text: str):
        self._debug_text = text

    def mouseMoveEvent(self, event):
        pos = event.pos()
        if self._last_mouse is not None:
            direction = mouse_delta_to_direction(
                pos.x() - self._last_mouse.x(), pos.y() - self._last_mouse.y()
            )
            if direction is not None:
                self.arm_direction.emit(*direction)
        self._last_mouse = pos
        super().mouseMoveEvent(event)

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.tap.emit()
        super().mousePressEvent(event)

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Space and not event.isAutoRepeat():
            self.tap.emit()
        elif event.key() == Qt.Key_C:
            self.catch_requested.emit()
        else:
            super().keyPressEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(self.width(), self.height())

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.fillRect(self.rect(), QColor(20, 20, 24))

        if len(self._preview) >= 2:
            pen = QPen(QColor(255, 220, 0))
            pen.setWidth(3)
            painter.setPen(pen)
            painter.drawPolyline(*[QPointF(x, y) for x, y in self._preview])

        if self._snapshot is not None:
            x, y = self._snapshot.position
            painter.setPen(Qt.NoPen)
            painter.setBrush(STATE_COLORS.get(self._snapshot.throw_state.name, QColor(200, 200, 200)))
            painter.drawEllipse(QPointF(x, y), self._radius, self._radius)

        if self._debug_text:
            painter.setPen(QColor(180, 180, 180))
            painter.setFont(QFont("Monospace", 9))
            painter.drawText(10, 20, self._debug_text)
