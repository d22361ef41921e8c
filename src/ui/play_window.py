"""
Main window - hosts the play area and runs the render-loop tick.
"""
import time
from PyQt5.QtWidgets import QMainWindow
from PyQt5.QtCore import QTimer

from .play_area import PlayAreaWidget

# Longest step the simulation takes for one displayed frame (s)
MAX_FRAME_DT = 0.1


def clamp_frame_dt(dt: float) -> float:
    """Elapsed wall time to simulate for one frame; stalls (window drag, suspend) are capped."""
    return min(max(dt, 0.0), MAX_FRAME_DT)


class PlayWindow(QMainWindow):
    """
    Drives `engine.tick(dt)` once per displayed frame from a QTimer and
    pushes the resulting snapshot into the play area.

    The engine is duck-typed: tick, snapshot, resize_play_area and
    preview_throw_path are all that is used.
    """

    def __init__(self, engine, ui_config, debug: bool = False, parent=None):
        super().__init__(parent)
        self._engine = engine
        self._show_debug_line = ui_config.show_debug_line
        self._debug = debug

        self.setWindowTitle("WristToss")
        self.play_area = PlayAreaWidget(cursor_radius=ui_config.cursor_radius)
        self.setCentralWidget(self.play_area)
        self.resize(ui_config.width, ui_config.height)

        self.play_area.resized.connect(self._engine.resize_play_area)

        self._last_frame = time.perf_counter()
        self._frame_timer = QTimer(self)
        self._frame_timer.timeout.connect(self._on_frame)
        self._frame_timer.start(max(1, int(1000 / ui_config.fps)))

    def _on_frame(self):
        now = time.perf_counter()
        dt = clamp_frame_dt(now - self._last_frame)
        self._last_frame = now

        snapshot = self._engine.tick(dt)
        preview = self._engine.preview_throw_path() if self._show_debug_line else None
        if self._debug:
            vx, vy = snapshot.velocity
            self.play_area.set_debug_text(
                f"{snapshot.throw_state.name:8s} v=({vx:7.1f}, {vy:7.1f}) "
                f"spin={snapshot.spin:6.3f} plan={snapshot.plan_index}/{snapshot.plan_length}"
            )
        self.play_area.set_snapshot(snapshot, preview)

    def closeEvent(self, event):
        self._frame_timer.stop()
        super().closeEvent(event)
