"""
Background worker that turns gamepad input into wrist-sensor events.
Runs in a separate QThread; the engine only sees the emitted signals.
"""
import time
from typing import Optional, Tuple
from PyQt5.QtCore import QObject, pyqtSignal

from loguru import logger

from .gamepad import Gamepad, GamepadState, Button


def stick_to_arm_direction(stick: Tuple[float, float]) -> Optional[Tuple[float, float]]:
    """
    Right stick -> screen-space arm direction (y grows downwards).

    A centred stick carries no direction and yields None.
    """
    x, y = stick
    if x == 0.0 and y == 0.0:
        return None
    return (x, -y)


class ControllerWorker(QObject):
    """
    Polls the gamepad and emits the same events the wrist sensor would:

    - A button: tap
    - Right stick: arm direction samples
    - Right trigger: tap probability (flick), if enabled in config
    - B button: explicit catch
    """
    tap = pyqtSignal()
    flick_probability = pyqtSignal(float)
    arm_direction = pyqtSignal(float, float)
    catch_requested = pyqtSignal()
    disconnected = pyqtSignal()
    error = pyqtSignal(str)
    
    def __init__(self, config, parent=None):
        super().__init__(parent)
        self._config = config
        self._gamepad: Optional[Gamepad] = None
        self._is_running = False
        self._deadzone = config.input.deadzone
        self._use_trigger = config.input.flick_trigger_axis
    
    def start_process(self):
        """Main processing loop. Runs in worker thread."""
        self._gamepad = Gamepad(deadzone=self._deadzone)
        
        if not self._gamepad.connect():
            self.error.emit("No gamepad found or permission denied")
            return
        
        if not self._gamepad.grab():
            self.error.emit("Failed to get exclusive access to gamepad")
            self._gamepad.disconnect()
            return
        
        self._is_running = True
        min_interval = 1.0 / 120  # Sensor-like sample rate
        consecutive_errors = 0
        
        try:
            while self._is_running:
                loop_start = time.perf_counter()
                
                try:
                    state = self._gamepad.update(timeout=0.004)
                    consecutive_errors = 0
                except OSError as e:
                    consecutive_errors += 1
                    if consecutive_errors > 10:
                        logger.warning(f"Controller disconnected: {e}")
                        self.disconnected.emit()
                        break
                    time.sleep(0.05)
                    continue
                
                self.process_state(state)
                
                elapsed = time.perf_counter() - loop_start
                sleep_time = min_interval - elapsed
                if sleep_time > 0:
                    time.sleep(sleep_time)
                    
        except Exception as e:
            self.error.emit(f"Controller error: {str(e)}")
        finally:
            self._is_running = False
            if self._gamepad:
                self._gamepad.disconnect()
    
    def stop_process(self):
        """Signal the loop to stop."""
        self._is_running = False
    
    def process_state(self, state: GamepadState):
        """Emit sensor events for one polled frame."""
        direction = stick_to_arm_direction(state.right_stick)
        if direction is not None:
            self.arm_direction.emit(*direction)
        
        if self._use_trigger and state.trigger_changed:
            self.flick_probability.emit(state.right_trigger)
        
        for button in state.buttons_pressed:
            if button == Button.A:
                self.tap.emit()
            elif button in (Button.B, Button.START):
                self.catch_requested.emit()
