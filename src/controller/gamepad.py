"""
Gamepad handling using python-evdev.

Stands in for the wrist sensor during development: auto-detects a pad,
grabs it exclusively and exposes the sticks, triggers and face buttons.
"""
import select
from dataclasses import dataclass, field
from typing import Optional, List, Tuple, Dict
from enum import IntEnum

from loguru import logger

try:
    import evdev
    from evdev import ecodes, InputDevice
    EVDEV_AVAILABLE = True
except ImportError:
    EVDEV_AVAILABLE = False
    evdev = None
    ecodes = None


class Button(IntEnum):
    """Xbox-style button naming for cross-platform consistency."""
    A = 0
    B = 1
    START = 7


# Evdev button code to Button enum mapping (common variants)
BUTTON_MAP = {
    304: Button.A,      # BTN_SOUTH
    305: Button.B,      # BTN_EAST
    315: Button.START,  # BTN_START
}


@dataclass
class GamepadState:
    """Current state of the inputs used for throwing."""
    # Right thumbstick: -1.0 to 1.0 (left/down = negative, right/up = positive)
    right_stick: Tuple[float, float] = (0.0, 0.0)

    # Right trigger: 0.0 to 1.0
    right_trigger: float = 0.0

    buttons: Dict[Button, bool] = field(default_factory=lambda: {b: False for b in Button})

    # Events this frame
    buttons_pressed: List[Button] = field(default_factory=list)
    trigger_changed: bool = False


def normalize_axis(value: int, min_val: int, max_val: int, deadzone: float) -> float:
    """Map a raw axis reading to -1.0..1.0, zeroing the deadzone."""
    half_range = (max_val - min_val) / 2
    if half_range <= 0:
        return 0.0
    normalized = (value - (min_val + max_val) / 2) / half_range
    normalized = max(-1.0, min(1.0, normalized))
    if abs(normalized) < deadzone:
        return 0.0
    return normalized


def find_gamepad() -> Optional[str]:
    """
    Auto-detect the first connected gamepad.
    
    Looks for devices with ABS_RX, ABS_RY axes and common gamepad buttons.
    Returns the device path (e.g., '/dev/input/event5') or None.
    """
    if not EVDEV_AVAILABLE:
        return None
        
    for path in evdev.list_devices():
        try:
            device = InputDevice(path)
            caps = device.capabilities()
        except (PermissionError, OSError):
            continue

        abs_codes = [code for code, _ in caps.get(ecodes.EV_ABS, [])]
        if ecodes.ABS_RX not in abs_codes or ecodes.ABS_RY not in abs_codes:
            continue
        if any(code in caps.get(ecodes.EV_KEY, []) for code in BUTTON_MAP):
            logger.info(f"Found gamepad: {device.name} at {path}")
            return path
    
    return None


class Gamepad:
    """
    Gamepad input handler with exclusive grab support.
    
    Usage:
        gamepad = Gamepad()
        if gamepad.connect():
            gamepad.grab()
            while running:
                state = gamepad.update(timeout=0.008)
            gamepad.disconnect()
    """
    
    def __init__(self, device_path: Optional[str] = None, deadzone: float = 0.15):
        self._device_path = device_path
        self._device: Optional["InputDevice"] = None
        self._grabbed = False
        self._deadzone = deadzone
        self._axis_info: Dict[int, Tuple[int, int]] = {}  # code -> (min, max)
        self._state = GamepadState()
    
    def connect(self) -> bool:
        """Open the device and cache its axis ranges. Returns True on success."""
        if not EVDEV_AVAILABLE:
            logger.error("python-evdev not installed")
            return False
        
        path = self._device_path or find_gamepad()
        if not path:
            logger.error("No gamepad found")
            return False
        
        try:
            self._device = InputDevice(path)
            self._device_path = path
            caps = self._device.capabilities()
            for code, absinfo in caps.get(ecodes.EV_ABS, []):
                self._axis_info[code] = (absinfo.min, absinfo.max)
            logger.info(f"Connected to: {self._device.name}")
            return True
        except (PermissionError, OSError) as e:
            logger.error(f"Cannot open gamepad: {e}")
            return False
    
    def disconnect(self):
        if self._grabbed:
            self.ungrab()
        if self._device:
            try:
                self._device.close()
            except OSError as e:
                logger.warning(f"Error closing gamepad: {e}")
            self._device = None
    
    def grab(self) -> bool:
        """Grab exclusive access so the pad does not also drive the desktop."""
        if not self._device:
            return False
        try:
            self._device.grab()
            self._grabbed = True
            return True
        except OSError as e:
            logger.error(f"Failed to grab device: {e}")
            return False
    
    def ungrab(self):
        if self._device and self._grabbed:
            try:
                self._device.ungrab()
            except OSError as e:
                logger.warning(f"Error releasing grab: {e}")
            self._grabbed = False
    
    def update(self, timeout: float = 0.0) -> GamepadState:
        """
        Read and process pending events.
        
        Args:
            timeout: Maximum time to wait for events (0 = non-blocking)
            
        Returns:
            Current GamepadState
        """
        if not self._device:
            return self._state
        
        self._state.buttons_pressed.clear()
        self._state.trigger_changed = False
        
        r, _, _ = select.select([self._device.fd], [], [], timeout)
        if r:
            try:
                for event in self._device.read():
                    self.process_event(event.type, event.code, event.value)
            except BlockingIOError:
                pass
        
        return self._state
    
    def process_event(self, ev_type: int, code: int, value: int):
        """Fold a single evdev event into the current state."""
        if ev_type == ecodes.EV_ABS:
            self._process_axis(code, value)
        elif ev_type == ecodes.EV_KEY:
            self._process_button(code, value)
    
    def _process_axis(self, code: int, value: int):
        min_val, max_val = self._axis_info.get(code, (0, 0))
        normalized = normalize_axis(value, min_val, max_val, self._deadzone)
        state = self._state
        
        if code == ecodes.ABS_RX:
            state.right_stick = (normalized, state.right_stick[1])
        elif code == ecodes.ABS_RY:
            state.right_stick = (state.right_stick[0], -normalized)
        elif code == ecodes.ABS_RZ:
            state.right_trigger = max(0.0, normalized + 1.0) / 2.0
            state.trigger_changed = True
    
    def _process_button(self, code: int, value: int):
        button = BUTTON_MAP.get(code)
        if button is None:
            return
        was_pressed = self._state.buttons.get(button, False)
        is_pressed = value > 0
        self._state.buttons[button] = is_pressed
        if is_pressed and not was_pressed:
            self._state.buttons_pressed.append(button)

