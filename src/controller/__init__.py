"""
WristToss Controller Module

Gamepad stand-in for the wrist sensor, using python-evdev.
"""
from .gamepad import Gamepad, find_gamepad, GamepadState, Button
from .worker import ControllerWorker, stick_to_arm_direction

__all__ = [
    'Gamepad',
    'find_gamepad',
    'GamepadState',
    'Button',
    'ControllerWorker',
    'stick_to_arm_direction',
]
