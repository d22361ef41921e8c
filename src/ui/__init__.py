"""
WristToss UI Module

PyQt5 play area that renders the thrown cursor.
"""
from .play_area import PlayAreaWidget, qt_schedule, mouse_delta_to_direction
from .play_window import PlayWindow

__all__ = [
    'PlayAreaWidget',
    'PlayWindow',
    'qt_schedule',
    'mouse_delta_to_direction',
]
