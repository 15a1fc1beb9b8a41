"""
Directional input for the recycler core.

The recognizer turns direction tokens into a rolling, time-windowed
buffer; sources turn platform key events into DirectionEvents.
"""

from recycler.input.direction_event import DirectionEvent
from recycler.input.recognizer import InputRecognizer

__all__ = ['DirectionEvent', 'InputRecognizer']
