"""
Direction input source implementations.
"""

from recycler.input.sources.base import DirectionSource
from recycler.input.sources.keyboard import KeyboardDirectionSource

__all__ = ['DirectionSource', 'KeyboardDirectionSource']
