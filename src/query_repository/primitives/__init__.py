from .clock import Clock, FixedClock, SystemClock
from .id_generator import IIDGenerator, SequentialIDGenerator, UUID4Generator

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "IIDGenerator",
    "SequentialIDGenerator",
    "UUID4Generator",
]
