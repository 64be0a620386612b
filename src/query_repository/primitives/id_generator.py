import itertools
import threading
import uuid
from typing import Protocol


class IIDGenerator(Protocol):
    """
    Protocol for ID generation strategies.
    Used by the in-memory adapter; the relational and document adapters
    let the engine assign identities.
    """

    def next_id(self) -> object:
        """Generates the next unique identifier."""
        ...


class SequentialIDGenerator(IIDGenerator):
    """Integer identities 1, 2, 3, ... in creation order."""

    def __init__(self, start: int = 1) -> None:
        self._counter = itertools.count(start)
        self._lock = threading.Lock()

    def next_id(self) -> int:
        with self._lock:
            return next(self._counter)


class UUID4Generator(IIDGenerator):
    """Random UUIDv4 identities, as strings."""

    def next_id(self) -> str:
        return str(uuid.uuid4())
