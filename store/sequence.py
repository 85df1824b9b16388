"""Per-collection identifier sequences."""


class IdSequence:
    """Monotonic integer id generator for one collection.

    The counter is incremented before each assignment, starts handing out
    ids at 1 and is never reset, so an id is never reused even after the
    row that held it is deleted.
    """

    def __init__(self) -> None:
        self._current = 0

    def next(self) -> int:
        self._current += 1
        return self._current
