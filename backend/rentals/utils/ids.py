from __future__ import annotations

import itertools
import time
import uuid
from typing import Callable

IdFactory = Callable[[], str]


class SequentialIdGenerator:
    """Short, readable ids of the form `<unix-millis>-<n>`.

    The counter is shared by every instance, so ids never repeat within a process.
    """

    _counter = itertools.count(1)

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock

    def __call__(self) -> str:
        return f"{int(self._clock() * 1000)}-{next(SequentialIdGenerator._counter)}"


def uuid_id() -> str:
    return uuid.uuid4().hex
