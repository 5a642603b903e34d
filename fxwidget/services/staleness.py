"""Guards that keep slow responses from overwriting newer state.

Responses may arrive in any order. Two mechanisms decide whether a finished
request is still allowed to write:

- RequestSequencer: every trigger takes the next number; only the holder of
  the latest number may write.
- CancellationToken: handed to a background fetch; cancelled when the owner
  moves on (e.g. the currency pair changed).
"""

from __future__ import annotations


class RequestSequencer:
    def __init__(self) -> None:
        self._latest = 0

    def next(self) -> int:
        self._latest += 1
        return self._latest

    def is_current(self, seq: int) -> bool:
        return seq == self._latest


class CancellationToken:
    __slots__ = ("_cancelled",)

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled
