"""Exception taxonomy raised while executing a program."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(eq=False)
class BFError(RuntimeError):
    """Base class for every terminal execution failure.

    ``counter`` is the program counter of the instruction that failed, which is
    also the last valid counter the program reached.
    """

    message: str
    counter: Optional[int] = None

    def __str__(self) -> str:
        return self.message


class OutOfBounds(BFError):
    """The pointer or program counter left its valid range."""


class UnmatchedBracket(BFError):
    """A bracket scan exhausted the stream before the depth reached zero."""


class InvalidInstruction(BFError):
    """A symbol outside the instruction alphabet reached the dispatcher."""


class IoFailure(BFError):
    """The input channel failed or reached end-of-stream."""


__all__ = [
    "BFError",
    "InvalidInstruction",
    "IoFailure",
    "OutOfBounds",
    "UnmatchedBracket",
]
