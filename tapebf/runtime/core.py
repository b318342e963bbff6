"""Instruction alphabet, sanitizer and per-run configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from ..constants import DIAGNOSTIC_DELAY, INSTRUCTION_SYMBOLS, RENDER_WIDTH, TAPE_SIZE


class Instruction(str, Enum):
    """The eight instruction symbols, one member per operation."""

    MOVE_LEFT = "<"
    MOVE_RIGHT = ">"
    INCREMENT = "+"
    DECREMENT = "-"
    OUTPUT = "."
    INPUT = ","
    LOOP_OPEN = "["
    LOOP_CLOSE = "]"

    def __str__(self) -> str:
        return self.value


def sanitize(source: Iterable[str]) -> tuple[Instruction, ...]:
    """Keep only alphabet symbols from *source*, preserving their order."""

    return tuple(Instruction(ch) for ch in source if is_symbol(ch))


def is_symbol(ch) -> bool:
    # substring containment, so Instruction members match by value too
    return isinstance(ch, str) and len(ch) == 1 and ch in INSTRUCTION_SYMBOLS


def to_source(instructions: Iterable[Instruction]) -> str:
    return "".join(str(instr) for instr in instructions)


@dataclass(frozen=True)
class ExecutionConfig:
    """Tunables for a single execution."""

    tape_size: int = TAPE_SIZE
    render_width: int = RENDER_WIDTH
    delay: float = DIAGNOSTIC_DELAY

    def __post_init__(self):
        if self.tape_size < 1:
            raise ValueError(f"Tape size must be positive, got {self.tape_size}")
        if self.render_width < 1:
            raise ValueError(
                f"Render width must be positive, got {self.render_width}"
            )
        if self.delay < 0:
            raise ValueError(f"Diagnostic delay cannot be negative, got {self.delay}")


__all__ = [
    "ExecutionConfig",
    "Instruction",
    "is_symbol",
    "sanitize",
    "to_source",
]
