"""Paced, step-by-step execution with a tape view after every instruction."""

from __future__ import annotations

import time
from typing import Callable, Optional

from ..constants import (
    DIAGNOSTIC_DELAY,
    EMPTY_CELL_GLYPH,
    INVISIBLE_CELL_GLYPH,
    POINTER_GLYPH,
    RENDER_WIDTH,
)
from .channels import ByteSource
from .state import ProgramState
from .stepper import step

MEMORY_PREFIX = "Memory: "
POINTER_PREFIX = "Point:  "


def cell_glyph(value: int) -> str:
    if value == 0:
        return EMPTY_CELL_GLYPH
    char = chr(value)
    if not char.isprintable():
        return INVISIBLE_CELL_GLYPH
    return char


def render_memory(state: ProgramState, width: int = RENDER_WIDTH) -> list[str]:
    """Return the diagnostic view of *state* as display lines."""

    visible = min(width, len(state.tape))
    cells = "".join(cell_glyph(value) for value in state.tape[:visible])
    if state.pointer < visible:
        marker = " " * state.pointer + POINTER_GLYPH
    else:
        marker = f"{POINTER_GLYPH} cell {state.pointer} (right of view)"
    return [
        f"{INVISIBLE_CELL_GLYPH} = Invisible ascii character",
        f"{EMPTY_CELL_GLYPH} = Empty cell (0)",
        MEMORY_PREFIX + cells,
        POINTER_PREFIX + marker,
        f"Output so far: {state.output_log}",
    ]


def diagnostic_run(
    state: ProgramState,
    sink: Callable[[str], None],
    source: Optional[ByteSource] = None,
    *,
    clear: Optional[Callable[[], None]] = None,
    delay: float = DIAGNOSTIC_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    width: int = RENDER_WIDTH,
) -> ProgramState:
    """Replay *state* one instruction at a time, redrawing after each step.

    Program output reaches *sink* as it is produced, followed by the redrawn
    view. Errors from a step propagate before anything else is drawn.
    """

    while not state.finished:
        step(state, sink, source)
        if clear is not None:
            clear()
        for line in render_memory(state, width):
            sink(line + "\n")
        sleep(delay)
    return state


__all__ = [
    "cell_glyph",
    "diagnostic_run",
    "render_memory",
]
