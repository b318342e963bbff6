"""Mutable program state: tape, pointer, instruction stream and counter."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Sequence

from ..constants import TAPE_SIZE
from .core import is_symbol, sanitize, to_source

if TYPE_CHECKING:  # pragma: no cover - only for typing
    from .channels import ByteSource
    from .runner import RunReport


class ProgramState:
    """Everything one execution owns.

    The tape length never changes after construction. ``instructions`` is
    normally the output of :func:`sanitize`; states built directly from an
    untrusted sequence keep it as given and let the stepper reject foreign
    symbols when it reaches them.
    """

    def __init__(self, instructions: Sequence, tape_size: int = TAPE_SIZE):
        if tape_size < 1:
            raise ValueError(f"Tape size must be positive, got {tape_size}")
        self.tape = bytearray(tape_size)
        self.pointer = 0
        self.instructions = tuple(instructions)
        self.counter = 0
        self.output_log = ""

    def __repr__(self) -> str:  # pragma: no cover - representation helper
        return (
            f"<ProgramState pc={self.counter}/{len(self.instructions)} "
            f"ptr={self.pointer} tape={len(self.tape)}>"
        )

    @property
    def tape_size(self) -> int:
        return len(self.tape)

    @property
    def instruction_count(self) -> int:
        return len(self.instructions)

    @property
    def finished(self) -> bool:
        return self.counter >= len(self.instructions)

    @property
    def current_cell(self) -> int:
        return self.tape[self.pointer]

    @property
    def source(self) -> str:
        return to_source(
            instr for instr in self.instructions if is_symbol(instr)
        )

    def step(self, sink: Callable[[str], None], source: Optional["ByteSource"] = None) -> bool:
        from .stepper import step

        return step(self, sink, source)

    def run(self, sink: Callable[[str], None], source: Optional["ByteSource"] = None) -> "RunReport":
        from .runner import run

        return run(self, sink, source)

    def diagnostic_run(self, sink: Callable[[str], None], source: Optional["ByteSource"] = None, **kwargs) -> "ProgramState":
        from .render import diagnostic_run

        return diagnostic_run(self, sink, source, **kwargs)


def build(source: str, tape_size: int = TAPE_SIZE) -> ProgramState:
    """Sanitize *source* and wrap it in a fresh :class:`ProgramState`."""

    return ProgramState(sanitize(source), tape_size)


def build_from_file(path, tape_size: int = TAPE_SIZE, encoding: str = "utf-8") -> ProgramState:
    with open(path, "r", encoding=encoding) as f:
        return build(f.read(), tape_size)


__all__ = [
    "ProgramState",
    "build",
    "build_from_file",
]
