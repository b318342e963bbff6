"""Single-instruction execution and the positional bracket scans."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from ..constants import CELL_MODULUS, OUTPUT_PLACEHOLDER
from .channels import ByteSource, StreamSource
from .core import Instruction, is_symbol
from .errors import InvalidInstruction, IoFailure, OutOfBounds, UnmatchedBracket
from .state import ProgramState


def find_matching_close(instructions: Sequence, open_index: int) -> int:
    """Return the index of the ``]`` closing the ``[`` at *open_index*.

    Scans forward from the next instruction. Depth starts at 1, rises on every
    further ``[`` and falls on every ``]``; the scan stops when it reaches 0.
    """

    depth = 1
    index = open_index + 1
    while index < len(instructions):
        instr = instructions[index]
        if instr == Instruction.LOOP_OPEN:
            depth += 1
        elif instr == Instruction.LOOP_CLOSE:
            depth -= 1
            if depth == 0:
                return index
        index += 1
    raise UnmatchedBracket(
        f"Unclosed '[' at instruction {open_index}", counter=open_index
    )


def find_matching_open(instructions: Sequence, close_index: int) -> int:
    """Return the index of the ``[`` opening the ``]`` at *close_index*."""

    depth = 1
    index = close_index - 1
    while index >= 0:
        instr = instructions[index]
        if instr == Instruction.LOOP_CLOSE:
            depth += 1
        elif instr == Instruction.LOOP_OPEN:
            depth -= 1
            if depth == 0:
                return index
        index -= 1
    raise UnmatchedBracket(
        f"Unopened ']' at instruction {close_index}", counter=close_index
    )


def _emit_char(value: int) -> str:
    try:
        return chr(value)
    except (ValueError, OverflowError):
        return OUTPUT_PLACEHOLDER


def step(
    state: ProgramState,
    sink: Callable[[str], None],
    source: Optional[ByteSource] = None,
) -> bool:
    """Execute the instruction under the program counter.

    Returns ``True`` while instructions remain afterwards. Raises a
    :class:`~tapebf.runtime.errors.BFError` subclass on failure, leaving the
    counter on the failing instruction.
    """

    counter = state.counter
    if not 0 <= counter < len(state.instructions):
        raise OutOfBounds(
            f"Program counter {counter} is outside the instruction stream "
            f"of length {len(state.instructions)}",
            counter=counter,
        )
    if not 0 <= state.pointer < len(state.tape):
        raise OutOfBounds(
            f"Pointer {state.pointer} is outside the tape of size {len(state.tape)}",
            counter=counter,
        )

    instr = state.instructions[counter]
    if not isinstance(instr, Instruction):
        if not is_symbol(instr):
            raise InvalidInstruction(
                f"Invalid instruction {instr!r} reached the main loop", counter=counter
            )
        instr = Instruction(instr)

    next_counter = counter + 1

    if instr is Instruction.MOVE_LEFT:
        if state.pointer == 0:
            raise OutOfBounds(
                "Brainfuck program tried going into negative memory addresses.",
                counter=counter,
            )
        state.pointer -= 1
    elif instr is Instruction.MOVE_RIGHT:
        if state.pointer + 1 >= len(state.tape):
            raise OutOfBounds(
                f"Brainfuck program tried going past the last memory cell "
                f"({len(state.tape) - 1}).",
                counter=counter,
            )
        state.pointer += 1
    elif instr is Instruction.INCREMENT:
        state.tape[state.pointer] = (state.tape[state.pointer] + 1) % CELL_MODULUS
    elif instr is Instruction.DECREMENT:
        state.tape[state.pointer] = (state.tape[state.pointer] - 1) % CELL_MODULUS
    elif instr is Instruction.OUTPUT:
        char = _emit_char(state.tape[state.pointer])
        sink(char)
        state.output_log += char
    elif instr is Instruction.INPUT:
        reader = source if source is not None else StreamSource()
        try:
            value = reader.read_byte()
        except IoFailure as exc:
            exc.counter = counter
            raise
        except OSError as exc:
            raise IoFailure(
                f"Failed to read program input: {exc}", counter=counter
            ) from exc
        if value is None:
            raise IoFailure("Input stream ended before a byte could be read", counter=counter)
        state.tape[state.pointer] = value % CELL_MODULUS
    elif instr is Instruction.LOOP_OPEN:
        if state.tape[state.pointer] == 0:
            next_counter = find_matching_close(state.instructions, counter) + 1
    elif instr is Instruction.LOOP_CLOSE:
        if state.tape[state.pointer] != 0:
            next_counter = find_matching_open(state.instructions, counter)

    state.counter = next_counter
    return not state.finished


__all__ = [
    "find_matching_close",
    "find_matching_open",
    "step",
]
