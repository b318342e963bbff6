"""Immediate-mode execution with timing and a closing summary."""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable, Optional

from ..constants import BANNER_RULE
from .channels import ByteSource
from .state import ProgramState
from .stepper import step


@dataclass(frozen=True)
class RunReport:
    """Outcome of a successful immediate-mode run."""

    instruction_count: int
    final_counter: int
    elapsed_us: int
    output: str

    def to_dict(self):
        return {
            "instruction_count": self.instruction_count,
            "final_counter": self.final_counter,
            "elapsed_us": self.elapsed_us,
            "output": self.output,
        }


def execute(
    state: ProgramState,
    sink: Callable[[str], None],
    source: Optional[ByteSource] = None,
) -> ProgramState:
    """Step *state* until the counter reaches the instruction count."""

    while not state.finished:
        step(state, sink, source)
    return state


def run(
    state: ProgramState,
    sink: Callable[[str], None],
    source: Optional[ByteSource] = None,
) -> RunReport:
    """Run to completion, framing the program output with banners.

    The first error raised by a step propagates unchanged; nothing is retried.
    """

    count = state.instruction_count
    sink(f"Running bf program. Instruction amount: {count}\n")
    sink(BANNER_RULE + "\n")

    start = time.perf_counter()
    execute(state, sink, source)
    elapsed_us = int((time.perf_counter() - start) * 1_000_000)

    if state.output_log and not state.output_log.endswith("\n"):
        sink("\n")
    sink(BANNER_RULE + "\n")
    sink(f"Execution successful! Took {elapsed_us} microseconds\n")
    sink(f"Program stopped at count {state.counter}.\n")

    return RunReport(
        instruction_count=count,
        final_counter=state.counter,
        elapsed_us=elapsed_us,
        output=state.output_log,
    )


__all__ = [
    "RunReport",
    "execute",
    "run",
]
