"""Command-line interface for the tapebf runtime."""
from __future__ import annotations

import argparse
import sys
import time

from ..constants import DIAGNOSTIC_DELAY, RENDER_WIDTH, TAPE_SIZE
from .analysis import (
    check_brackets,
    export_graphviz,
    instruction_histogram,
    loop_spans,
    plot_tape,
    visualize_loops,
)
from .channels import BufferSource, StreamSource, clear_terminal, console_sink
from .core import ExecutionConfig
from .crypto import verify_signature
from .errors import BFError, UnmatchedBracket
from .logbook import record_run, show_logbook
from .render import diagnostic_run
from .runner import RunReport, run
from .snapshot import (
    build_snapshot_document,
    load_snapshot,
    restore_state,
    write_snapshot_document,
)
from .state import build_from_file

MODES = ("run", "visualised")
DEFAULT_SNAPSHOT = "program.tapebf.json"


def _runtime_callable(name, fallback):
    runtime_mod = sys.modules.get("tapebf.runtime")
    if runtime_mod and hasattr(runtime_mod, name):
        return getattr(runtime_mod, name)
    return fallback


def parse_args(args):
    argp = argparse.ArgumentParser(description="tapebf Brainfuck interpreter")

    argp.add_argument("file", nargs="?", help="Program source file")
    argp.add_argument(
        "mode",
        nargs="?",
        default="run",
        choices=MODES,
        help="'run' executes immediately, 'visualised' replays with a tape view",
    )
    argp.add_argument(
        "--tape-size",
        type=int,
        default=TAPE_SIZE,
        help=f"Number of tape cells (default: {TAPE_SIZE})",
    )
    argp.add_argument(
        "--delay",
        type=float,
        default=DIAGNOSTIC_DELAY * 1000,
        metavar="MS",
        help="Pause between steps in visualised mode, in milliseconds",
    )
    argp.add_argument(
        "--width",
        type=int,
        default=RENDER_WIDTH,
        help="Number of tape cells drawn in visualised mode",
    )
    argp.add_argument(
        "--input",
        metavar="FILE",
        help="Read program input bytes from FILE instead of stdin",
    )
    argp.add_argument(
        "--resume",
        metavar="SNAPSHOT",
        help="Continue from a snapshot instead of loading a source file",
    )
    argp.add_argument(
        "--check",
        action="store_true",
        help="Only check bracket pairing and print loop statistics",
    )
    argp.add_argument(
        "--graph", action="store_true", help="Show the loop nesting graph"
    )
    argp.add_argument(
        "--viz",
        metavar="OUTPUT",
        help="Export the loop nesting graph as Graphviz SVG",
    )
    argp.add_argument(
        "--plot-tape",
        metavar="OUTPUT",
        help="Save a chart of the tape after execution",
    )
    argp.add_argument(
        "--snapshot",
        metavar="OUTPUT",
        help="Write a JSON snapshot of the final state",
    )
    argp.add_argument(
        "--record",
        action="store_true",
        help="Append a signed entry to the run logbook (implies --snapshot)",
    )
    argp.add_argument(
        "--logbook", action="store_true", help="Show the run logbook"
    )
    argp.add_argument("--verify", help="Verify the signature for a logbook hash")

    return argp.parse_args(args)


def _load_state(params, config):
    if params.resume:
        state = restore_state(load_snapshot(params.resume))
        if config.tape_size not in (TAPE_SIZE, state.tape_size):
            print(
                f"⚠ Ignoring --tape-size {config.tape_size}: "
                f"snapshot tape size {state.tape_size} is kept",
                file=sys.stderr,
            )
        return state
    if not params.file:
        raise OSError("No arguments given!")
    return build_from_file(params.file, config.tape_size)


def _print_check(instructions):
    spans = loop_spans(instructions)
    print(f"  ✓ Brackets balanced: {len(spans)} loops")
    if spans:
        print(f"  → deepest nesting: {max(span.depth for span in spans)}")
    print("  → instruction counts:")
    for symbol, count in instruction_histogram(instructions).items():
        print(f"    {symbol} {count}")


def main(args):
    """Run the CLI and return the process exit status."""
    params = parse_args(args)

    if params.logbook:
        _runtime_callable("show_logbook", show_logbook)()
        return 0
    if params.verify:
        ok = _runtime_callable("verify_signature", verify_signature)(
            params.verify,
            input("Signature hex: ").strip(),
        )
        print("✓ Signature valid" if ok else "✗ Invalid signature")
        return 0 if ok else 1

    try:
        config = ExecutionConfig(
            tape_size=params.tape_size,
            render_width=params.width,
            delay=params.delay / 1000,
        )
    except ValueError as exc:
        print(f"✗ {exc}", file=sys.stderr)
        return 2

    try:
        state = _load_state(params, config)
    except (OSError, UnicodeDecodeError, ValueError) as exc:
        print(f"Couldn't read file, {exc}", file=sys.stderr)
        return 1

    if params.check:
        try:
            _print_check(state.instructions)
        except UnmatchedBracket as exc:
            print(f"  ✗ {exc}")
            return 1
        return 0

    try:
        if params.graph or params.viz:
            check_brackets(state.instructions)
        if params.graph:
            _runtime_callable("visualize_loops", visualize_loops)(state.instructions)
        if params.viz:
            _runtime_callable("export_graphviz", export_graphviz)(
                state.instructions, params.viz
            )
    except (UnmatchedBracket, RuntimeError) as exc:
        print(f"  ✗ {exc}", file=sys.stderr)
        return 1

    if params.input:
        try:
            with open(params.input, "rb") as f:
                source = BufferSource(f.read())
        except OSError as exc:
            print(f"Couldn't read input, {exc}", file=sys.stderr)
            return 1
    else:
        source = StreamSource()

    sink = console_sink()
    try:
        if params.mode == "visualised":
            count = state.instruction_count
            start = time.perf_counter()
            diagnostic_run(
                state,
                sink,
                source,
                clear=clear_terminal,
                delay=config.delay,
                width=config.render_width,
            )
            report = RunReport(
                instruction_count=count,
                final_counter=state.counter,
                elapsed_us=int((time.perf_counter() - start) * 1_000_000),
                output=state.output_log,
            )
        else:
            report = run(state, sink, source)
    except BFError as exc:
        print(
            f"Brainfuck program halted at valid character no. {exc.counter}, "
            f"Reason: {exc}",
            file=sys.stderr,
        )
        return 1

    if params.plot_tape:
        try:
            _runtime_callable("plot_tape", plot_tape)(
                state, params.plot_tape, config.render_width
            )
        except (OSError, RuntimeError) as exc:
            print(f"  ✗ {exc}", file=sys.stderr)
            return 1

    snapshot_path = params.snapshot or (DEFAULT_SNAPSHOT if params.record else None)
    if snapshot_path:
        doc = build_snapshot_document(state, report)
        _runtime_callable("write_snapshot_document", write_snapshot_document)(
            doc, snapshot_path
        )
    if params.record:
        _runtime_callable("record_run", record_run)(snapshot_path, report)

    return 0


__all__ = [
    "main",
    "parse_args",
]
