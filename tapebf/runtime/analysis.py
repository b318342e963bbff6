"""Static loop analysis and visual rendering helpers."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Sequence

try:
    import networkx as nx
except ModuleNotFoundError:  # pragma: no cover
    nx = None

try:
    import matplotlib.pyplot as plt
except ModuleNotFoundError:  # pragma: no cover
    plt = None

try:
    import pydot
except ModuleNotFoundError:  # pragma: no cover
    pydot = None

from ..constants import RENDER_WIDTH
from .core import Instruction
from .state import ProgramState
from .stepper import find_matching_close, find_matching_open

ROOT_NODE = "program"

DEPTH_COLORS = [
    "#90CAF9",
    "#C5E1A5",
    "#FFE082",
    "#F8BBD0",
    "#B39DDB",
    "#FFAB91",
    "#80CBC4",
    "#B0BEC5",
]


@dataclass(frozen=True)
class LoopSpan:
    """A bracket pair and its nesting depth (outermost loops have depth 1)."""

    open: int
    close: int
    depth: int

    @property
    def node_id(self) -> str:
        return f"loop_{self.open}"

    @property
    def body_size(self) -> int:
        return self.close - self.open - 1


def check_brackets(instructions: Sequence) -> None:
    """Raise :class:`UnmatchedBracket` for the first bracket without a partner."""

    for index, instr in enumerate(instructions):
        if instr == Instruction.LOOP_OPEN:
            find_matching_close(instructions, index)
        elif instr == Instruction.LOOP_CLOSE:
            find_matching_open(instructions, index)


def loop_spans(instructions: Sequence) -> list[LoopSpan]:
    """List every loop in source order, matched with the stepper's own scans."""

    check_brackets(instructions)
    spans = []
    depth = 0
    for index, instr in enumerate(instructions):
        if instr == Instruction.LOOP_OPEN:
            depth += 1
            spans.append(
                LoopSpan(index, find_matching_close(instructions, index), depth)
            )
        elif instr == Instruction.LOOP_CLOSE:
            depth -= 1
    return spans


def instruction_histogram(instructions: Sequence) -> dict[str, int]:
    counts = Counter(str(instr) for instr in instructions)
    return {str(instr): counts.get(str(instr), 0) for instr in Instruction}


def build_loop_graph(instructions: Sequence):
    """Return a ``networkx.DiGraph`` of loop nesting rooted at ``program``."""

    if nx is None:
        raise RuntimeError("Loop graphs require networkx to be installed")

    graph = nx.DiGraph()
    graph.add_node(
        ROOT_NODE,
        label=f"program\n{len(instructions)} ops",
        depth=0,
        open=None,
        close=None,
        size=len(instructions),
    )
    enclosing = [ROOT_NODE]
    closes = []
    for span in loop_spans(instructions):
        while closes and closes[-1] < span.open:
            closes.pop()
            enclosing.pop()
        graph.add_node(
            span.node_id,
            label=f"[{span.open}..{span.close}]",
            depth=span.depth,
            open=span.open,
            close=span.close,
            size=span.body_size,
        )
        graph.add_edge(enclosing[-1], span.node_id)
        enclosing.append(span.node_id)
        closes.append(span.close)
    return graph


def _depth_color(depth: int) -> str:
    return DEPTH_COLORS[depth % len(DEPTH_COLORS)]


def build_graphviz(instructions: Sequence):
    """Build a ``pydot.Dot`` describing the loop nesting tree."""

    if pydot is None:
        raise RuntimeError("Graphviz export requires the optional pydot dependency")

    loops = build_loop_graph(instructions)
    dot = pydot.Dot(
        "tapebf_loops",
        graph_type="digraph",
        rankdir="TB",
        fontname="Helvetica",
    )
    for node_id, info in loops.nodes(data=True):
        if node_id == ROOT_NODE:
            label = f"program\\n{info['size']} ops"
        else:
            label = f"[{info['open']}..{info['close']}]\\nbody={info['size']}"
        dot.add_node(
            pydot.Node(
                node_id,
                label=label,
                shape="box",
                style="filled",
                fillcolor=_depth_color(info["depth"]),
                fontname="Helvetica",
            )
        )
    for parent, child in loops.edges():
        dot.add_edge(pydot.Edge(parent, child, color="#34495e"))
    return dot


def export_graphviz(instructions: Sequence, output_path):  # pragma: no cover
    """Write the loop nesting tree as SVG (needs the Graphviz binaries)."""

    dot = build_graphviz(instructions)
    dot.write_svg(str(output_path))
    print(f"  ✓ Loop graph exported → {output_path}")
    return output_path


def _tree_positions(graph):
    positions = {}
    by_depth: dict[int, list] = {}
    for node_id, info in graph.nodes(data=True):
        by_depth.setdefault(info["depth"], []).append(node_id)
    for depth, nodes in by_depth.items():
        for slot, node_id in enumerate(nodes):
            positions[node_id] = (slot - (len(nodes) - 1) / 2, -depth)
    return positions


def visualize_loops(instructions: Sequence):  # pragma: no cover
    """Show the loop nesting tree in a matplotlib window."""

    if nx is None or plt is None:
        raise RuntimeError("Visualization requires networkx and matplotlib to be installed")

    graph = build_loop_graph(instructions)
    labels = nx.get_node_attributes(graph, "label")
    colors = [_depth_color(info["depth"]) for _, info in graph.nodes(data=True)]
    fig, ax = plt.subplots()
    nx.draw(
        graph,
        _tree_positions(graph),
        ax=ax,
        with_labels=True,
        labels=labels,
        node_color=colors,
        edgecolors="black",
        font_size=8,
    )
    ax.set_title("tapebf loop nesting")
    ax.margins(0.2)
    plt.tight_layout()
    plt.show()


def plot_tape(state: ProgramState, output_path, width: int = RENDER_WIDTH):
    """Save a bar chart of the first *width* tape cells, pointer highlighted."""

    if plt is None:
        raise RuntimeError("Tape plots require matplotlib to be installed")

    visible = min(width, len(state.tape))
    values = list(state.tape[:visible])
    colors = ["#B0BEC5"] * visible
    if state.pointer < visible:
        colors[state.pointer] = "#FF7043"

    fig, ax = plt.subplots(figsize=(max(6, visible / 8), 3))
    ax.bar(range(visible), values, color=colors, width=0.9)
    ax.set_xlim(-0.5, visible - 0.5)
    ax.set_ylim(0, 255)
    ax.set_xlabel("cell")
    ax.set_ylabel("value")
    ax.set_title(
        f"Tape after {state.counter}/{state.instruction_count} instructions "
        f"(pointer {state.pointer})"
    )
    fig.tight_layout()
    fig.savefig(str(output_path))
    plt.close(fig)
    print(f"  ✓ Tape plot saved → {output_path}")
    return output_path


__all__ = [
    "LoopSpan",
    "build_graphviz",
    "build_loop_graph",
    "check_brackets",
    "export_graphviz",
    "instruction_histogram",
    "loop_spans",
    "plot_tape",
    "visualize_loops",
]
