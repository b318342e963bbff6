import pytest

from tapebf import (
    ExecutionConfig,
    Instruction,
    ProgramState,
    build,
    is_symbol,
    sanitize,
    to_source,
)


def test_sanitize_keeps_alphabet_in_order():
    instructions = sanitize("a+b-c>d<e.f,g[h]i")

    assert instructions == (
        Instruction.INCREMENT,
        Instruction.DECREMENT,
        Instruction.MOVE_RIGHT,
        Instruction.MOVE_LEFT,
        Instruction.OUTPUT,
        Instruction.INPUT,
        Instruction.LOOP_OPEN,
        Instruction.LOOP_CLOSE,
    )
    assert to_source(instructions) == "+-><.,[]"


def test_sanitize_drops_everything_else_silently():
    assert sanitize("hello world\n\t!#") == ()
    assert sanitize("") == ()


@pytest.mark.parametrize(
    "text",
    [
        "",
        "+++.",
        "comment [->+<] more comment",
        "ščř ↥ ¿ +-",
        "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>.",
    ],
)
def test_sanitize_is_idempotent(text):
    once = sanitize(text)

    assert sanitize(once) == once
    assert sanitize(to_source(once)) == once


def test_is_symbol_rejects_multi_character_and_non_strings():
    assert is_symbol("[")
    assert is_symbol(Instruction.LOOP_CLOSE)
    assert not is_symbol("")
    assert not is_symbol("<>")
    assert not is_symbol(43)


def test_build_sanitizes_and_sizes_tape():
    state = build("x+y>", tape_size=8)

    assert state.instructions == (Instruction.INCREMENT, Instruction.MOVE_RIGHT)
    assert state.tape_size == 8
    assert state.pointer == 0
    assert state.counter == 0
    assert state.output_log == ""
    assert state.source == "+>"


def test_program_state_rejects_empty_tape():
    with pytest.raises(ValueError):
        ProgramState(sanitize("+"), tape_size=0)


def test_execution_config_validates_values():
    config = ExecutionConfig()
    assert config.tape_size == 65536
    assert config.render_width == 100
    assert config.delay == pytest.approx(0.01)

    with pytest.raises(ValueError):
        ExecutionConfig(tape_size=0)
    with pytest.raises(ValueError):
        ExecutionConfig(render_width=0)
    with pytest.raises(ValueError):
        ExecutionConfig(delay=-1)
