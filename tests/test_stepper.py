import io

import pytest

from tapebf import (
    BufferSource,
    ByteSource,
    InvalidInstruction,
    IoFailure,
    OutOfBounds,
    ProgramState,
    StreamSource,
    UnmatchedBracket,
    build,
    execute,
    find_matching_close,
    find_matching_open,
    sanitize,
    step,
)


@pytest.fixture
def emitted():
    return []


def test_move_left_at_zero_is_out_of_bounds(emitted):
    state = build("+<")
    step(state, emitted.append)

    with pytest.raises(OutOfBounds) as excinfo:
        step(state, emitted.append)

    assert excinfo.value.counter == 1
    assert state.pointer == 0
    assert state.counter == 1


def test_move_right_past_last_cell_is_out_of_bounds(emitted):
    state = build(">>", tape_size=2)
    step(state, emitted.append)
    assert state.pointer == 1

    with pytest.raises(OutOfBounds) as excinfo:
        step(state, emitted.append)

    assert excinfo.value.counter == 1
    assert state.pointer == 1


def test_cell_arithmetic_wraps(emitted):
    state = build("+-")
    state.tape[0] = 255
    step(state, emitted.append)
    assert state.tape[0] == 0

    step(state, emitted.append)
    assert state.tape[0] == 255


def test_empty_loop_with_zero_cell_terminates_in_one_step(emitted):
    state = build("[]")

    assert step(state, emitted.append) is False
    assert state.counter == 2
    assert state.finished


def test_zero_cell_skips_loop_body(emitted):
    state = build("[+++]-")
    step(state, emitted.append)

    assert state.counter == 5
    assert state.tape[0] == 0


def test_lone_open_bracket_is_unmatched(emitted):
    state = build("[")

    with pytest.raises(UnmatchedBracket) as excinfo:
        step(state, emitted.append)

    assert excinfo.value.counter == 0


def test_lone_close_bracket_with_nonzero_cell_is_unmatched(emitted):
    state = build("]")
    state.tape[0] = 1

    with pytest.raises(UnmatchedBracket):
        step(state, emitted.append)


def test_lone_close_bracket_with_zero_cell_falls_through(emitted):
    state = build("]")

    assert step(state, emitted.append) is False
    assert state.counter == 1


def test_loop_close_returns_to_matching_open(emitted):
    state = build("++[-]")
    for _ in range(5):
        step(state, emitted.append)

    # '-' left the cell at 1, so ']' jumps back onto '['
    assert state.counter == 2
    assert state.tape[0] == 1

    execute(state, emitted.append)
    assert state.tape[0] == 0
    assert state.counter == 5


def test_output_emits_cell_value(emitted):
    state = build("+++.")
    execute(state, emitted.append)

    assert emitted == ["\x03"]
    assert ord(emitted[0]) == 3
    assert state.output_log == "\x03"


def test_input_then_increment_then_output(emitted):
    state = build(",+.")
    execute(state, emitted.append, BufferSource(bytes([64])))

    assert [ord(ch) for ch in emitted] == [65]
    assert state.tape[0] == 65


def test_input_end_of_stream_is_io_failure(emitted):
    state = build("+,")
    step(state, emitted.append, BufferSource(b""))

    with pytest.raises(IoFailure) as excinfo:
        step(state, emitted.append, BufferSource(b""))

    assert excinfo.value.counter == 1
    assert state.tape[0] == 1


def test_input_read_error_is_io_failure(emitted):
    class BrokenStream:
        def read(self, size):
            raise OSError("device gone")

    state = build(">,")
    step(state, emitted.append)

    with pytest.raises(IoFailure) as excinfo:
        step(state, emitted.append, StreamSource(BrokenStream()))

    assert excinfo.value.counter == 1
    assert "device gone" in str(excinfo.value)


def test_custom_source_read_error_is_io_failure(emitted):
    class ClosedPipe(ByteSource):
        def read_byte(self):
            raise OSError("pipe closed")

    state = build("+,")

    with pytest.raises(IoFailure) as excinfo:
        execute(state, emitted.append, ClosedPipe())

    assert excinfo.value.counter == 1
    assert isinstance(excinfo.value.__cause__, OSError)
    assert "pipe closed" in str(excinfo.value)
    assert state.counter == 1


def test_foreign_symbol_is_invalid_instruction(emitted):
    state = ProgramState([">", "x", "+"])
    step(state, emitted.append)
    assert state.pointer == 1

    with pytest.raises(InvalidInstruction) as excinfo:
        step(state, emitted.append)

    assert excinfo.value.counter == 1


def test_stepping_a_finished_program_is_out_of_bounds(emitted):
    state = build("+")
    assert step(state, emitted.append) is False

    with pytest.raises(OutOfBounds):
        step(state, emitted.append)


def test_step_reports_whether_instructions_remain(emitted):
    state = build("++")

    assert step(state, emitted.append) is True
    assert step(state, emitted.append) is False


def test_nested_loops_multiply(emitted):
    state = build("++[>+++[>+<-]<-]")
    execute(state, emitted.append)

    assert list(state.tape[:3]) == [0, 0, 6]
    assert state.pointer == 0


def test_loop_counter_is_reproducible(emitted):
    program = "+++++[>++<-]>[>+>+<<-]>>[-<+>],."
    runs = []
    for _ in range(2):
        state = build(program, tape_size=16)
        execute(state, emitted.append, BufferSource(b"\x07"))
        runs.append((bytes(state.tape), state.pointer, state.counter))

    assert runs[0] == runs[1]
    assert runs[0][0][:4] == bytes([0, 0, 20, 7])


def test_bracket_scans_track_depth():
    instructions = sanitize("[[][]]+]")

    assert find_matching_close(instructions, 0) == 5
    assert find_matching_close(instructions, 1) == 2
    assert find_matching_open(instructions, 5) == 0
    assert find_matching_open(instructions, 4) == 3

    with pytest.raises(UnmatchedBracket) as excinfo:
        find_matching_open(instructions, 7)
    assert excinfo.value.counter == 7


def test_program_state_step_method_delegates(emitted):
    state = build("+.")
    state.step(emitted.append)
    state.step(emitted.append)

    assert emitted == ["\x01"]


def test_default_input_source_reads_stdin(monkeypatch, emitted):
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(b"Z")))
    state = build(",")
    step(state, emitted.append)

    assert state.tape[0] == ord("Z")
