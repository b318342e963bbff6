import pytest

from tapebf import BANNER_RULE, OutOfBounds, RunReport, UnmatchedBracket, build, run

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def _capture():
    chunks = []
    return chunks, chunks.append


def test_run_prints_banners_around_program_output():
    chunks, sink = _capture()
    state = build(HELLO_WORLD)

    report = run(state, sink)
    text = "".join(chunks)
    count = state.instruction_count

    assert text.startswith(
        f"Running bf program. Instruction amount: {count}\n{BANNER_RULE}\n"
    )
    assert "Hello World!\n" in text
    assert "Execution successful! Took " in text
    assert text.endswith(f"Program stopped at count {count}.\n")

    assert isinstance(report, RunReport)
    assert report.instruction_count == count
    assert report.final_counter == count
    assert report.output == "Hello World!\n"
    assert report.elapsed_us >= 0


def test_run_breaks_line_before_closing_banner():
    chunks, sink = _capture()
    run(build("+" * 65 + "."), sink)

    text = "".join(chunks)
    assert f"A\n{BANNER_RULE}\n" in text


def test_run_of_empty_program_reports_zero():
    chunks, sink = _capture()
    report = run(build("no instructions here"), sink)

    assert report.instruction_count == 0
    assert report.final_counter == 0
    assert report.output == ""
    assert chunks[-1] == "Program stopped at count 0.\n"


def test_run_propagates_first_error_without_summary():
    chunks, sink = _capture()
    state = build("+<<")

    with pytest.raises(OutOfBounds) as excinfo:
        run(state, sink)

    assert excinfo.value.counter == 1
    assert state.tape[0] == 1
    assert not any("Execution successful" in chunk for chunk in chunks)


def test_run_surfaces_unmatched_bracket():
    with pytest.raises(UnmatchedBracket):
        run(build("+[-"), lambda text: None)


def test_program_state_run_method_returns_report():
    chunks, sink = _capture()
    report = build("++.").run(sink)

    assert report.output == "\x02"
    assert report.to_dict() == {
        "instruction_count": 3,
        "final_counter": 3,
        "elapsed_us": report.elapsed_us,
        "output": "\x02",
    }
