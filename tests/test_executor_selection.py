from typing import Dict, Optional

import pytest

from edl_engine.buffer import EdlRegisters, InMemoryFileIO, Pos
from edl_engine.engine import ExecutionError, Executor, ScriptResult
from edl_engine.script import parse


def make_io(files: Optional[Dict[str, str]] = None) -> InMemoryFileIO:
    return InMemoryFileIO(files or {})


def run(
    file_io: InMemoryFileIO, script: str, registers: Optional[EdlRegisters] = None
) -> ScriptResult:
    return Executor(file_io, registers).execute(parse(script))


def selected_text(result: ScriptResult) -> list:
    assert result.final_selection is not None
    return [selected.content for selected in result.final_selection]


def only_error(result: ScriptResult) -> str:
    assert len(result.file_errors) == 1
    return result.file_errors[0].error


def test_narrow_searches_inside_current_selection() -> None:
    file_io = make_io({"a.txt": "alpha beta\ngamma beta\n"})

    result = run(file_io, "file a.txt\nselect 2\nnarrow /beta/")

    assert selected_text(result) == ["beta"]
    assert result.final_selection[0].start == Pos(2, 6)


def test_select_searches_whole_document() -> None:
    file_io = make_io({"a.txt": "alpha beta\ngamma beta\n"})

    result = run(file_io, "file a.txt\nselect 2\nselect /beta/")

    assert selected_text(result) == ["beta", "beta"]


def test_select_one_requires_exactly_one_match() -> None:
    file_io = make_io({"a.txt": "foo foo\n"})

    result = run(file_io, "file a.txt\nselect_one /foo/")

    assert only_error(result) == "select_one: expected 1 match, got 2"


def test_narrow_one_reports_pattern_when_nothing_matches() -> None:
    file_io = make_io({"a.txt": "hello\n"})

    result = run(file_io, "file a.txt\nnarrow_one /nope/i")

    assert only_error(result) == "narrow_one: no matches for pattern /nope/i"


def test_literal_matches_do_not_overlap() -> None:
    file_io = make_io({"a.txt": "aaaa\n"})

    result = run(file_io, "file a.txt\nselect <<L\naa\nL")

    assert [s.range.start for s in result.final_selection] == [0, 2]


def test_empty_literal_pattern_is_rejected() -> None:
    file_io = make_io({"a.txt": "hello world\n"})

    result = run(file_io, "file a.txt\nselect_one <<FIND\nFIND")

    assert "Empty literal pattern is not allowed for select_one" in only_error(result)


def test_select_next_and_prev() -> None:
    file_io = make_io({"a.txt": "x = 1\ny = 2\nx = 3\n"})

    after = run(file_io, "file a.txt\nselect_one /y/\nselect_next /x/")
    before = run(
        file_io, "file a.txt\nselect_one /y/\nselect_next /x/\nselect_prev /x/"
    )

    assert after.final_selection[0].range.start == 12
    assert before.final_selection[0].range.start == 0


def test_select_next_skips_the_current_match() -> None:
    file_io = make_io({"a.txt": "foo bar\n"})

    result = run(file_io, "file a.txt\nselect_one /foo/\nselect_next /o/")

    assert only_error(result) == "select_next: no matches after selection"


def test_select_prev_takes_nearest_match() -> None:
    file_io = make_io({"a.txt": "a1 a2 b a3\n"})

    result = run(file_io, "file a.txt\nselect_one /b/\nselect_prev /a\\d/")

    assert selected_text(result) == ["a2"]


def test_extend_forward_and_back() -> None:
    file_io = make_io({"a.txt": "start middle end\n"})

    forward = run(file_io, "file a.txt\nselect_one /start/\nextend_forward /end/")
    back = run(file_io, "file a.txt\nselect_one /end/\nextend_back /middle/")

    assert selected_text(forward) == ["start middle end"]
    assert selected_text(back) == ["middle end"]


def test_directional_commands_need_single_selection() -> None:
    file_io = make_io({"a.txt": "a a\n"})

    result = run(file_io, "file a.txt\nselect /a/\nextend_back /a/")

    assert only_error(result) == "Expected single selection, got 2"


def test_retain_variants() -> None:
    file_io = make_io({"a.txt": "a1 a2 a3\n"})

    first = run(file_io, "file a.txt\nselect /a\\d/\nretain_first")
    last = run(file_io, "file a.txt\nselect /a\\d/\nretain_last")
    nth = run(file_io, "file a.txt\nselect /a\\d/\nretain_nth 1")
    negative = run(file_io, "file a.txt\nselect /a\\d/\nretain_nth -3")

    assert selected_text(first) == ["a1"]
    assert selected_text(last) == ["a3"]
    assert selected_text(nth) == ["a2"]
    assert selected_text(negative) == ["a1"]


def test_retain_nth_out_of_range() -> None:
    file_io = make_io({"a.txt": "a1 a2 a3\n"})

    result = run(file_io, "file a.txt\nselect /a\\d/\nretain_nth 5")

    assert only_error(result) == "retain_nth: index 5 out of range (3 selections)"


def test_positional_narrow_stays_inside_selection() -> None:
    file_io = make_io({"a.txt": "aaa\nbbb\nccc\n"})

    inside = run(file_io, "file a.txt\nselect_one /bbb/\nnarrow 2")
    outside = run(file_io, "file a.txt\nselect_one /bbb/\nnarrow 3")

    assert selected_text(inside) == ["bbb"]
    assert only_error(outside) == "narrow: no matches for pattern 3"


def test_bof_and_eof_are_points() -> None:
    file_io = make_io({"a.txt": "abc\n"})

    bof = run(file_io, "file a.txt\nselect bof")
    eof = run(file_io, "file a.txt\nselect eof")

    assert bof.final_selection[0].range.start == 0
    assert eof.final_selection[0].range.start == 4
    assert eof.final_selection[0].start == Pos(2, 0)


def test_line_out_of_range_fails_the_file() -> None:
    file_io = make_io({"a.txt": "one\ntwo\n"})

    result = run(file_io, "file a.txt\nselect 9")

    assert only_error(result) == "select: Line 9 out of range (1-3)"


def test_column_past_line_end_fails_the_file() -> None:
    file_io = make_io({"a.txt": "one\ntwo\n"})

    result = run(file_io, "file a.txt\nselect 1:10")

    assert only_error(result).startswith("select: Column 10 out of range")


def test_selection_without_file_aborts_run() -> None:
    with pytest.raises(ExecutionError) as excinfo:
        run(make_io(), "select /x/")

    assert excinfo.value.message == "No file selected. Use 'file' command first."


def test_trace_records_snippets() -> None:
    file_io = make_io({"a.txt": "hello world\nbye world\n"})

    result = run(file_io, "file a.txt\nnarrow /world/")

    assert [entry.command for entry in result.trace] == [
        "file a.txt",
        "narrow /world/",
    ]
    assert result.trace[0].snippet == "switched to a.txt (3 lines)"
    assert result.trace[1].snippet == "world | world"
    assert result.mutations == {}
