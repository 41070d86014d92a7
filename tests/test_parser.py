import re

import pytest

from edl_engine.script import (
    BofPattern,
    CutCommand,
    DeleteCommand,
    EofPattern,
    FileCommand,
    LineColPattern,
    LinePattern,
    LiteralPattern,
    MutationText,
    NewFileCommand,
    ParseError,
    PatternCommand,
    RangePattern,
    RegexPattern,
    RetainCommand,
    TextCommand,
    parse,
)
from edl_engine.script.models import describe_command


def single(script: str):
    commands = parse(script)
    assert len(commands) == 1
    return commands[0]


def test_parses_narrow_with_regex() -> None:
    command = single("narrow /hello/")

    assert isinstance(command, PatternCommand)
    assert command.keyword == "narrow"
    assert isinstance(command.pattern, RegexPattern)
    assert command.pattern.regex.pattern == "hello"


def test_regex_flags_drop_g_and_duplicates() -> None:
    command = single("select /hello/gii")

    assert command.pattern.flags == "i"
    assert command.pattern.regex.flags & re.IGNORECASE
    assert command.pattern.describe() == "/hello/i"


def test_sticky_flag_is_accepted_and_dropped() -> None:
    command = single("select /hello/yi")

    assert command.pattern.flags == "i"
    assert command.pattern.describe() == "/hello/i"


def test_escaped_newline_in_regex_then_next_command() -> None:
    commands = parse("narrow /abc\\ndef/\nnarrow /somethingelse/")

    assert [c.pattern.regex.pattern for c in commands] == [
        "abc\\ndef",
        "somethingelse",
    ]
    assert commands[0].pattern.regex.search("abc\ndef")


def test_invalid_regex_is_a_parse_error() -> None:
    with pytest.raises(ParseError, match="Invalid regex"):
        parse("narrow /(unclosed/")


@pytest.mark.parametrize(
    ("word", "expected"),
    [
        ("5", LinePattern(5)),
        ("5:", LinePattern(5)),
        ("3:4", LineColPattern(3, 4)),
        ("bof", BofPattern()),
        ("eof", EofPattern()),
        ("3-7", RangePattern(LinePattern(3), LinePattern(7))),
        ("1:3-2:4", RangePattern(LineColPattern(1, 3), LineColPattern(2, 4))),
        ("bof-55", RangePattern(BofPattern(), LinePattern(55))),
        ("3-eof", RangePattern(LinePattern(3), EofPattern())),
    ],
)
def test_positional_patterns(word: str, expected) -> None:
    assert single(f"select {word}") == PatternCommand("select", expected)


def test_heredoc_literal_pattern() -> None:
    command = single("narrow_one <<END\nfoo bar\nEND")

    assert command == PatternCommand("narrow_one", LiteralPattern("foo bar"))
    assert describe_command(command) == "narrow_one <<HEREDOC"


def test_file_commands_accept_words_and_paths() -> None:
    assert parse("file a.txt\nnewfile `dir/b c.txt`") == [
        FileCommand("a.txt"),
        NewFileCommand("dir/b c.txt"),
    ]


def test_mutations_take_heredoc_or_register() -> None:
    commands = parse(
        "replace <<R\nnew\nR\ninsert_before reg\ninsert_after <<A\nx\nA\n"
        "delete\ncut clip"
    )

    assert commands == [
        TextCommand("replace", MutationText.literal("new")),
        TextCommand("insert_before", MutationText.from_register("reg")),
        TextCommand("insert_after", MutationText.literal("x")),
        DeleteCommand(),
        CutCommand("clip"),
    ]


def test_retain_commands() -> None:
    assert parse("retain_first\nretain_last\nretain_nth -2") == [
        RetainCommand("retain_first"),
        RetainCommand("retain_last"),
        RetainCommand("retain_nth", index=-2),
    ]


def test_retain_nth_needs_integer() -> None:
    with pytest.raises(ParseError, match="Expected number after retain_nth"):
        parse("retain_nth two")


def test_unknown_command() -> None:
    with pytest.raises(ParseError, match="Unknown command: bogus"):
        parse("bogus")


def test_missing_argument_reports_end_of_input() -> None:
    with pytest.raises(ParseError, match="got end of input"):
        parse("narrow")


def test_invalid_pattern_word() -> None:
    with pytest.raises(ParseError, match="Invalid pattern: hello"):
        parse("select hello")


def test_quoted_marker_errors() -> None:
    with pytest.raises(ParseError, match="Unterminated quoted heredoc marker"):
        parse("replace <<'END\nsome text\nEND")
    with pytest.raises(ParseError, match="Invalid heredoc marker"):
        parse("replace <<''\nsome text")


def test_conflicting_delimiter_hint() -> None:
    script = (
        "select_one <<END\nsome text\nEND\n"
        "more content with END on its own line\nEND"
    )

    with pytest.raises(ParseError) as excinfo:
        parse(script)

    message = str(excinfo.value)
    assert "Unknown command: more" in message
    assert '"END"' in message
    assert "Use a unique termination code" in message


def test_no_hint_without_conflict() -> None:
    with pytest.raises(ParseError) as excinfo:
        parse("replace <<END\nsome text")

    assert "Unterminated heredoc" in str(excinfo.value)
    assert "unique termination code" not in str(excinfo.value)
