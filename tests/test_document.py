import pytest

from edl_engine.buffer import Document, DocumentRangeError, Pos, Range


def make_document() -> Document:
    return Document("line one\nline two\nline three\n")


def test_trailing_newline_adds_empty_last_line() -> None:
    document = make_document()

    assert document.line_count == 4
    assert document.line_range(4) == Range(29, 29)


def test_line_range_excludes_newline() -> None:
    document = make_document()

    assert document.get_text(document.line_range(1)) == "line one"
    assert document.get_text(document.line_range(3)) == "line three"


def test_offset_and_position_conversion() -> None:
    document = make_document()

    assert document.pos_to_offset(Pos(2, 5)) == 14
    assert document.offset_to_pos(14) == Pos(2, 5)
    assert document.offset_to_pos(0) == Pos(1, 0)
    assert document.offset_to_pos(9) == Pos(2, 0)
    assert document.offset_to_pos(len(document)) == Pos(4, 0)


def test_line_out_of_range_raises() -> None:
    document = make_document()

    with pytest.raises(DocumentRangeError) as excinfo:
        document.line_range(5)

    assert str(excinfo.value) == "Line 5 out of range (1-4)"
    with pytest.raises(DocumentRangeError):
        document.pos_to_offset(Pos(0, 0))


def test_splice_rebuilds_line_index() -> None:
    document = make_document()

    document.splice(Range(0, 8), "first\nsecond")

    assert document.content == "first\nsecond\nline two\nline three\n"
    assert document.line_count == 5
    assert document.get_text(document.line_range(3)) == "line two"


def test_empty_document_has_one_line() -> None:
    document = Document("")

    assert document.line_count == 1
    assert document.full_range() == Range(0, 0)


def test_range_rejects_inverted_bounds() -> None:
    with pytest.raises(ValueError):
        Range(5, 2)
