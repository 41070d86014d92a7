import json

import pytest

from edl_engine.cli import main


def write_script(tmp_path, body: str):
    script = tmp_path / "edit.edl"
    script.write_text(body, encoding="utf-8")
    return script


def test_cli_applies_script_and_prints_report(
    tmp_path, capsys: pytest.CaptureFixture[str]
) -> None:
    target = tmp_path / "a.txt"
    target.write_text("hello world\n", encoding="utf-8")
    script = write_script(
        tmp_path, f"file `{target}`\nselect_one /world/\nreplace <<R\nthere\nR\n"
    )

    status = main([str(script)])

    assert status == 0
    assert target.read_text(encoding="utf-8") == "hello there\n"
    assert "1 replacements" in capsys.readouterr().out


def test_cli_persists_registers_between_runs(tmp_path) -> None:
    target = tmp_path / "a.txt"
    target.write_text("hello world", encoding="utf-8")
    registers = tmp_path / "registers.json"
    failing = write_script(
        tmp_path, f"file `{target}`\nselect_one /nope/\nreplace <<R\nfriend\nR\n"
    )

    assert main([str(failing), "--registers", str(registers)]) == 1
    saved = json.loads(registers.read_text(encoding="utf-8"))
    assert saved == {"registers": {"_saved_1": "friend"}, "next_saved_id": 2}

    retry = write_script(
        tmp_path, f"file `{target}`\nselect_one /world/\nreplace _saved_1\n"
    )
    assert main([str(retry), "--registers", str(registers)]) == 0
    assert target.read_text(encoding="utf-8") == "hello friend"


def test_cli_json_output_for_parse_error(
    tmp_path, capsys: pytest.CaptureFixture[str]
) -> None:
    script = write_script(tmp_path, "bogus\n")

    status = main([str(script), "--json"])

    assert status == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload == {
        "status": "error",
        "error": "Parse error: Unknown command: bogus",
    }
