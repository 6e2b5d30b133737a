import json

import pytest

from decompiler.cli import main, parse_args

LISTING = [
    {"opcode": 1, "address": 0x2A, "stack_change": 1, "name": "push", "type": "Load",
     "params": [{"type": "SignedInt", "value": -16}]},
    {"opcode": 2, "address": 0x2F, "stack_change": -2, "name": "jump", "type": "Jump",
     "params": [{"type": "SignedInt", "value": -16}]},
    {"opcode": 3, "address": 0x34, "stack_change": 3, "name": "call", "type": "Call",
     "params": [{"type": "UnsignedInt", "value": 4096}, {"type": "StringText", "value": "main"}]},
]

EXPECTED_TRACE = (
    "0000002A: push -16 (1)\n"
    "0000002F: jump 0xFFFFFFF0 (-2)\n"
    "00000034: call 0x1000, main (3)\n"
)


@pytest.fixture
def listing_file(tmp_path):
    path = tmp_path / "listing.json"
    path.write_text(json.dumps(LISTING), encoding="utf-8")
    return path


def test_text_trace_to_stdout(listing_file, capsys):
    assert main([str(listing_file)]) == 0
    captured = capsys.readouterr()
    assert captured.out == EXPECTED_TRACE


def test_reverse_trace(listing_file, capsys):
    assert main([str(listing_file), "--reverse"]) == 0
    lines = capsys.readouterr().out.splitlines(keepends=True)
    assert lines == EXPECTED_TRACE.splitlines(keepends=True)[::-1]


def test_json_trace(listing_file, capsys):
    assert main([str(listing_file), "--format", "json"]) == 0
    records = json.loads(capsys.readouterr().out)
    assert [record["text"] for record in records] == EXPECTED_TRACE.splitlines()


def test_trace_to_file(listing_file, tmp_path, capsys):
    output = tmp_path / "trace.txt"
    assert main([str(listing_file), "--output", str(output)]) == 0
    assert output.read_text(encoding="utf-8") == EXPECTED_TRACE
    assert capsys.readouterr().out == ""


def test_missing_listing_fails(tmp_path, capsys):
    assert main([str(tmp_path / "missing.json")]) == 1
    assert capsys.readouterr().out == ""


def test_type_mismatch_fails(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps([{"opcode": 0, "address": 0, "name": "x", "type": "Load",
                                 "params": [{"type": "StringText", "value": 5}]}]), encoding="utf-8")
    assert main([str(path)]) == 1


def test_duplicate_addresses_still_render(tmp_path, capsys):
    path = tmp_path / "dupes.json"
    path.write_text(json.dumps(LISTING + LISTING[:1]), encoding="utf-8")
    assert main([str(path)]) == 0
    captured = capsys.readouterr()
    assert captured.out == EXPECTED_TRACE + "0000002A: push -16 (1)\n"
    assert "duplicate instruction addresses" in captured.err
    assert "0x0000002A" in captured.err
    assert "0x0000002F" not in captured.err


def test_unique_addresses_log_no_warning(listing_file, capsys):
    assert main([str(listing_file)]) == 0
    assert "duplicate instruction addresses" not in capsys.readouterr().err


def test_format_default_from_environment(monkeypatch, listing_file):
    monkeypatch.setenv("DECOMPILER_TRACE_FORMAT", "yaml")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    args = parse_args([str(listing_file)])
    assert args.format == "yaml"
    assert args.log_level == "DEBUG"


def test_unwritable_output_fails(listing_file, tmp_path, capsys):
    output = tmp_path / "missing_dir" / "trace.txt"
    assert main([str(listing_file), "--output", str(output)]) == 1
    assert not output.exists()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Failed to write trace" in captured.err
