import json

import pytest

import bf_run

HELLO_A = "++++++++[>++++++++<-]>+."


def _main(args, tmp_path):
    out = tmp_path / "out.bin"
    status = bf_run.main(list(args) + ["--output", str(out)])
    return status, out.read_bytes()


def test_runs_inline_code(tmp_path):
    status, out = _main(["-c", HELLO_A], tmp_path)
    assert status == 0
    assert out == b"A"


def test_runs_program_file_with_input_file(tmp_path):
    prog = tmp_path / "cat.bf"
    prog.write_text("read a byte , and echo it .")
    data = tmp_path / "in.txt"
    data.write_bytes(b"A")
    status, out = _main([str(prog), "--input", str(data)], tmp_path)
    assert status == 0
    assert out == b"A"


def test_writes_to_stdout_by_default(capsys):
    assert bf_run.main(["-c", HELLO_A, "--newline"]) == 0
    assert capsys.readouterr().out == "A\n"


def test_underflow_exit_status(tmp_path, capsys):
    status, out = _main(["-c", "-", "--cell-size", "8", "--cell-wrapping", "off"], tmp_path)
    assert status != 0
    assert out == b""
    err = capsys.readouterr().err
    assert "CellUnderflow" in err
    assert "instruction 0" in err


def test_unmatched_bracket(tmp_path, capsys):
    status, _ = _main(["-c", "["], tmp_path)
    assert status == 1
    assert "UnmatchedBracket" in capsys.readouterr().err


def test_short_flags(tmp_path, capsys):
    status, _ = _main(["-c", ">>", "-ts", "2", "-dt", "off", "-tw", "off"], tmp_path)
    assert status == 1
    assert "TapeOutOfBounds" in capsys.readouterr().err
    status, _ = _main(["-c", ">>", "-ts", "2", "-dt", "off", "-tw", "on"], tmp_path)
    assert status == 0


def test_invalid_cell_size(tmp_path, capsys):
    assert bf_run.main(["-c", "+", "-cs", "65", "-o", str(tmp_path / "o")]) == 1
    assert "InvalidConfiguration" in capsys.readouterr().err


def test_invalid_switch_value(tmp_path, capsys):
    assert bf_run.main(["-c", "+", "-cw", "sometimes", "-o", str(tmp_path / "o")]) == 1
    assert "InvalidConfiguration" in capsys.readouterr().err


def test_missing_program_file(tmp_path, capsys):
    assert bf_run.main([str(tmp_path / "missing.bf")]) == 1
    assert "IOFailure" in capsys.readouterr().err


def test_no_program_given(capsys):
    assert bf_run.main([]) == 1
    assert "IOFailure" in capsys.readouterr().err


def test_file_and_code_together_is_usage_error(tmp_path):
    prog = tmp_path / "p.bf"
    prog.write_text("+")
    with pytest.raises(SystemExit) as exc_info:
        bf_run.main([str(prog), "-c", "+"])
    assert exc_info.value.code == 2


def test_debug_flag_prints_debug_lines(tmp_path, capsys):
    status, out = _main(["-c", "+#.", "--debug"], tmp_path)
    assert status == 0
    assert out == b"\x01"
    assert "Debug: Pointer: 1, Tape Pointer: 0, Cell Value: 1, Tape: [1]" in capsys.readouterr().err


def test_debug_symbol_ignored_without_flag(tmp_path, capsys):
    status, _ = _main(["-c", "+#."], tmp_path)
    assert status == 0
    assert "Debug:" not in capsys.readouterr().err


def test_eof_and_step_limit_flags(tmp_path, capsys):
    data = tmp_path / "empty"
    data.write_bytes(b"")
    status, out = _main(["-c", "+,.", "--eof", "zero", "-i", str(data)], tmp_path)
    assert (status, out) == (0, b"\x00")
    status, _ = _main(["-c", "+[]", "--step-limit", "10"], tmp_path)
    assert status == 1
    assert "StepLimitExceeded" in capsys.readouterr().err


def test_stats_report(tmp_path, capsys):
    status, _ = _main(["-c", HELLO_A, "--stats"], tmp_path)
    assert status == 0
    err = capsys.readouterr().err
    assert "Brainfuck Interpreter Statistics:" in err
    assert "Executable Code Size   : 24 characters" in err


def test_stats_json(tmp_path):
    stats_path = tmp_path / "stats.json"
    status, _ = _main(["-c", "+++", "--stats-json", str(stats_path)], tmp_path)
    assert status == 0
    data = json.loads(stats_path.read_text())
    assert data["exit_status"] == 0
    assert data["error"] is None
    assert data["statistics"]["commands_executed"] == 3
    assert data["config"]["cell_bits"] == 8


def test_config_file_and_env(tmp_path, monkeypatch):
    monkeypatch.setenv("BF_CELL_WRAPPING", "off")
    status, _ = _main(["-c", "-"], tmp_path)
    assert status == 1

    cfg = tmp_path / "vm.yaml"
    cfg.write_text("cell_wrapping: on\n")
    status, out = _main(["--code=-.", "--config", str(cfg)], tmp_path)
    assert (status, out) == (0, b"\xff")

    status, _ = _main(["--code=-.", "--config", str(cfg), "-cw", "off"], tmp_path)
    assert status == 1


def test_trace_flag(tmp_path, capsys):
    status, _ = _main(["-c", "+", "--trace"], tmp_path)
    assert status == 0
    assert "Step 1: Execute '+' at position 0" in capsys.readouterr().err


def test_unwritable_stats_json_is_an_io_failure(tmp_path, capsys):
    stats_path = tmp_path / "missing" / "stats.json"
    status, out = _main(["-c", HELLO_A, "--stats-json", str(stats_path)], tmp_path)
    assert status == 1
    assert out == b"A"
    assert "Error: IOFailure" in capsys.readouterr().err
