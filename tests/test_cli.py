import json

import pytest

from tensor_decoder.cli.inspect_cli import main

from conftest import build_container, f32


def test_lists_tensors(write_file, capsys):
    path = write_file(build_container([("w", "F32", [2], f32(1.0, 2.0))], metadata={"a": 1}))
    assert main([str(path), "--show-metadata", "--workers", "2"]) == 0
    out = capsys.readouterr().out
    assert "w\tF32\t[2]\t2" in out
    assert json.loads(out[: out.rindex("}") + 1]) == {"a": 1}


def test_partial_failure_exit_code(write_file, capsys):
    content = build_container([("w", "F32", [1], f32(1.0)), ("x", "Q4", [1], b"\x00")])
    assert main([str(write_file(content)), "--no-mmap"]) == 1
    captured = capsys.readouterr()
    assert "w\tF32" in captured.out
    assert "UnsupportedDtypeError" in captured.err


def test_header_failure_exit_code(write_file, capsys):
    assert main([str(write_file(b"\x00\x01"))]) == 2
    assert "TruncatedHeaderError" in capsys.readouterr().err


@pytest.mark.parametrize("workers", ["0", "-1", "abc"])
def test_rejects_invalid_worker_count(write_file, capsys, workers):
    path = write_file(build_container([("w", "F32", [1], f32(1.0))]))
    with pytest.raises(SystemExit) as info:
        main([str(path), "--workers", workers])
    assert info.value.code == 2
    assert "--workers" in capsys.readouterr().err


def test_verbose_flag_counts(write_file):
    path = write_file(build_container([("w", "F32", [1], f32(1.0))]))
    assert main([str(path), "-vv"]) == 0
