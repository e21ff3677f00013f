import json

import pytest

from rmstrokes.__main__ import main

from rmbuild import file_bytes, line_block, point_v2


def write_page(path):
    path.write_bytes(file_bytes(
        line_block((0, 11), (1, 1), [point_v2(0.0, 0.0), point_v2(10.0, 10.0)], tool=4),
    ))
    return path


def test_convert_to_svg(tmp_path, capsys):
    page = write_page(tmp_path / "page.rm")
    main([str(page), "-c", str(tmp_path / "none.toml")])
    assert (tmp_path / "page.svg").exists()
    assert "OK (1 strokes)" in capsys.readouterr().out


def test_convert_to_json(tmp_path):
    page = write_page(tmp_path / "page.rm")
    out = tmp_path / "strokes.json"
    main([str(page), "--json", "-o", str(out), "-c", str(tmp_path / "none.toml")])
    [stroke] = json.loads(out.read_text(encoding="utf-8"))
    assert stroke["tool"] == 4
    assert stroke["color"] == "#000000"
    assert stroke["points"][1] == {"x": 10.0, "y": 10.0, "w": 1.6}


def test_multiple_inputs_to_directory(tmp_path):
    a = write_page(tmp_path / "a.rm")
    b = write_page(tmp_path / "b.rm")
    out = tmp_path / "out"
    main([str(a), str(b), "-o", str(out), "-c", str(tmp_path / "none.toml")])
    assert sorted(p.name for p in out.iterdir()) == ["a.svg", "b.svg"]


def test_analyze(tmp_path, capsys):
    page = write_page(tmp_path / "page.rm")
    main([str(page), "--analyze", "-c", str(tmp_path / "none.toml")])
    out = capsys.readouterr().out
    assert "Strokes: 1" in out
    assert "FINELINER" in out
    assert "BLACK" in out


def test_header_mismatch_exits(tmp_path, capsys):
    bad = tmp_path / "bad.rm"
    bad.write_bytes(b"reMarkable .lines file, version=3          ")
    with pytest.raises(SystemExit) as exc:
        main([str(bad), "-c", str(tmp_path / "none.toml")])
    assert exc.value.code == 1
    assert "FAILED" in capsys.readouterr().err


def test_no_inputs(tmp_path):
    with pytest.raises(SystemExit):
        main([str(tmp_path / "nothing-*.rm"), "-c", str(tmp_path / "none.toml")])
