"""Tests for the signpose-demo command line driver."""

import json

import pytest

from signpose.cli import load_signs, main


SIGNS = [
    {"gloss": "HELLO", "duration": 100, "handshape": {"dominant": "flat-hand"},
     "location": {"x": 0.3, "y": 0.4, "z": 0.3}},
    {"gloss": "YES", "duration": 100, "handshape": {"dominant": "s-hand"},
     "movement": {"type": "linear", "direction": {"x": 0, "y": -1, "z": 0}, "repetitions": 2}},
]


@pytest.fixture
def signs_file(tmp_path):
    path = tmp_path / "signs.json"
    path.write_text(json.dumps(SIGNS))
    return path


def test_load_signs_list_and_single(tmp_path, signs_file):
    assert [s.gloss for s in load_signs(signs_file)] == ["HELLO", "YES"]
    single = tmp_path / "one.json"
    single.write_text(json.dumps(SIGNS[0]))
    assert [s.gloss for s in load_signs(single)] == ["HELLO"]


def test_main_writes_json_lines(signs_file, capsys):
    assert main([str(signs_file), "--fps", "20", "--settle", "0.1"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    frames = [json.loads(line) for line in lines]
    # 0.2 s of signs plus 0.1 s settle at 20 fps
    assert len(frames) == 6
    assert frames[0]["gloss"] == "HELLO"
    assert frames[-1]["gloss"] is None
    assert [f["frame"] for f in frames] == list(range(6))
    assert len(frames[0]["pose"]["rightHand"]["fingerCurls"]) == 4


def test_main_missing_file(tmp_path):
    assert main([str(tmp_path / "nope.json")]) == 1


def test_main_bad_preset_rejected(signs_file):
    with pytest.raises(SystemExit):
        main([str(signs_file), "--preset", "jelly"])


def test_main_bad_fps_rejected(signs_file):
    with pytest.raises(SystemExit):
        main([str(signs_file), "--fps", "0"])


def test_main_null_handshape_plays(tmp_path, capsys):
    path = tmp_path / "null.json"
    path.write_text(json.dumps({"gloss": "HI", "duration": 100, "handshape": None}))
    assert main([str(path), "--fps", "20", "--settle", "0"]) == 0
    assert capsys.readouterr().out.strip()


def test_main_malformed_section_reports_error(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"gloss": "HI", "location": [1, 2, 3]}))
    assert main([str(path)]) == 1


def test_main_arm_ik_adds_arm_bones(signs_file, capsys):
    assert main([str(signs_file), "--fps", "20", "--settle", "0", "--arm-ik"]) == 0
    frames = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
    assert {"RightArm", "RightForeArm"} <= set(frames[0]["pose"]["bones"])


def test_main_without_arm_ik_has_no_arm_bones(signs_file, capsys):
    assert main([str(signs_file), "--fps", "20", "--settle", "0"]) == 0
    frames = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]
    assert "RightArm" not in frames[0]["pose"]["bones"]
