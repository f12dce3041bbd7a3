"""Tests for the CLI entry point."""

import json

import pytest
from typer.testing import CliRunner

from poseforge import __version__
from poseforge.cli import app
from poseforge.codec import encode, load_animation, save_animation
from poseforge.models import Keyframe, PoseAnimation, Vector3

runner = CliRunner()


@pytest.fixture
def neck_file(tmp_path, neck_animation):
    return save_animation(neck_animation, tmp_path / "neck.json")


def test_version_flag():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == f"poseforge {__version__}"


def test_new_writes_starter(tmp_path):
    target = tmp_path / "starter.json"
    result = runner.invoke(app, ["new", str(target), "--length", "4"])
    assert result.exit_code == 0
    assert "Created 4s animation" in result.output
    anim = load_animation(target)
    assert anim.length == 4.0
    assert len(anim.keyframes) == 1


def test_new_defaults_to_exports_dir(_isolated_home):
    result = runner.invoke(app, ["new"])
    assert result.exit_code == 0
    anim = load_animation(_isolated_home / ".poseforge" / "exports" / "animation.json")
    assert anim.length == 15.0


def test_info(neck_file):
    result = runner.invoke(app, ["info", str(neck_file)])
    assert result.exit_code == 0
    assert "Length: 10s" in result.output
    assert "Keyframes: 2" in result.output
    assert "Neck (rotation)" in result.output


def test_info_missing_file(tmp_path):
    result = runner.invoke(app, ["info", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_sample_single_time(neck_file):
    result = runner.invoke(app, ["sample", str(neck_file), "--time", "5"])
    assert result.exit_code == 0
    line = json.loads(result.output.strip())
    assert line["time"] == 5.0
    assert line["pose"]["Neck"]["y"] == pytest.approx(0.5)


def test_sample_steps(neck_file):
    result = runner.invoke(app, ["sample", str(neck_file), "--step", "5"])
    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.output.strip().splitlines()]
    assert [line["time"] for line in lines] == [0.0, 5.0, 10.0]
    assert lines[-1]["pose"]["Neck"]["y"] == pytest.approx(1.0)


def test_encode_decode(tmp_path, neck_file, neck_animation):
    result = runner.invoke(app, ["encode", str(neck_file)])
    assert result.exit_code == 0
    payload = result.output.strip()
    assert payload == encode(neck_animation)

    out = tmp_path / "decoded.json"
    result = runner.invoke(app, ["decode", payload, "-o", str(out)])
    assert result.exit_code == 0
    assert load_animation(out) == neck_animation


def test_decode_corrupt_payload(tmp_path):
    result = runner.invoke(app, ["decode", "***", "-o", str(tmp_path / "x.json")])
    assert result.exit_code == 1
    assert "Error" in result.output
    assert not (tmp_path / "x.json").exists()


def test_share_and_open_link(tmp_path, neck_file, neck_animation):
    result = runner.invoke(app, ["share", str(neck_file), "--base-url", "https://poses.example/"])
    assert result.exit_code == 0
    url = result.output.strip()
    assert url.startswith("https://poses.example/?animation=")

    out = tmp_path / "opened.json"
    result = runner.invoke(app, ["open-link", url, "-o", str(out)])
    assert result.exit_code == 0
    assert load_animation(out) == neck_animation


def test_open_link_length_only(tmp_path):
    out = tmp_path / "short.json"
    result = runner.invoke(app, ["open-link", "http://h/?length=3", "-o", str(out)])
    assert result.exit_code == 0
    assert load_animation(out).length == 3.0


def test_open_link_corrupt(tmp_path):
    result = runner.invoke(app, ["open-link", "http://h/?animation=bm90IGpzb24=", "-o", str(tmp_path)])
    assert result.exit_code == 1
    assert "Error" in result.output


def test_sample_reports_held_shape_mismatch(tmp_path):
    anim = PoseAnimation(
        length=2,
        keyframes=[
            Keyframe(time=0, pose={"Jaw": 0.5}),
            Keyframe(time=2, pose={"Jaw": Vector3(x=1, y=1, z=1)}),
        ],
    )
    path = save_animation(anim, tmp_path / "jaw.json")
    result = runner.invoke(app, ["sample", str(path), "--step", "1"])
    assert result.exit_code == 0
    assert "Warning: held 2 shape mismatch(es) in Jaw" in result.output
    poses = [json.loads(line) for line in result.output.splitlines() if line.startswith("{")]
    assert [p["pose"]["Jaw"] for p in poses[:2]] == [0.5, 0.5]
