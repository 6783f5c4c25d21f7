import json
import os
import subprocess
import sys
from pathlib import Path


def _run_replay(tmp_path: Path, *args):
    env = os.environ.copy()
    env["PYTHONPATH"] = env.get("PYTHONPATH", ".") + os.pathsep + str(Path(__file__).resolve().parents[1])
    env["MA_CONFIG"] = str(tmp_path / "missing.yml")
    cmd = [sys.executable, "-m", "motion_arcade.tools.replay", *args]
    return subprocess.run(cmd, env=env, capture_output=True, text=True)


def test_replay_cli_jsonl_with_gaps(tmp_path: Path, make_payload):
    rec_path = tmp_path / "rec.jsonl"
    out_path = tmp_path / "out" / "lane.json"
    lines = [
        json.dumps(make_payload(0, nose=(0.5, 0.2))),
        "null",
        json.dumps(make_payload(66, nose=(0.1, 0.2))),
        json.dumps(make_payload(99, nose=(0.9, 0.2))),
    ]
    rec_path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    result = _run_replay(
        tmp_path,
        "--game",
        "train",
        "--input",
        str(rec_path),
        "--output",
        str(out_path),
        "--max-frames",
        "3",
    )
    assert result.returncode == 0, result.stderr
    assert "Wrote 3" in result.stdout

    data = json.loads(out_path.read_text())
    assert [d["lane"] for d in data] == ["center", "center", "left"]
    assert data[1]["confidence"] == 0.0


def test_replay_cli_json_list_mirrored(tmp_path: Path, make_payload):
    rec_path = tmp_path / "rec.json"
    out_path = tmp_path / "lane.json"
    rec_path.write_text(json.dumps([make_payload(0, nose=(0.1, 0.2))]), encoding="utf-8")

    result = _run_replay(
        tmp_path, "--game", "train", "--input", str(rec_path), "--output", str(out_path), "--mirror"
    )
    assert result.returncode == 0, result.stderr
    assert json.loads(out_path.read_text())[0]["lane"] == "right"


def test_replay_cli_unknown_game(tmp_path: Path):
    rec_path = tmp_path / "rec.json"
    rec_path.write_text("[]", encoding="utf-8")
    result = _run_replay(
        tmp_path, "--game", "pong", "--input", str(rec_path), "--output", str(tmp_path / "o.json")
    )
    assert result.returncode != 0
    assert "Unknown game" in result.stderr
