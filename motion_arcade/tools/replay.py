from __future__ import annotations

import argparse
import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from motion_arcade.core.adapters.landmarks import LandmarkFrameAdapter
from motion_arcade.core.config.games import GAMES, create_classifier
from motion_arcade.core.config.settings import load_settings
from motion_arcade.core.records import to_jsonable


def _read_records(path: Path) -> Iterator[Any]:
    """Yield frame payloads from a JSON list or a JSON-lines file."""

    text = path.read_text(encoding="utf-8")
    stripped = text.lstrip()
    if stripped.startswith("["):
        yield from json.loads(stripped)
        return
    for line in text.splitlines():
        line = line.strip()
        if line:
            yield json.loads(line)


def run(args):
    logging.basicConfig(level=args.log_level)
    in_path = Path(args.input)
    if not in_path.exists():
        raise SystemExit(f"Cannot open recording {args.input}")
    if args.game not in GAMES:
        raise SystemExit(f"Unknown game {args.game!r}; choose from {', '.join(GAMES)}")

    classifier = create_classifier(args.game, load_settings())
    adapter = LandmarkFrameAdapter(mirror=args.mirror)
    frame_ms = 1000.0 / args.fps

    outputs = []
    for idx, record in enumerate(_read_records(in_path)):
        frame = adapter.adapt(record)
        now_ms = idx * frame_ms
        if isinstance(record, dict) and record.get("timestamp_ms") is not None:
            now_ms = float(record["timestamp_ms"])
        outputs.append(to_jsonable(classifier.update(frame, now_ms=now_ms)))
        if args.max_frames and len(outputs) >= args.max_frames:
            break

    out_path = Path(args.output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(outputs, f, indent=2)
    print(f"Wrote {len(outputs)} {args.game} frame outputs to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Replay a recorded landmark stream through a game classifier")
    parser.add_argument("--game", required=True, help="Game id, e.g. climber or ghost")
    parser.add_argument("--input", required=True, help="JSON list or JSON-lines landmark recording")
    parser.add_argument("--output", required=True, help="Where to save JSON output")
    parser.add_argument("--max-frames", type=int, default=0, help="Limit frames for quick tests")
    parser.add_argument(
        "--mirror", action="store_true", help="Flip x to selfie view (raw camera recordings)"
    )
    parser.add_argument(
        "--fps", type=float, default=30.0, help="Frame rate used when records carry no timestamp"
    )
    parser.add_argument("--log-level", default="WARNING")
    run(parser.parse_args())
