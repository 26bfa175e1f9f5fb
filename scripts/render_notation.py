#!/usr/bin/env python3
"""Render a notation string to a PNG file."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from tknotation.assets import AssetStore  # noqa: E402
from tknotation.compositor import NotationError  # noqa: E402
from tknotation.pipeline import render_notation_png  # noqa: E402


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("notation", help='Notation source, e.g. \'"Jin", 1+2, f, D "Launcher!"\'')
    parser.add_argument("-o", "--output", type=Path, default=Path("notation.png"), help="PNG file to write.")
    parser.add_argument("--assets", type=Path, help="Asset root directory (defaults to TKN_ASSET_ROOT).")
    parser.add_argument("--no-shorthand", action="store_true", help="Keep qcf/qcb/hcf/hcb as typed.")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("TKN_LOG_LEVEL", "INFO"),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("PIL").setLevel(logging.ERROR)

    args = parse_args(argv)
    store = AssetStore(root=args.assets.resolve()) if args.assets else AssetStore.from_env()
    expand = False if args.no_shorthand else None
    try:
        data = asyncio.run(render_notation_png(args.notation, store, expand_shorthand=expand))
    except NotationError as exc:
        print(f"Render failed: {exc}", file=sys.stderr)
        return 1
    args.output.write_bytes(data)
    print("Wrote", args.output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
