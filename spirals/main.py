from __future__ import annotations

import argparse
import logging
from typing import List, Optional

from spirals import config
from spirals.engine import Engine
from spirals.logging_config import setup_logging


def build_config(argv: Optional[List[str]] = None) -> tuple[config.SpiralConfig, argparse.Namespace]:
    """Defaults, then the YAML file given by --config, then command-line flags."""
    parser = argparse.ArgumentParser(prog="spirals", description="Growing, branching spirals")
    parser.add_argument("--config", type=str, default=None, help="YAML config file")
    parser.add_argument("--layout", choices=("single", "four"), default=None)
    parser.add_argument("--fps", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--width", type=int, default=None)
    parser.add_argument("--height", type=int, default=None)
    parser.add_argument("--debug", action="store_true", help="Log per-frame debug messages")
    parser.add_argument("--autostart", action="store_true", help="Start animating immediately")
    args = parser.parse_args(argv)

    cfg = config.SpiralConfig()
    if args.config:
        try:
            cfg = config.load_config(args.config)
        except (OSError, ValueError) as exc:
            parser.error(f"bad config file {args.config}: {exc}")

    overrides = {
        "layout": args.layout,
        "fps": args.fps,
        "seed": args.seed,
        "view_width": args.width,
        "view_height": args.height,
    }
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if args.debug:
        overrides["debug_messages"] = True
    try:
        cfg = config.config_from_dict(overrides, base=cfg)
    except ValueError as exc:
        parser.error(str(exc))
    return cfg, args


def main(argv: Optional[List[str]] = None) -> None:
    cfg, args = build_config(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    engine = Engine(cfg, autostart=args.autostart)
    engine.run()


if __name__ == "__main__":
    main()
