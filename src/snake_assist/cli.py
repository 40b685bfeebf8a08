"""Command-line tools: headless autopilot games and statistics upkeep."""

from __future__ import annotations

import argparse
import json
import logging
import sys

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="snake-assist",
        description="Snake simulation autopilot and statistics tools.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging.",
    )
    sub = parser.add_subparsers(dest="command", help="Available commands.")

    # --- simulate ---
    sim_p = sub.add_parser(
        "simulate", help="Play one game steered by the local move advisor.",
    )
    sim_p.add_argument(
        "--settings", type=str, default=None,
        help="Path to a JSON settings file.",
    )
    sim_p.add_argument("--width", type=int, default=None)
    sim_p.add_argument("--height", type=int, default=None)
    sim_p.add_argument("--seed", type=int, default=None)
    sim_p.add_argument("--max-ticks", type=int, default=10_000)
    sim_p.add_argument(
        "--stats", type=str, default=None,
        help="Statistics file to update with the result.",
    )

    # --- stats ---
    stats_p = sub.add_parser("stats", help="Show or reset a statistics file.")
    stats_p.add_argument("path", help="Path to the statistics file.")
    stats_p.add_argument("--reset", action="store_true")

    return parser


def _run_simulate(args: argparse.Namespace) -> int:
    from dataclasses import replace

    from snake_assist.advisor import MoveAdvisor
    from snake_assist.config import GameSettings, GameStatistics
    from snake_assist.engine import SimulationEngine, SimulationState

    loaded = GameSettings.load(args.settings) if args.settings else GameSettings()
    overrides: dict = {}
    if args.width is not None:
        overrides["grid_width"] = args.width
    if args.height is not None:
        overrides["grid_height"] = args.height
    settings = replace(loaded, **overrides)

    stats = GameStatistics.load(args.stats) if args.stats else None
    engine = SimulationEngine(settings, stats=stats, seed=args.seed)
    advisor = MoveAdvisor()
    engine.start()

    no_safe_move = 0
    while engine.state == SimulationState.PLAYING and engine.ticks < args.max_ticks:
        direction = advisor.suggest_move(engine.snapshot())
        if direction is None:
            # Keep going straight and accept the likely collision.
            no_safe_move += 1
        else:
            engine.set_direction(direction)
        engine.tick()

    summary = {
        "state": engine.state.value,
        "score": engine.score,
        "ticks": engine.ticks,
        "length": len(engine.snake),
        "tick_interval_ms": engine.tick_interval_ms,
        "no_safe_move": no_safe_move,
    }
    print(json.dumps(summary, indent=2))  # noqa: T201

    if stats is not None:
        if engine.state != SimulationState.GAME_OVER:
            logger.info("Tick limit reached; game not recorded.")
        else:
            stats.save(args.stats)

    if args.settings and engine.state == SimulationState.GAME_OVER:
        raised = loaded.with_high_score(engine.score)
        if raised is not loaded:
            raised.save(args.settings)
    return 0


def _run_stats(args: argparse.Namespace) -> int:
    from snake_assist.config import GameStatistics

    stats = GameStatistics.load(args.path)
    if args.reset:
        stats.reset()
        stats.save(args.path)
    print(json.dumps(stats.to_dict(), indent=2))  # noqa: T201
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``snake-assist`` command."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    handlers = {
        "simulate": _run_simulate,
        "stats": _run_stats,
    }
    return handlers[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
