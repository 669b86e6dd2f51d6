"""Autoplay City Dice games and summarize their scores.

Settings come from CITY_* environment variables (see CityRunnerSettings) and
can be overridden on the command line.

Usage:
    uv run python bin/simulate_game.py
    uv run python bin/simulate_game.py --games 500 --seed 42
    uv run python bin/simulate_game.py --strategy random_legal --verbose
"""

from __future__ import annotations

import argparse
import logging
import statistics
import sys

from city.runner.autoplay import AutoPlayerStrategy, play_game
from city.runner.settings import CityRunnerSettings
from shared.logging import setup_logging


def simulate(games: int, seed: int, strategy: AutoPlayerStrategy) -> int:
    """Play `games` games and print a score summary. Returns the number of stuck games."""
    records = [play_game(seed + i, strategy=strategy) for i in range(games)]
    totals = [r.final_score.total for r in records]
    plaza = [r.final_score.plaza_bonus for r in records]
    stuck = sum(1 for r in records if not r.completed)

    print(f"Games:        {games} (strategy={strategy.value}, seeds {seed}-{seed + games - 1})")
    print(f"Total score:  mean {statistics.mean(totals):.2f}, min {min(totals)}, max {max(totals)}")
    if games > 1:
        print(f"              stdev {statistics.stdev(totals):.2f}, median {statistics.median(totals)}")
    print(f"Plaza bonus:  mean {statistics.mean(plaza):.2f}")
    print(f"Stuck games:  {stuck}")
    best = max(records, key=lambda r: r.final_score.total)
    print(f"Best game:    seed {best.seed}, rounds {list(best.final_score.round_scores)}")
    return stuck


def main() -> None:
    settings = CityRunnerSettings()
    parser = argparse.ArgumentParser(description="Autoplay City Dice games")
    parser.add_argument("--games", type=int, default=settings.games, help="number of games to play")
    parser.add_argument("--seed", type=int, default=settings.seed, help="seed of the first game")
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in AutoPlayerStrategy],
        default=settings.strategy.value,
        help="cell picking strategy",
    )
    parser.add_argument("--verbose", action="store_true", help="log every round")
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.WARNING
    setup_logging(log_dir=settings.log_dir, level=level, prefix="simulate")

    if args.games < 1:
        print("--games must be at least 1", file=sys.stderr)
        sys.exit(2)

    simulate(args.games, args.seed, AutoPlayerStrategy(args.strategy))


if __name__ == "__main__":
    main()
