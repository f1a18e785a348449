"""
Command line entry point.

    python -m ai_copter train --generations 50 --seed 1
    python -m ai_copter train --headless
    python -m ai_copter play
"""

import argparse
import os

import numpy as np

from .config import GameConfig
from .evolution import Evolution, SimpleReporter

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "Config_Copter.txt")


def positive_int(text):
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {text}")
    return value


def load_config(path):
    if path is None:
        if os.path.exists(DEFAULT_CONFIG):
            return GameConfig.from_file(DEFAULT_CONFIG)
        return GameConfig()
    return GameConfig.from_file(path)


def train(config, generations, seed, headless, watch):
    """Train a population; optionally watch it fly and then watch the champion."""
    if seed is None:
        seed = config.training.seed
    rng = np.random.default_rng(seed)

    evolution = Evolution(config, rng)
    evolution.add_reporter(SimpleReporter(evolution.history))

    win = None
    on_tick = None
    if not headless:
        from . import display
        win = display.open_window(config)
        on_tick = display.TrainingViewer(win, evolution)

    winner = evolution.run(generations, on_tick=on_tick)
    if winner is None:
        print("\n[INFO] No generation was run")
        return None

    # Training summary
    print("\n================ TRAINING SUMMARY ================")
    print(f"Generations run      : {len(evolution.stats)}")
    print(f"Best fitness (winner): {winner.fitness:.2f}")
    print(f"Layer sizes          : {config.genetic.layer_sizes}")
    print(f"Genome length        : {len(winner.genome)}")
    print("=================================================\n")

    if watch and not headless:
        from . import display
        display.watch_winner(config, evolution.champion_control(), rng, win)
    return winner


def main(argv=None):
    parser = argparse.ArgumentParser(prog="ai-copter", description="Copter cave flying with neuroevolution")
    parser.add_argument("--config", "-c", default=None, help="INI config file (default: Config_Copter.txt)")
    sub = parser.add_subparsers(dest="command", required=True)

    train_parser = sub.add_parser("train", help="evolve network pilots")
    train_parser.add_argument("--generations", "-g", type=positive_int, default=50,
                              help="maximum number of generations (default: 50)")
    train_parser.add_argument("--seed", "-s", type=int, default=None, help="random seed")
    train_parser.add_argument("--headless", action="store_true", help="train without a window")
    train_parser.add_argument("--no-watch", dest="watch", action="store_false",
                              help="do not replay the champion after training")

    play_parser = sub.add_parser("play", help="fly the copter yourself")
    play_parser.add_argument("--seed", "-s", type=int, default=None, help="random seed")

    args = parser.parse_args(argv)
    config = load_config(args.config)

    if args.command == "train":
        train(config, args.generations, args.seed, args.headless, args.watch)
    elif args.command == "play":
        from . import display
        display.play(config, np.random.default_rng(args.seed))


if __name__ == "__main__":
    main()
