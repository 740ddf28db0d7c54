#!/usr/bin/env python3
"""
Blockwell command-line interface.
Runs headless games for smoke testing and benchmarking the engine.
"""

import argparse
import logging
import sys
import time
from typing import Optional

import numpy as np

from .config import GameConfig, load_config
from .events import Command
from .session import GameSession


def _build_config(args) -> GameConfig:
    config = load_config(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.seed = args.seed
    return config


def play_headless(session: GameSession, frames: int, rng: np.random.Generator,
                  report_every: int = 0) -> int:
    """Drive a session with a random-placement bot. Returns frames played."""
    session.new_game()
    last_piece = None
    pieces = 0

    for frame in range(frames):
        if session.game_over:
            return frame

        piece = session.active_piece
        if piece is not None and piece is not last_piece:
            last_piece = piece
            pieces += 1

            for _ in range(int(rng.integers(0, 4))):
                session.handle_command(Command.ROTATE_CW)
            shift = int(rng.integers(-5, 6))
            move = Command.MOVE_LEFT if shift < 0 else Command.MOVE_RIGHT
            for _ in range(abs(shift)):
                session.handle_command(move)
            session.handle_command(Command.HARD_DROP)

            if report_every and pieces % report_every == 0:
                print(f"\nPiece {pieces}")
                print(str(session))
                print("-" * 30)

        session.step()

    return frames


def demo_game(args):
    """Run a headless demo game."""
    print("Blockwell Demo")
    print("=" * 50)

    config = _build_config(args)
    session = GameSession(config)
    rng = np.random.default_rng(config.seed)

    start_time = time.time()
    frames = play_headless(session, args.frames, rng, report_every=args.report_every)
    duration = time.time() - start_time

    print("\n" + "=" * 50)
    print("GAME OVER" if session.game_over else "FRAME LIMIT REACHED")
    print("=" * 50)
    print(f"Final Score: {session.score}")
    print(f"Lines Cleared: {session.lines_cleared}")
    print(f"Level Reached: {session.level}")
    print(f"Game Time: {session.game_time}")
    print(f"Frames: {frames}")
    print(f"Wall Time: {duration:.2f} seconds")


def benchmark(args):
    """Measure simulated frames per second."""
    print("Blockwell Performance Benchmark")
    print("=" * 50)

    config = _build_config(args)
    rng = np.random.default_rng(config.seed)
    total_frames = 0

    start_time = time.time()
    for _ in range(args.games):
        session = GameSession(config)
        total_frames += play_headless(session, args.frames, rng)
    elapsed = time.time() - start_time

    print(f"Games: {args.games}")
    print(f"Frames: {total_frames} in {elapsed:.3f}s ({total_frames / max(elapsed, 1e-9):.0f} frames/s)")


def main(argv: Optional[list] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Blockwell: a falling-block puzzle engine")
    parser.add_argument('--log-level', default='WARNING', help='Logging level (DEBUG, INFO, ...)')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Demo command
    demo_parser = subparsers.add_parser('demo', help='Run a headless demo game')
    demo_parser.add_argument('--frames', type=int, default=36000, help='Maximum frames to simulate')
    demo_parser.add_argument('--seed', type=int, default=None, help='Bag and bot random seed')
    demo_parser.add_argument('--config', default=None, help='Path to a JSON game config')
    demo_parser.add_argument('--report-every', type=int, default=25, help='Print the board every N pieces')

    # Benchmark command
    benchmark_parser = subparsers.add_parser('benchmark', help='Run performance benchmarks')
    benchmark_parser.add_argument('--games', type=int, default=10, help='Number of games')
    benchmark_parser.add_argument('--frames', type=int, default=36000, help='Frame cap per game')
    benchmark_parser.add_argument('--seed', type=int, default=None, help='Random seed')
    benchmark_parser.add_argument('--config', default=None, help='Path to a JSON game config')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.command == 'demo':
        demo_game(args)
    elif args.command == 'benchmark':
        benchmark(args)
    else:
        parser.print_help()
        print("\nFor a quick demo, run: blockwell demo")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
