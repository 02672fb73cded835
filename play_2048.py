"""
Console 2048
Plays the game from the keyboard and optionally logs every move to JSON.
"""

import argparse
import json
import logging
import random
from typing import Callable, List, Optional

from game_2048 import Difficulty, Direction, GridEngine, Outcome, display


logger = logging.getLogger(__name__)

QUIT_KEY = 'Q'

InputFn = Callable[[str], str]


def _read(input_fn: Optional[InputFn], prompt: str) -> Optional[str]:
    """Read a line, returning None once input is exhausted."""
    try:
        return (input_fn or input)(prompt)
    except EOFError:
        return None


def prompt_seed(input_fn: Optional[InputFn] = None) -> Optional[int]:
    """Ask for an integer seed until one is given."""
    while True:
        line = _read(input_fn, "Enter random seed: \n")
        if line is None:
            return None
        try:
            return int(line.strip())
        except ValueError:
            print("Error: Invalid seed.")


def prompt_difficulty(input_fn: Optional[InputFn] = None) -> Optional[Difficulty]:
    """Ask for E, M or H until one is given."""
    while True:
        line = _read(input_fn, "Choose game mode: Easy (E), Medium (M), or Hard (H): \n")
        if line is None:
            return None
        try:
            mode = Difficulty.from_key(line)
        except ValueError:
            print("Error: Invalid mode.")
            continue
        print()
        return mode


def _write_log(log_file: str, game_log: List[dict]) -> bool:
    """Rewrite the transcript, returning False if the file can't be written."""
    try:
        with open(log_file, 'w') as f:
            json.dump(game_log, f, indent=2)
    except OSError as e:
        print(f"Error: Could not write game log: {e}")
        logger.warning("game log disabled, writing %s failed: %s", log_file, e)
        return False
    return True


def play_game(
    difficulty: Difficulty,
    seed: int,
    input_fn: Optional[InputFn] = None,
    log_file: Optional[str] = None,
) -> Outcome:
    """
    Play one game of 2048 on the console.

    Args:
        difficulty: Difficulty mode fixing the target and spawn odds
        seed: Seed for the game's random generator
        input_fn: Source of player commands
        log_file: Optional path of a JSON transcript, rewritten after each move

    Returns:
        WON or LOST, or IN_PROGRESS if the player quit
    """
    engine = GridEngine(difficulty, rng=random.Random(seed))
    engine.start()

    game_log = [{
        "game_state": engine.snapshot(),
        "action": "INITIAL",
        "mode": difficulty.name.lower(),
    }]
    move_count = 0

    while True:
        print(display(engine.grid))

        outcome = engine.outcome()
        if outcome == Outcome.WON:
            print("You win!")
            break
        if outcome == Outcome.LOST:
            print("You lose.")
            break

        line = _read(input_fn, "Enter move: U, D, L, or R. Q to quit: \n\n")
        if line is None or line.strip().upper() == QUIT_KEY:
            logger.info("player quit after %d moves", move_count)
            break

        try:
            direction = Direction.from_key(line)
        except ValueError:
            print("Error: Invalid move.")
            continue

        changed = engine.slide(direction)
        if changed:
            engine.spawn_random_tile()
        move_count += 1

        game_log.append({
            "game_state": engine.snapshot(),
            "action": direction.name,
            "changed": changed,
        })
        if log_file and not _write_log(log_file, game_log):
            log_file = None

    if log_file:
        game_log.append({
            "outcome": outcome.value,
            "total_moves": move_count,
            "mode": difficulty.name.lower(),
            "seed": seed,
        })
        if _write_log(log_file, game_log):
            logger.info("game log saved to %s", log_file)

    return outcome


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Play 2048 on the console')
    parser.add_argument('--seed', type=int, default=None, help='Random seed (prompted for if omitted)')
    parser.add_argument('--mode', type=str, default=None, choices=['E', 'M', 'H', 'e', 'm', 'h'],
                        help='Difficulty: Easy (E), Medium (M) or Hard (H) (prompted for if omitted)')
    parser.add_argument('--log_file', type=str, default=None, help='Write a JSON transcript of the game')
    parser.add_argument('--log_level', type=str, default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Diagnostics level (stderr)')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    seed = args.seed if args.seed is not None else prompt_seed()
    if seed is None:
        return 0

    difficulty = Difficulty.from_key(args.mode) if args.mode else prompt_difficulty()
    if difficulty is None:
        return 0

    play_game(difficulty, seed, log_file=args.log_file)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
