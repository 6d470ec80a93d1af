import argparse
import logging
import sys
from typing import List, Optional, Sequence

from nontransitive_dice.core.config import MatchConfig
from nontransitive_dice.core.dice import Die, DiceSpecError, parse_dice
from nontransitive_dice.core.engine import MatchEngine, GameCancelled, IllegalChoiceError
from nontransitive_dice.core.errors import FairRandomError
from nontransitive_dice.core.probability import probability_matrix
from nontransitive_dice.core.state import HUMAN, COMPUTER, TIE
from nontransitive_dice.agents.base import InputSource
from nontransitive_dice.agents import AGENT_MAP, create_agent


class ConsoleInputSource(InputSource):
    """
    Input source for the human at the terminal.
    Shows the opponent's commitment before asking for a number and offers help and exit in the dice menu.
    """
    def __init__(self, input_fn=input):
        self.input_fn = input_fn

    def choose_number(self, range_: int, commitment: bytes) -> int:
        print(f"I selected a random value in the range 0..{range_ - 1} (HMAC={commitment.hex().upper()}).")
        while True:
            answer = self.input_fn(f"Add your number modulo {range_} (0-{range_ - 1}, e to exit): ").strip()
            if answer.lower() == "e":
                raise GameCancelled("player exited")
            if answer.isdecimal() and int(answer) < range_:
                return int(answer)
            print("Invalid input, try again.")

    def choose_die(self, dice: Sequence[Die], taken: Optional[int]) -> int:
        while True:
            print("Select dice:")
            for i, d in enumerate(dice):
                if i == taken:
                    print(f" {i + 1}) Dice #{i + 1} (taken)")
                else:
                    print(f" {i + 1}) Dice #{i + 1}: {d}")
            print(" h) Help")
            print(" e) Exit")
            answer = self.input_fn("Choice: ").strip().lower()
            if answer == "e":
                raise GameCancelled("player exited")
            if answer == "h":
                print_probability_table(dice)
                continue
            if answer.isdecimal():
                idx = int(answer) - 1
                if 0 <= idx < len(dice) and idx != taken:
                    return idx
            print("Invalid choice.")


def format_probability_table(dice: Sequence[Die]) -> List[str]:
    """
    Render the win probability matrix as text rows, percentages with one decimal.
    Args:
        dice (list[Die]): Dice to compare.
    Returns:
        list[str]: Lines of the table, header first.
    """
    matrix = probability_matrix(dice)
    lines = ["Winning probabilities (%) of the row die against the column die"]
    lines.append("      " + "".join(f" D{j + 1}".ljust(8) for j in range(len(dice))))
    for i, row in enumerate(matrix):
        cells = []
        for p in row:
            cells.append("   -    " if p is None else f"{float(p) * 100:6.1f}% ")
        lines.append(f"D{i + 1}".ljust(4) + "| " + "".join(cells))
    return lines


def print_probability_table(dice: Sequence[Die]):
    print()
    for line in format_probability_table(dice):
        print(line)
    print()


def print_event(event):
    """
    Print an engine event for the human player.
    Args:
        event (dict): Event emitted by MatchEngine.
    """
    t = event["type"]
    if t == "Revealed":
        print(f"My number is {event['secret_value']} (KEY={event['key']}).")
        print(f"The fair number generation result is {event['secret_value']} + {event['counterpart_value']} "
              f"= {event['result']} (mod {event['range']}).")
        if not event["verified"]:
            print("WARNING: the revealed key and number do not match the HMAC shown earlier!")
    elif t == "FirstPickDecided":
        print("You select dice first." if event["first"] == HUMAN else "I select dice first.")
    elif t == "DieSelected":
        who = "You" if event["player"] == HUMAN else "I"
        print(f"{who} chose dice #{event['die'] + 1}: [{','.join(str(f) for f in event['faces'])}]")
    elif t == "Rolled":
        who = "Your" if event["player"] == HUMAN else "My"
        print(f"{who} roll result is {event['face']}.")
    elif t == "MatchEnded":
        outcome = event["outcome"]
        if outcome == HUMAN:
            print(f"You win ({event['human_roll']} > {event['computer_roll']})!")
        elif outcome == COMPUTER:
            print(f"I win ({event['computer_roll']} > {event['human_roll']})!")
        elif outcome == TIE:
            print(f"It's a tie ({event['human_roll']} = {event['computer_roll']})!")
    elif t == "MatchCancelled":
        print("Goodbye.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Play non-transitive dice against the computer with provably fair draws")
    parser.add_argument("dice", nargs="*", help="Dice as comma-separated faces, e.g. 2,2,4,4,9,9")
    parser.add_argument("--agent", type=str, default="random", help=f"Computer opponent, one of {sorted(AGENT_MAP)}")
    parser.add_argument("--no-commit-rolls", action="store_true", help="Roll dice with a bare secure draw instead of commit-reveal")
    parser.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each of your numbers")
    parser.add_argument("--verbose", action="store_true", help="Log protocol steps")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    cfg = MatchConfig(commit_rolls=not args.no_commit_rolls, counterpart_timeout=args.timeout)
    try:
        dice = parse_dice(args.dice, min_dice=cfg.min_dice)
    except DiceSpecError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        computer = create_agent(args.agent)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1

    print("Welcome to the non-transitive dice game!")
    for i, d in enumerate(dice):
        print(f"Dice #{i + 1}: {d}")
    print("\nLet's determine who makes the first move.")
    engine = MatchEngine(dice, computer=computer, human=ConsoleInputSource(), config=cfg, on_event=print_event)
    try:
        engine.play()
    except KeyboardInterrupt:
        engine.cancel("interrupted")
        return 130
    except (FairRandomError, IllegalChoiceError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
