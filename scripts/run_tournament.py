"""
Simulate many matches between two agents over a set of dice and save a win% chart.
The first agent sits in the human seat (it contributes counterpart values), the second commits.
Usage: python scripts/run_tournament.py --seat-a random --seat-b counter --matches 500 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7
"""
import os
import argparse
import logging
from collections import defaultdict
from typing import Any, Dict, List, Sequence

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from nontransitive_dice.agents import AGENT_MAP, create_agent
from nontransitive_dice.core.config import MatchConfig
from nontransitive_dice.core.dice import Die, parse_dice
from nontransitive_dice.core.engine import MatchEngine
from nontransitive_dice.core.state import HUMAN, COMPUTER, TIE

logger = logging.getLogger("run_tournament")

DEFAULT_DICE = ["2,2,4,4,9,9", "1,1,6,6,8,8", "3,3,5,5,7,7"]


def run_matches(seat_a: str, seat_b: str, dice: Sequence[Die], matches: int, cfg: MatchConfig) -> Dict[str, Any]:
    """
    Play `matches` matches and aggregate outcomes.
    Args:
        seat_a (str): AGENT_MAP key for the human seat.
        seat_b (str): AGENT_MAP key for the committing seat.
        dice (list[Die]): Dice on the table.
        matches (int): Number of matches.
        cfg (MatchConfig): Match options.
    Returns:
        dict: Outcome counts plus per-die games and wins.
    """
    outcomes = defaultdict(int)
    die_games = defaultdict(int)
    die_wins = defaultdict(int)
    for _ in range(matches):
        engine = MatchEngine(dice, computer=create_agent(seat_b), human=create_agent(seat_a), config=cfg)
        outcome = engine.play()
        outcomes[outcome] += 1
        state = engine.state
        die_games[state.human_die] += 1
        die_games[state.computer_die] += 1
        if outcome == HUMAN:
            die_wins[state.human_die] += 1
        elif outcome == COMPUTER:
            die_wins[state.computer_die] += 1
    return {"outcomes": dict(outcomes), "die_games": dict(die_games), "die_wins": dict(die_wins)}


def agent_win_rates(outcomes: Dict[Any, int], matches: int) -> Dict[str, float]:
    """
    Convert outcome counts into percentages of all matches played.
    Args:
        outcomes (dict): Counts keyed by HUMAN, COMPUTER and TIE (None for cancelled matches).
        matches (int): Number of matches played.
    Returns:
        dict: Percentage per HUMAN, COMPUTER and TIE; all 0.0 when no match was played.
    """
    if matches <= 0:
        return {HUMAN: 0.0, COMPUTER: 0.0, TIE: 0.0}
    return {k: outcomes.get(k, 0) / matches * 100.0 for k in (HUMAN, COMPUTER, TIE)}


def plot_win_rates(labels: List[str], win_perc: List[float], title: str, out_path: str) -> None:
    width = max(6, len(labels) * 1.2)
    plt.figure(figsize=(width, 4))
    bars = plt.bar(labels, win_perc, color='C0')
    plt.ylabel('Win percentage (%)')
    plt.ylim(0, 100)
    plt.title(title)
    for rect, val in zip(bars, win_perc):
        plt.text(rect.get_x() + rect.get_width() / 2.0, rect.get_height() + 1.0, f"{val:.1f}%", ha='center', va='bottom', fontsize=8)
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description='Simulate matches between two agents over a dice set')
    parser.add_argument('dice', nargs='*', default=DEFAULT_DICE, help='Dice as comma-separated faces')
    parser.add_argument('--seat-a', type=str, default='random', help='Agent in the human seat')
    parser.add_argument('--seat-b', type=str, default='counter', help='Agent in the committing seat')
    parser.add_argument('--matches', type=int, default=200, help='Number of matches to play')
    parser.add_argument('--no-commit-rolls', action='store_true', help='Roll with bare secure draws')
    parser.add_argument('--data-dir', type=str, default='data', help='Directory to save the charts')
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    # per-match results are not interesting here
    logging.getLogger("nontransitive_dice").setLevel(logging.WARNING)

    unknown = [a for a in (args.seat_a, args.seat_b) if a.lower() not in AGENT_MAP]
    if unknown:
        raise SystemExit(f"Unknown agents: {unknown}. Supported: {sorted(AGENT_MAP)}")
    cfg = MatchConfig(commit_rolls=not args.no_commit_rolls)
    dice = parse_dice(args.dice, min_dice=cfg.min_dice)

    results = run_matches(args.seat_a, args.seat_b, dice, args.matches, cfg)
    outcomes = results["outcomes"]
    logger.info("%d matches: %s (A) won %d, %s (B) won %d, ties %d", args.matches,
                args.seat_a, outcomes.get(HUMAN, 0), args.seat_b, outcomes.get(COMPUTER, 0), outcomes.get(TIE, 0))
    rates = agent_win_rates(outcomes, args.matches)
    print(f"{args.seat_a} (A) won {outcomes.get(HUMAN, 0)}/{args.matches} ({rates[HUMAN]:.1f}%)")
    print(f"{args.seat_b} (B) won {outcomes.get(COMPUTER, 0)}/{args.matches} ({rates[COMPUTER]:.1f}%)")
    print(f"Ties: {outcomes.get(TIE, 0)}/{args.matches} ({rates[TIE]:.1f}%)")

    labels = []
    win_perc = []
    for i, d in enumerate(dice):
        games = results["die_games"].get(i, 0)
        wins = results["die_wins"].get(i, 0)
        perc = (wins / games * 100.0) if games > 0 else 0.0
        labels.append(f"D{i + 1}")
        win_perc.append(perc)
        print(f"Dice #{i + 1} [{d}]: played {games}, won {wins} ({perc:.1f}%)")

    os.makedirs(args.data_dir, exist_ok=True)
    chart_png = os.path.join(args.data_dir, 'die_win_rates.png')
    plot_win_rates(labels, win_perc, f'{args.seat_a} vs {args.seat_b}: win% per die', chart_png)
    print(f"Win percentage chart: {chart_png}")


if __name__ == '__main__':
    main()
