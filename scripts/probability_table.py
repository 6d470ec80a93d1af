"""
Print the pairwise win probability matrix of a dice set, report a non-transitive cycle and save a heatmap.
Usage: python scripts/probability_table.py 2,2,4,4,9,9 1,1,6,6,8,8 3,3,5,5,7,7 --out data/probabilities.png
"""
import os
import argparse

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from nontransitive_dice.core.dice import parse_dice
from nontransitive_dice.core.probability import find_cycle, probability_matrix


def plot_heatmap(matrix, out_path: str) -> None:
    n = len(matrix)
    values = [[float('nan') if p is None else float(p) * 100.0 for p in row] for row in matrix]
    labels = [f"D{i + 1}" for i in range(n)]
    plt.figure(figsize=(max(4, n * 1.1), max(3.5, n)))
    plt.imshow(values, cmap='RdYlGn', vmin=0, vmax=100)
    plt.colorbar(label='Row die win percentage (%)')
    plt.xticks(range(n), labels)
    plt.yticks(range(n), labels)
    for i in range(n):
        for j in range(n):
            text = "-" if matrix[i][j] is None else f"{values[i][j]:.1f}"
            plt.text(j, i, text, ha='center', va='center', fontsize=8)
    plt.title('Winning probabilities')
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def main():
    parser = argparse.ArgumentParser(description='Show win probabilities between dice')
    parser.add_argument('dice', nargs='+', help='Dice as comma-separated faces')
    parser.add_argument('--out', type=str, default=os.path.join('data', 'probabilities.png'), help='Heatmap path')
    args = parser.parse_args()

    dice = parse_dice(args.dice, min_dice=2)
    matrix = probability_matrix(dice)
    for i, row in enumerate(matrix):
        cells = ["   -  " if p is None else f"{str(p):>6}" for p in row]
        print(f"D{i + 1} [{dice[i]}]: " + " ".join(cells))

    cycle = find_cycle(dice)
    if cycle is None:
        print("No non-transitive cycle of three dice.")
    else:
        print("Non-transitive cycle: " + " > ".join(f"D{i + 1}" for i in cycle) + f" > D{cycle[0] + 1}")

    out_dir = os.path.dirname(args.out)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    plot_heatmap(matrix, args.out)
    print(f"Heatmap: {args.out}")


if __name__ == '__main__':
    main()
