"""
Roll many dice, report how often each face came up and save a frequency chart.
Usage: python scripts/face_frequency.py --sides 6 --rolls 60000 --data-dir data
"""
import argparse
import os
import random
from collections import Counter
from typing import Dict

try:
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    _PLOTTING_AVAILABLE = True
except Exception:
    plt = None
    _PLOTTING_AVAILABLE = False

from dice_sack.core.dice import Die


def face_frequencies(sides: int, rolls: int, seed=None) -> Dict[int, float]:
    """
    Roll one unlocked die `rolls` times and return the share of each face.
    Every face should approach 1/sides.
    Raises:
        ValueError: If rolls < 1.
    """
    if rolls < 1:
        raise ValueError(f"rolls must be at least 1, got {rolls}")
    rng = random.Random(seed)
    die = Die(sides, rng=rng)
    counts = Counter()
    for _ in range(rolls):
        die.roll()
        counts[die.value] += 1
    return {face: counts[face] / rolls for face in range(1, sides + 1)}


def plot_frequencies(freqs: Dict[int, float], sides: int, out_path: str):
    if not _PLOTTING_AVAILABLE:
        print(f"matplotlib not available; skipping plot generation: {out_path}")
        return
    faces = list(freqs.keys())
    shares = [freqs[f] * 100.0 for f in faces]
    plt.figure(figsize=(max(6, int(sides * 0.6)), 4))
    plt.bar([str(f) for f in faces], shares, color='C0')
    plt.axhline(100.0 / sides, color='C1', linestyle='--', label='expected')
    plt.ylabel('Share of rolls (%)')
    plt.title(f'Face frequency: d{sides}')
    plt.legend()
    plt.tight_layout()
    plt.savefig(out_path)
    plt.close()


def positive_int(text: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}")
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Check that dice faces come up uniformly')
    parser.add_argument('--sides', type=positive_int, default=6, help='Sides per die')
    parser.add_argument('--rolls', type=positive_int, default=60000, help='Number of rolls')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed')
    parser.add_argument('--data-dir', type=str, default='data', help='Directory to save the chart')
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    freqs = face_frequencies(args.sides, args.rolls, args.seed)
    expected = 1.0 / args.sides
    print(f"{args.rolls} rolls of a d{args.sides} (expected share {expected:.4f})")
    for face, share in freqs.items():
        print(f"  {face:>3}: {share:.4f}  ({share - expected:+.4f})")

    os.makedirs(args.data_dir, exist_ok=True)
    plot_frequencies(freqs, args.sides, os.path.join(args.data_dir, f"face_frequency_d{args.sides}.png"))


if __name__ == "__main__":
    main()
