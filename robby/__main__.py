"""Command line entry point: train Robby and export the results."""

import argparse
import sys
from typing import List, Optional

from .app.controller import RLController
from .domain.types import RLConfig


def build_parser() -> argparse.ArgumentParser:
    defaults = RLConfig()
    parser = argparse.ArgumentParser(
        prog="robby",
        description="Train a can-collecting robot with tabular Q-learning",
    )
    parser.add_argument("--grid-dimensions", type=int, default=defaults.grid_dimensions,
                        help="Length of each side of the square grid")
    parser.add_argument("--initial-can-count", type=int, default=defaults.initial_can_count,
                        help="Number of cans to populate the grid with")
    parser.add_argument("--n-episodes", type=int, default=defaults.n_episodes,
                        help="Number of episodes")
    parser.add_argument("--m-steps", type=int, default=defaults.m_steps,
                        help="Number of steps in each episode")
    parser.add_argument("--eta", type=float, default=defaults.eta, help="Learning rate")
    parser.add_argument("--gamma", type=float, default=defaults.gamma, help="Discount factor")
    parser.add_argument("--epsilon", type=float, default=defaults.epsilon,
                        help="Exploration rate (initial rate when decaying)")
    parser.add_argument("--epsilon-decay", type=float, default=defaults.epsilon_decay,
                        help="Per-episode exploration decay factor (1.0 keeps it constant)")
    parser.add_argument("--epsilon-min", type=float, default=defaults.epsilon_min,
                        help="Lower bound for a decaying exploration rate")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible runs")
    parser.add_argument("--neighborhood", choices=["von_neumann", "moore"],
                        default=defaults.neighborhood, help="Cells the robot can see")
    parser.add_argument("--output-dir", default=".", help="Directory for episodes.csv and weights.csv")
    parser.add_argument("--progress-interval", type=int, default=defaults.progress_interval,
                        help="Episodes between progress lines (0 disables them)")
    parser.add_argument("--quiet", action="store_true", help="Only report errors")
    parser.add_argument("--show-grid", action="store_true",
                        help="Print a sample grid before training")
    return parser


def config_from_args(args: argparse.Namespace) -> RLConfig:
    return RLConfig(
        grid_dimensions=args.grid_dimensions,
        initial_can_count=args.initial_can_count,
        n_episodes=args.n_episodes,
        m_steps=args.m_steps,
        eta=args.eta,
        gamma=args.gamma,
        epsilon=args.epsilon,
        epsilon_decay=args.epsilon_decay,
        epsilon_min=args.epsilon_min,
        seed=args.seed,
        neighborhood=args.neighborhood,
        progress_interval=args.progress_interval,
    )


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    verbose = not args.quiet

    config = config_from_args(args)
    try:
        controller = RLController(config, verbose=verbose)
    except ValueError as e:
        parser.error(str(e))

    if verbose:
        print("Robby Can-Collecting Training")
        print("=" * 50)
        print(f"Grid: {config.grid_dimensions}x{config.grid_dimensions}, cans: {config.initial_can_count}")
        print(f"Episodes: {config.n_episodes} x {config.m_steps} steps")
        print(f"Eta: {config.eta}, Gamma: {config.gamma}, Epsilon: {config.epsilon}")
        if config.seed is not None:
            print(f"Seed: {config.seed}")

    if args.show_grid:
        print(controller.sample_grid())

    try:
        result = controller.train()
    except KeyboardInterrupt:
        print("\nTraining interrupted by user", file=sys.stderr)
        return 1

    try:
        episodes_path, weights_path = controller.save(args.output_dir)
    except OSError as e:
        print(f"Failed to write results: {e}", file=sys.stderr)
        return 1

    if verbose:
        print("\nTraining completed!")
        print(f"   Total episodes: {result.total_episodes}")
        print(f"   Average reward: {result.average_reward:.2f}")
        print(f"   First 10% mean reward: {result.early_mean_reward():.2f}")
        print(f"   Last 10% mean reward: {result.late_mean_reward():.2f}")
        print(f"   Final epsilon: {result.final_epsilon:.3f}")
        print(f"   Episodes written to: {episodes_path}")
        print(f"   Weights written to: {weights_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
