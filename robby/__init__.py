"""Robby - a robot that learns to collect cans.

This package implements a tabular Q-Learning agent that learns to pick up cans
on a square grid, exporting per-episode rewards and the learned weight table.
"""

__version__ = "1.0.0"
