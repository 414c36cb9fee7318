"""CSV export of episode rewards and the learned weight table."""

import csv
import io
import os
from pathlib import Path
from typing import Iterable, List, Tuple, Union

import numpy as np

from ..domain.qlearning import PolicyTable
from ..domain.types import ACTIONS, EpisodeRecord

PathLike = Union[str, Path]

EPISODES_FILENAME = "episodes.csv"
WEIGHTS_FILENAME = "weights.csv"

EPISODE_HEADER = ["episode", "total_reward"]
WEIGHT_HEADER = ["percept"] + [action.label for action in ACTIONS]


def _format_float(value: float) -> str:
    # repr round-trips exactly, so identical runs give identical files
    return repr(float(value))


def render_episodes(records: Iterable[EpisodeRecord]) -> str:
    """CSV text with one `episode,total_reward` row per record."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(EPISODE_HEADER)
    for record in records:
        writer.writerow([record.number, _format_float(record.total_reward)])
    return buffer.getvalue()


def render_weights(table: PolicyTable) -> str:
    """CSV text with one row per percept and one column per action."""
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(WEIGHT_HEADER)
    for percept, row in enumerate(table.as_array()):
        writer.writerow([percept] + [_format_float(w) for w in row])
    return buffer.getvalue()


def read_episodes(path: PathLike) -> List[Tuple[int, float]]:
    """Load `(episode, total_reward)` pairs written by write_report."""
    with open(path, newline="") as f:
        reader = csv.reader(f)
        header = next(reader)
        if header != EPISODE_HEADER:
            raise ValueError(f"Unexpected episodes header: {header}")
        return [(int(row[0]), float(row[1])) for row in reader]


def read_weights(path: PathLike) -> np.ndarray:
    """Load a weight table written by write_report as a (percepts, actions) array."""
    with open(path, newline="") as f:
        reader = csv.reader(f)
        header = next(reader)
        if header != WEIGHT_HEADER:
            raise ValueError(f"Unexpected weights header: {header}")
        rows = [[float(value) for value in row[1:]] for row in reader]
    return np.array(rows, dtype=np.float64).reshape(-1, len(ACTIONS))


def write_report(records: Iterable[EpisodeRecord], table: PolicyTable,
                 output_dir: PathLike = ".") -> Tuple[Path, Path]:
    """Write both CSV files into `output_dir` and return their paths.

    Both files are staged next to their targets and moved into place
    together; if either cannot be written, neither is left behind.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    contents = [
        (output_dir / EPISODES_FILENAME, render_episodes(records)),
        (output_dir / WEIGHTS_FILENAME, render_weights(table)),
    ]

    staged: List[Path] = []
    placed: List[Path] = []
    try:
        for path, text in contents:
            tmp_path = path.with_name(path.name + ".tmp")
            staged.append(tmp_path)
            with open(tmp_path, "w", newline="") as f:
                f.write(text)
        for (path, _), tmp_path in zip(contents, staged):
            os.replace(tmp_path, path)
            placed.append(path)
    except OSError:
        for path in staged + placed:
            path.unlink(missing_ok=True)
        raise

    return contents[0][0], contents[1][0]
