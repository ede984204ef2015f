"""Common utility functions."""

from __future__ import annotations

import json
import re
import time
from pathlib import Path
from typing import Callable, Optional

import yaml


SIZE_UNITS = {
    'M': 1024 ** 2,
    'G': 1024 ** 3,
}


def parse_size(size_str: str) -> Optional[int]:
    """Parse a size string ('10G', '512M') to bytes.

    Only whole numbers with a G or M suffix are understood; anything else
    returns None so the caller can keep its current value.
    """
    match = re.match(r'^(\d+)([GM])$', size_str.strip())
    if not match:
        return None
    return int(match.group(1)) * SIZE_UNITS[match.group(2)]


def format_duration(seconds: float) -> str:
    """Format an elapsed time with millisecond precision."""
    return f"{seconds:.3f}s"


def save_yaml(path: str | Path, data: dict) -> None:
    """Save data to a YAML file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def save_json(path: str | Path, data: dict) -> None:
    """Save data to an indented JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def save_document(path: str | Path, data: dict) -> None:
    """Save data as YAML for .yaml/.yml paths, JSON otherwise."""
    if Path(path).suffix.lower() in ('.yaml', '.yml'):
        save_yaml(path, data)
    else:
        save_json(path, data)


class Timer:
    """Context manager measuring elapsed time on a monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.perf_counter):
        self._clock = clock
        self.start_time: float | None = None
        self.end_time: float | None = None

    def __enter__(self):
        self.start_time = self._clock()
        return self

    def __exit__(self, *args):
        self.end_time = self._clock()

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None:
            return 0
        end = self.end_time if self.end_time is not None else self._clock()
        return end - self.start_time

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_seconds * 1000
