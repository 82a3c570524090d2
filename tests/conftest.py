"""Shared fixtures for the SkyMesh test-suite."""

from pathlib import Path
import sys
from typing import List, Sequence, TypeVar

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from models.places import PlaceCatalog, load_place_catalog

T = TypeVar("T")


class FixedChoice:
    """Randomness stub that returns items at a scripted sequence of indices."""

    def __init__(self, indices: Sequence[int]) -> None:
        self.indices: List[int] = list(indices)
        self.calls: List[Sequence] = []

    def choice(self, seq: Sequence[T]) -> T:
        self.calls.append(list(seq))
        index = self.indices.pop(0) if self.indices else 0
        return seq[index]


@pytest.fixture()
def catalog() -> PlaceCatalog:
    return load_place_catalog()


@pytest.fixture()
def fixed_choice() -> FixedChoice:
    return FixedChoice([0])
