"""
Pytest configuration and shared fixtures.

The bundled tables under data/ are used for end-to-end checks; small
hand-written tables in a temporary directory are used wherever a test
needs to know exactly which row a die value maps to.
"""

import os
import sys

import pytest

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from trait_tables import load_trait_tables  # noqa: E402

SETTINGS_ENV = [
    "MAUS_DATA_DIR", "MAUS_LOGGING_CONFIG", "MAUS_PROFILE",
    "MAUS_MIN_STR", "MAUS_MIN_DEX", "MAUS_MIN_WIL", "MAUS_MIN_HP", "MAUS_MIN_PIPS",
]


def write_tsv(directory, filename, header, rows):
    """Write a tab-separated table with a header row."""
    path = os.path.join(str(directory), filename)
    with open(path, "w", encoding="utf-8") as f:
        f.write("\t".join(header) + "\n")
        for row in rows:
            f.write("\t".join(str(cell) for cell in row) + "\n")
    return path


def background_rows(size=6):
    return [
        (hp, pips, f"Background {hp}-{pips}", f"Item {hp}-{pips}a", f"Item {hp}-{pips}b")
        for hp in range(1, size + 1)
        for pips in range(1, size + 1)
    ]


@pytest.fixture(autouse=True)
def clean_settings_env(monkeypatch):
    """Keep MAUS_* variables from the developer's shell out of the tests."""
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def bundled_tables():
    """The tables shipped in data/."""
    return load_trait_tables(os.path.join(ROOT, "data"))


@pytest.fixture
def small_data_dir(tmp_path):
    """
    A data directory with a 4-entry birthsign table, 3 colors against 2 patterns,
    2 details and a generated 6x6 background grid.
    """
    write_tsv(tmp_path, "birthsigns.tsv", ["Sign", "Disposition"], [
        ("Star", "Brave / Reckless"),
        ("Wheel", "Industrious / Unimaginative"),
        ("Acorn", "Inquisitive / Stubborn"),
        ("Storm", "Generous / Wrathful"),
    ])
    write_tsv(tmp_path, "coat.tsv", ["Color", "Pattern"], [
        ("Chocolate", "Solid"),
        ("Black", "Brindle"),
        ("White", ""),
    ])
    write_tsv(tmp_path, "details.tsv", ["Detail"], [("Scarred body",), ("Curly tail",)])
    write_tsv(tmp_path, "backgrounds.tsv", ["HP", "Pips", "Background", "Item1", "Item2"], background_rows())
    return tmp_path


@pytest.fixture
def small_tables(small_data_dir):
    return load_trait_tables(str(small_data_dir))


@pytest.fixture
def fixed_dice(monkeypatch):
    """
    Make every die come up with the queued values, in order.
    Usage: fixed_dice(1, 4, 6)
    """
    import mausritter_engine

    def _queue(*values):
        queue = list(values)

        def fake_randint(low, high):
            value = queue.pop(0)
            assert low <= value <= high, f"die value {value} outside {low}..{high}"
            return value

        monkeypatch.setattr(mausritter_engine.random, "randint", fake_randint)
        return queue

    return _queue
