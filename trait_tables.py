# trait_tables.py
# Loads the Mausritter trait tables (birthsigns, coat, details, backgrounds) from TSV

import csv
import difflib
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Tuple

import pandas as pd

from mausritter_engine import D6_MAX

logger = logging.getLogger("maus_generator.tables")

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "data")

# --- SCHEMAS ---
EXPECTED_SCHEMAS: Dict[str, List[str]] = {
    "birthsigns.tsv": ["Sign", "Disposition"],
    "coat.tsv": ["Color", "Pattern"],
    "details.tsv": ["Detail"],
    "backgrounds.tsv": ["HP", "Pips", "Background", "Item1", "Item2"],
}


class TableError(Exception):
    """Raised when a trait table is missing, malformed or empty."""


class Birthsign(NamedTuple):
    sign: str
    disposition: str


class Background(NamedTuple):
    background: str
    item1: str
    item2: str


@dataclass(frozen=True)
class TraitTables:
    """Every table the generator needs, loaded once and never mutated."""
    birthsigns: Tuple[Birthsign, ...]
    colors: Tuple[str, ...]
    patterns: Tuple[str, ...]
    details: Tuple[str, ...]
    backgrounds: Tuple[Tuple[Background, ...], ...]  # [hp - 1][pips - 1]


# --- Portable, typo-tolerant TSV loader ---
def find_tsv(target: str, data_dir: str = DEFAULT_DATA_DIR, cutoff: float = 0.85) -> str:
    """Fuzzy-match a .tsv file in data_dir. Returns full path or raises."""
    try:
        files = [f for f in os.listdir(data_dir) if f.endswith(".tsv")]
    except OSError as e:
        raise TableError(f"Cannot read data directory '{data_dir}': {e}") from e
    matches = difflib.get_close_matches(target, files, n=1, cutoff=cutoff)
    if not matches:
        raise TableError(f"No TSV resembling '{target}' found in {data_dir}. Searched: {files}")
    if matches[0] != target:
        logger.warning(f"Using {matches[0]} for {target}")
    return os.path.join(data_dir, matches[0])


def validate_schema(filename: str, df: pd.DataFrame) -> None:
    expected = EXPECTED_SCHEMAS.get(filename, [])
    found = list(df.columns)
    missing = [col for col in expected if col not in found]
    extra = [col for col in found if col not in expected]
    if missing:
        raise TableError(f"Schema mismatch in '{filename}': missing columns {missing}")
    if extra:
        logger.warning(f"Schema mismatch in '{filename}': ignoring extra columns {extra}")


def load_table(target: str, data_dir: str = DEFAULT_DATA_DIR) -> pd.DataFrame:
    """Load a TSV table by fuzzy-matched name, every cell as a stripped string."""
    path = find_tsv(target, data_dir)
    logger.debug(f"Loading {path}")
    try:
        df = pd.read_csv(path, sep="\t", dtype=str, encoding="utf-8", quoting=csv.QUOTE_NONE,
                         keep_default_na=False)
    except (OSError, UnicodeDecodeError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
        raise TableError(f"Failed to load {target}: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]
    validate_schema(target, df)
    if df.empty:
        raise TableError(f"{target} has no rows")
    return df.apply(lambda col: col.str.strip())


def _column(df: pd.DataFrame, name: str, target: str) -> Tuple[str, ...]:
    # Blank cells pad the shorter column of a multi-list table
    values = tuple(v for v in df[name].tolist() if v)
    if not values:
        raise TableError(f"{target} has no values in column '{name}'")
    return values


def load_birthsigns(data_dir: str = DEFAULT_DATA_DIR) -> Tuple[Birthsign, ...]:
    df = load_table("birthsigns.tsv", data_dir)
    birthsigns = tuple(Birthsign(row["Sign"], row["Disposition"]) for _, row in df.iterrows())
    for number, birthsign in enumerate(birthsigns, start=1):
        if not birthsign.sign or not birthsign.disposition:
            raise TableError(f"birthsigns.tsv row {number} has a blank Sign or Disposition")
    return birthsigns


def load_coat(data_dir: str = DEFAULT_DATA_DIR) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
    df = load_table("coat.tsv", data_dir)
    return _column(df, "Color", "coat.tsv"), _column(df, "Pattern", "coat.tsv")


def load_details(data_dir: str = DEFAULT_DATA_DIR) -> Tuple[str, ...]:
    df = load_table("details.tsv", data_dir)
    return _column(df, "Detail", "details.tsv")


def load_backgrounds(data_dir: str = DEFAULT_DATA_DIR) -> Tuple[Tuple[Background, ...], ...]:
    """
    Build the HP x Pips background grid. Rows may appear in any order, but every
    cell must be present exactly once and the grid must cover every HP and Pips
    value a d6 can produce.
    """
    df = load_table("backgrounds.tsv", data_dir)
    try:
        hp_values = df["HP"].astype(int)
        pips_values = df["Pips"].astype(int)
    except ValueError as e:
        raise TableError(f"backgrounds.tsv has a non-integer HP or Pips value: {e}") from e

    n_hp, n_pips = int(hp_values.max()), int(pips_values.max())
    if n_hp < D6_MAX or n_pips < D6_MAX:
        raise TableError(
            f"backgrounds.tsv is {n_hp}x{n_pips}; it must cover HP and Pips 1-{D6_MAX}"
        )

    cells: Dict[Tuple[int, int], Background] = {}
    for (_, row), hp, pips in zip(df.iterrows(), hp_values, pips_values):
        if hp < 1 or pips < 1:
            raise TableError(f"backgrounds.tsv has an out-of-range cell HP={hp} Pips={pips}")
        if (hp, pips) in cells:
            raise TableError(f"backgrounds.tsv lists HP={hp} Pips={pips} twice")
        cells[(hp, pips)] = Background(row["Background"], row["Item1"], row["Item2"])

    missing = [(h, p) for h in range(1, n_hp + 1) for p in range(1, n_pips + 1) if (h, p) not in cells]
    if missing:
        raise TableError(f"backgrounds.tsv is missing cells (HP, Pips): {missing}")

    return tuple(
        tuple(cells[(h, p)] for p in range(1, n_pips + 1))
        for h in range(1, n_hp + 1)
    )


def load_trait_tables(data_dir: str = DEFAULT_DATA_DIR) -> TraitTables:
    """Load every trait table from data_dir. Any failure is a TableError."""
    colors, patterns = load_coat(data_dir)
    tables = TraitTables(
        birthsigns=load_birthsigns(data_dir),
        colors=colors,
        patterns=patterns,
        details=load_details(data_dir),
        backgrounds=load_backgrounds(data_dir),
    )
    logger.info(
        f"Loaded trait tables from {data_dir}: {len(tables.birthsigns)} birthsigns, "
        f"{len(tables.colors)} colors, {len(tables.patterns)} patterns, "
        f"{len(tables.details)} details, "
        f"{len(tables.backgrounds)}x{len(tables.backgrounds[0])} backgrounds"
    )
    return tables
