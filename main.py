import os
import sys
import json
import random
import argparse
import logging
import logging.config
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mausritter_engine import DiceError
from trait_tables import DEFAULT_DATA_DIR, TableError, load_trait_tables
from character_generator import (
    Maus, PROFILES, Thresholds, ThresholdError, generate_character, validate_thresholds,
)

# --- CONFIGURATION ---
class Settings(BaseSettings):
    data_dir: str = DEFAULT_DATA_DIR
    logging_config: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logging.yaml')
    profile: Literal["standard", "heroic"] = "standard"
    # Per-attribute overrides of the profile minimums
    min_str: Optional[int] = None
    min_dex: Optional[int] = None
    min_wil: Optional[int] = None
    min_hp: Optional[int] = None
    min_pips: Optional[int] = None

    model_config = SettingsConfigDict(env_prefix="MAUS_", env_file=".env", extra="ignore")


def load_yaml_config(filepath: str) -> Optional[Dict[str, Any]]:
    try:
        with open(filepath, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        print(f"Failed to load YAML config '{filepath}': {e}", file=sys.stderr)
        return None


def configure_logging(filepath: str, verbose: bool = False) -> None:
    config = load_yaml_config(filepath)
    if config:
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(level=logging.INFO)
    if verbose:
        logging.getLogger("maus_generator").setLevel(logging.DEBUG)


logger = logging.getLogger("maus_generator")

THRESHOLD_FIELDS = ["min_str", "min_dex", "min_wil", "min_hp", "min_pips"]

ITEMS_FOR_EVERYONE = ["Torches", "Rations", "<+Weapon of Choice>"]

USAGE_EPILOG = (
    "Exit status: 0 success; 1 dice or table failure, or STR/DEX/WIL minimum above 12; "
    "2 HP/Pips minimum above 6. Unparseable flags are also reported with status 2."
)


# --- CLI ---
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Roll a Mausritter character, rerolling until every minimum is met.",
        epilog=USAGE_EPILOG,
    )
    parser.add_argument("--minSTR", "-minSTR", dest="min_str", type=int, help="Minimum STR (2-12)")
    parser.add_argument("--minDEX", "-minDEX", dest="min_dex", type=int, help="Minimum DEX (2-12)")
    parser.add_argument("--minWIL", "-minWIL", dest="min_wil", type=int, help="Minimum WIL (2-12)")
    parser.add_argument("--minHP", "-minHP", dest="min_hp", type=int, help="Minimum HP (1-6)")
    parser.add_argument("--minPIPS", "-minPIPS", dest="min_pips", type=int, help="Minimum Pips (1-6)")
    parser.add_argument("--profile", choices=sorted(PROFILES), help="Preset minimums (default: standard)")
    parser.add_argument("--seed", type=int, help="Seed the dice for a reproducible character")
    parser.add_argument("--data-dir", help="Directory holding the trait tables")
    parser.add_argument("--json", action="store_true", help="Print the character as JSON")
    parser.add_argument("--verbose", action="store_true", help="Log every roll")
    return parser


def resolve_thresholds(args: argparse.Namespace, settings: Settings) -> Thresholds:
    """CLI flag beats environment/.env, which beats the profile default."""
    profile = PROFILES[args.profile or settings.profile]
    values = {}
    for name in THRESHOLD_FIELDS:
        for candidate in (getattr(args, name), getattr(settings, name), getattr(profile, name)):
            if candidate is not None:
                values[name] = candidate
                break
    return Thresholds(**values)


def format_sheet(maus: Maus, tries: int) -> str:
    items = ", ".join([maus.item1, maus.item2] + ITEMS_FOR_EVERYONE)
    lines: List[str] = [
        f"STR: {maus.strength} DEX: {maus.dexterity} WIL: {maus.willpower} "
        f"HP: {maus.hp} Pips: {maus.pips} Tries: {tries}",
        f"Sign: {maus.sign} | Disposition: {maus.disposition}",
        f"Color: {maus.color} | Pattern: {maus.pattern} | Detail: {maus.detail}",
        f"Background: {maus.background}",
        f"Items: {items}",
    ]
    return "\n".join(lines)


def format_json(maus: Maus, tries: int) -> str:
    data = {"tries": tries, **maus.to_dict()}
    return json.dumps(data, ensure_ascii=False, indent=2)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = Settings()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1
    configure_logging(settings.logging_config, args.verbose)

    # Validate before any dice are rolled or tables are read
    thresholds = resolve_thresholds(args, settings)
    logger.debug(f"Minimums: {thresholds}")
    try:
        validate_thresholds(thresholds)
    except ThresholdError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code

    if args.seed is not None:
        random.seed(args.seed)

    try:
        tables = load_trait_tables(args.data_dir or settings.data_dir)
        maus, tries = generate_character(thresholds, tables)
    except TableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except DiceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_json(maus, tries) if args.json else format_sheet(maus, tries))
    return 0


if __name__ == "__main__":
    sys.exit(main())
