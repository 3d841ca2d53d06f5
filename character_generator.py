# character_generator.py
# Rolls Mausritter base stats and rejection-samples until they meet the minimums

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Tuple

from mausritter_engine import roll_stat, roll_d6, STAT_MAX, D6_MAX
from trait_resolution import resolve_traits
from trait_tables import TraitTables

logger = logging.getLogger("maus_generator.generator")

# Exit statuses the CLI uses for unreachable thresholds
EXIT_ATTRIBUTE_TOO_HIGH = 1
EXIT_HP_PIPS_TOO_HIGH = 2


@dataclass
class Maus:
    """A Mausritter character: base stats first, cosmetics once the stats are accepted."""
    strength: int = 0
    dexterity: int = 0
    willpower: int = 0
    hp: int = 0
    pips: int = 0
    sign: str = ""
    disposition: str = ""
    color: str = ""
    pattern: str = ""
    detail: str = ""
    background: str = ""
    item1: str = ""
    item2: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Thresholds:
    min_str: int = 2
    min_dex: int = 2
    min_wil: int = 2
    min_hp: int = 1
    min_pips: int = 1

    def met_by(self, maus: Maus) -> bool:
        return (
            maus.strength >= self.min_str
            and maus.dexterity >= self.min_dex
            and maus.willpower >= self.min_wil
            and maus.hp >= self.min_hp
            and maus.pips >= self.min_pips
        )


# Named threshold presets selectable from the CLI or settings
PROFILES: Dict[str, Thresholds] = {
    "standard": Thresholds(2, 2, 2, 1, 1),
    "heroic": Thresholds(9, 9, 9, 3, 3),
}


class ThresholdError(ValueError):
    """Raised for minimums no roll can satisfy. exit_code is the CLI exit status."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


def validate_thresholds(thresholds: Thresholds) -> None:
    """
    Reject minimums above the highest value the dice can produce. Without this the
    rejection loop would never finish. STR/DEX/WIL are checked first, so a
    configuration breaking both groups reports the attribute failure.
    """
    for name, value in (("STR", thresholds.min_str), ("DEX", thresholds.min_dex), ("WIL", thresholds.min_wil)):
        if value > STAT_MAX:
            raise ThresholdError(
                f"Minimum {name} of {value} is unreachable; {name} is at most {STAT_MAX}",
                EXIT_ATTRIBUTE_TOO_HIGH,
            )
    for name, value in (("HP", thresholds.min_hp), ("Pips", thresholds.min_pips)):
        if value > D6_MAX:
            raise ThresholdError(
                f"Minimum {name} of {value} is unreachable; {name} is at most {D6_MAX}",
                EXIT_HP_PIPS_TOO_HIGH,
            )


def gen_stats(maus: Maus) -> Maus:
    """Reroll all five base stats in place. Previous values are discarded."""
    maus.strength = roll_stat()
    maus.dexterity = roll_stat()
    maus.willpower = roll_stat()
    maus.hp = roll_d6()
    maus.pips = roll_d6()
    return maus


def generate_character(thresholds: Thresholds, tables: TraitTables) -> Tuple[Maus, int]:
    """
    Roll whole characters until one meets every minimum, then give it its traits.
    Returns the mouse and the number of tries it took. Thresholds must have passed
    validate_thresholds; there is no retry cap.
    """
    maus = Maus()
    tries = 0
    while True:
        tries += 1
        gen_stats(maus)
        logger.debug(
            f"Try {tries}: STR {maus.strength} DEX {maus.dexterity} WIL {maus.willpower} "
            f"HP {maus.hp} Pips {maus.pips}"
        )
        if thresholds.met_by(maus):
            break
    logger.info(f"Accepted stats after {tries} tries")
    resolve_traits(maus, tables)
    return maus, tries
