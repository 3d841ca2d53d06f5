"""
MAUSRITTER ROLL ENGINE
----------------------
All rolls in the generator must route through this file.
Inline logic, simulated rolls, or randoms outside this script are prohibited.

Supported notation (a deliberately small subset):
- NdM    : roll N M-sided dice and sum them ("d6" is shorthand for "1d6")
- NdMkhK : roll N M-sided dice, keep the highest K, sum them

Functions Provided:
- roll(expression): Evaluate one of the expressions above
- roll_d6(): HP and Pips
- roll_stat(): STR, DEX and WIL (3d6 keep highest 2)
- roll_index(length): 1-based roll over a table of the given length

Usage:
  from mausritter_engine import roll, roll_index
  row = table[roll_index(len(table)) - 1]

"""

import random
import re

_NOTATION_RE = re.compile(r"^(?P<count>\d*)d(?P<sides>\d+)(?:kh(?P<keep>\d+))?$", re.IGNORECASE)

STAT_ROLL = "3d6kh2"
STAT_MAX = 12
D6_MAX = 6


class DiceError(ValueError):
    """Raised when a dice expression cannot be evaluated."""


def parse(expression):
    """Split an expression into (count, sides, keep). keep equals count when no 'kh' part."""
    m = _NOTATION_RE.match(str(expression).strip())
    if not m:
        raise DiceError(f"Invalid dice expression: {expression!r}")
    count = int(m.group("count") or 1)
    sides = int(m.group("sides"))
    keep = int(m.group("keep")) if m.group("keep") is not None else count
    if count < 1:
        raise DiceError(f"Dice expression {expression!r} rolls no dice")
    if sides < 1:
        raise DiceError(f"Dice expression {expression!r} has a zero-sided die")
    if not 1 <= keep <= count:
        raise DiceError(f"Dice expression {expression!r} keeps {keep} of {count} dice")
    return count, sides, keep


def roll(expression):
    """Roll a dice expression and return just the integer total."""
    count, sides, keep = parse(expression)
    rolls = [random.randint(1, sides) for _ in range(count)]
    return sum(sorted(rolls, reverse=True)[:keep])


def roll_d6():
    """Rolls 1d6. Used for HP and Pips."""
    return roll("1d6")


def roll_stat():
    """Rolls 3d6 and keeps the highest two. Used for STR, DEX and WIL."""
    return roll(STAT_ROLL)


def roll_index(length):
    """Rolls 1d<length>. An empty table gives '1d0', which is a DiceError."""
    return roll(f"1d{length}")
