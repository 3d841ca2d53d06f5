"""
TRAIT RESOLUTION MODULE
-----------------------
Resolves a mouse's cosmetic traits against the loaded trait tables:
- birthsigns.tsv  (sign + disposition, one linked roll)
- coat.tsv        (color and pattern, two independent rolls)
- details.tsv     (one roll)
- backgrounds.tsv (no roll; looked up by the already-rolled HP and Pips)

Main functions:
- roll_birthsign()
- roll_coat()
- roll_detail()
- get_background()
- resolve_traits()
"""

from mausritter_engine import roll_index
from trait_tables import TableError


def _pick(table):
    # roll_index is 1-based, tables are 0-based
    return table[roll_index(len(table)) - 1]


def roll_birthsign(tables):
    """Roll a random birthsign; the sign and its disposition come as a pair."""
    birthsign = _pick(tables.birthsigns)
    return birthsign.sign, birthsign.disposition


def roll_coat(tables):
    """Roll a coat color and a coat pattern separately, so any color may go with any pattern."""
    color = _pick(tables.colors)
    pattern = _pick(tables.patterns)
    return color, pattern


def roll_detail(tables):
    return _pick(tables.details)


def get_background(tables, hp, pips):
    """Look up the background and two starting items for an HP/Pips pair. No dice involved."""
    grid = tables.backgrounds
    if not (1 <= hp <= len(grid) and 1 <= pips <= len(grid[hp - 1])):
        raise TableError(f"No background for HP={hp} Pips={pips}")
    cell = grid[hp - 1][pips - 1]
    return cell.background, cell.item1, cell.item2


def resolve_traits(maus, tables):
    """Fill in every cosmetic field of an accepted mouse. Called once per character."""
    maus.sign, maus.disposition = roll_birthsign(tables)
    maus.color, maus.pattern = roll_coat(tables)
    maus.detail = roll_detail(tables)
    maus.background, maus.item1, maus.item2 = get_background(tables, maus.hp, maus.pips)
    return maus
