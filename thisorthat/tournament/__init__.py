"""Tournament bracket engine."""

from .bracket import Bracket, BracketEngine
from .models import Item, Matchup

__all__ = ["Bracket", "BracketEngine", "Item", "Matchup"]
