"""
Symbol Registry Module

Incremental name -> id tables kept per hero and team side. Ids are 1-based, assigned the first
time a name is seen and never reassigned, so a corpus row written early in a run stays valid
for the metadata written at shutdown.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


class SymbolTable:
    """A single append-only name -> id namespace."""

    def __init__(self):
        self._ids: Dict[str, int] = {}

    def lookup_or_assign(self, name: str) -> int:
        """
        Get the id of a name, assigning the next id on first sight.

        Args:
            name: Symbol name (e.g. 'item_blink')

        Returns:
            1-based id, stable for the lifetime of the table
        """
        symbol_id = self._ids.get(name)
        if symbol_id is None:
            symbol_id = len(self._ids) + 1
            self._ids[name] = symbol_id
        return symbol_id

    def get(self, name: str) -> Optional[int]:
        return self._ids.get(name)

    def to_table(self) -> List[Tuple[int, str]]:
        """(id, name) pairs in id order."""
        return sorted((symbol_id, name) for name, symbol_id in self._ids.items())

    def __contains__(self, name: str) -> bool:
        return name in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __repr__(self) -> str:
        return f"SymbolTable(size={len(self._ids)})"


@dataclass
class SymbolRegistry:
    """
    The four namespaces tracked for one hero on one team side.

    Attributes:
        held_items: Items seen in the hero's inventory (feature input)
        active_items: Items used as the verb of an action (label output)
        active_abilities: Abilities used as the verb of an action (label output)
        observed_abilities: Ordered names of the hero's own abilities, reporting only
    """
    held_items: SymbolTable = field(default_factory=SymbolTable)
    active_items: SymbolTable = field(default_factory=SymbolTable)
    active_abilities: SymbolTable = field(default_factory=SymbolTable)
    observed_abilities: List[str] = field(default_factory=list)

    def observe_ability(self, ordinal: int, name: str) -> None:
        """Record the name of the hero's ordinal-th ability the first time that ordinal is reached."""
        if len(self.observed_abilities) <= ordinal:
            self.observed_abilities.append(name)
