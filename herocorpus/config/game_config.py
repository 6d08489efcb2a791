"""
Game constants for corpus building.
Purpose: keep every map bound, scale, class name and property path used by the two replay passes in one place.
"""

from typing import Dict

# Entity class names (the C++ class of an entity, as reported by the decoder).
ENTITY_CLASSES = {
    'horn_marker': 'CDOTA_Item_Rune',       # first rune spawn marks the horn
    'core': 'CDOTA_BaseNPC_Fort',           # the Ancient
    'roster': 'CDOTA_PlayerResource',
    'tower': 'CDOTA_BaseNPC_Tower',
    'lane_creep': 'CDOTA_BaseNPC_Creep_Lane',
    'jungle_creep': 'CDOTA_BaseNPC_Creep_Neutral',
}

# Property paths read from entities.
PROPERTIES = {
    'team': 'm_iTeamNum',
    'health': 'm_iHealth',
    'max_health': 'm_iMaxHealth',
    'mana': 'm_flMana',
    'max_mana': 'm_flMaxMana',
    'level': 'm_iCurrentLevel',
    'player_id': 'm_iPlayerID',
    'ability_level': 'm_iLevel',
    'cooldown': 'm_fCooldown',
    'name_index': 'CEntityIdentity.m_nameStringableIndex',
    'cell_x': 'CBodyComponentBaseAnimatingOverlay.m_cellX',
    'cell_y': 'CBodyComponentBaseAnimatingOverlay.m_cellY',
    'offset_x': 'CBodyComponentBaseAnimatingOverlay.m_vecX',
    'offset_y': 'CBodyComponentBaseAnimatingOverlay.m_vecY',
    'kills': 'm_vecPlayerTeamData.{slot:04d}.m_iKills',
    'player_name': 'm_vecPlayerData.{slot:04d}.m_iszPlayerName',
    'abilities': 'm_hAbilities',
    'items': 'm_hItems',
}

# Target category codes written in the output label.
TARGET_CATEGORIES: Dict[str, int] = {
    'none': 0,
    'tower': 1,
    'building': 2,
    'self': 3,
    'tree': 4,
    'jungle_creep': 5,
    'lane_creep': 6,
    'enemy_hero': 7,
    'friendly_hero': 8,
}


class GameConfig:
    """Map, time and entity constants for Dota 2 replays (7.02+ map layout)."""

    # The map is 16577 x 16577 with the origin at its center
    MIN_X = -8288.0
    MAX_X = 8288.0
    MIN_Y = -8288.0
    MAX_Y = 8288.0
    CELL_SIZE = 128.0

    TICKS_PER_TIME_UNIT = 108000.0  # one hour at 30 ticks/sec
    MAX_LEVEL = 25.0
    COOLDOWN_SCALE = 360.0
    UNLEARNED_COOLDOWN = 1.0

    HANDLE_MASK = (1 << 14) - 1
    MAX_ABILITY_SLOTS = 32
    MAX_ITEM_SLOTS = 17

    RADIANT = 2
    DIRE = 3
    TEAMS = (RADIANT, DIRE)
    PLAYERS_PER_TEAM = 5
    TOP_PLAYER_COUNT = 3
    MAX_ALLIES = 4
    MAX_ENEMIES = 4

    NAME_TABLE = 'EntityNames'
    HERO_CLASS_PREFIX = 'CDOTA_Unit_Hero'
    ITEM_CLASS_PREFIX = 'CDOTA_Item'
    ABILITY_CLASS_PREFIX = 'CDOTA_Ability'
    BASE_ABILITY_CLASS = 'CDOTABaseAbility'
    ATTRIBUTE_BONUS_CLASS = 'CDOTA_Ability_AttributeBonus'
    HERO_NAME_MARKER = 'dota_hero_'

    # Active ability/item labels: 1 is "nothing used", registry id n is written as n + 1
    NO_ACTION_LABEL = 1

    @classmethod
    def target_code(cls, category: str) -> int:
        """Get the numeric code for a target category.

        Args:
            category: Category name (e.g. 'enemy_hero')

        Returns:
            Integer code written to the corpus

        Raises:
            ValueError: If the category is unknown
        """
        if category not in TARGET_CATEGORIES:
            raise ValueError(
                f"Unknown target category '{category}'. "
                f"Valid options: {sorted(TARGET_CATEGORIES.keys())}"
            )
        return TARGET_CATEGORIES[category]

    @classmethod
    def opposing_team(cls, team: int) -> int:
        """Return the other side (2 <-> 3)."""
        return team ^ 1

    @classmethod
    def team_slots(cls, team: int) -> range:
        """Player slots belonging to a team (Radiant 0-4, Dire 5-9)."""
        first = (team - cls.RADIANT) * cls.PLAYERS_PER_TEAM
        return range(first, first + cls.PLAYERS_PER_TEAM)
