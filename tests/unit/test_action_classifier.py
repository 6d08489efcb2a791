"""
Unit tests for herocorpus.parsing.action_classifier module.

Tests for target categories, ability/item naming and discard rules.
"""

import pytest

from herocorpus.config.game_config import GameConfig
from herocorpus.parsing.action_classifier import (
    LANE_CREEP_WITHOUT_ABILITY,
    UNRESOLVED_ABILITY,
    ActionLabel,
    Discarded,
    classify_action,
    classify_ability,
)
from herocorpus.parsing.normalization import normalize_position
from herocorpus.parsing.replay_source import UnitOrder

AXE = 10
LINA = 20
AXE_POSITION = normalize_position(-1000.0, 500.0)
LINA_POSITION = normalize_position(2000.0, -3000.0)


@pytest.fixture
def source(two_hero_match):
    """A played-back match with Axe, Lina, a second Radiant hero and assorted units."""
    two_hero_match.hero(11, 'npc_dota_hero_crystal_maiden', team=GameConfig.RADIANT, player_id=1,
                        position=(100.0, 100.0))
    two_hero_match.unit(60, 'CDOTA_BaseNPC_Creep_Lane', position=(-500.0, -500.0), team=GameConfig.DIRE)
    two_hero_match.unit(61, 'CDOTA_BaseNPC_Creep_Neutral', position=(300.0, 1200.0))
    two_hero_match.unit(62, 'CDOTA_BaseNPC_Tower', position=(4000.0, 4000.0), team=GameConfig.DIRE)
    two_hero_match.unit(63, 'CDOTA_BaseNPC_Barracks', position=(6000.0, 6000.0), team=GameConfig.DIRE)
    source = two_hero_match.source()
    source.start()
    return source


def classify(source, target=0, ability=0, position=None):
    order = UnitOrder(units=(AXE,), target_index=target, ability_index=ability, position=position)
    return classify_action(source, AXE, GameConfig.RADIANT, order, AXE_POSITION, 'axe')


@pytest.mark.unit
class TestTargetCategories:
    """Test the target code and move position of targeted orders."""

    def test_enemy_hero(self, source):
        label = classify(source, target=LINA)

        assert label.target == GameConfig.target_code('enemy_hero')
        assert label.is_attack == 1.0
        assert label.move == pytest.approx(LINA_POSITION)

    def test_friendly_hero(self, source):
        label = classify(source, target=11)

        assert label.target == GameConfig.target_code('friendly_hero')
        assert label.move == pytest.approx(normalize_position(100.0, 100.0))

    def test_self_target_uses_own_position(self, source):
        label = classify(source, target=AXE)

        assert label.target == GameConfig.target_code('self')
        assert label.move == AXE_POSITION

    def test_missing_target_is_a_tree(self, source):
        label = classify(source, target=999)

        assert label.target == GameConfig.target_code('tree')
        assert label.move == AXE_POSITION

    def test_jungle_creep(self, source):
        assert classify(source, target=61).target == GameConfig.target_code('jungle_creep')

    def test_tower(self, source):
        label = classify(source, target=62)

        assert label.target == GameConfig.target_code('tower')
        assert label.move == pytest.approx(normalize_position(4000.0, 4000.0))

    def test_other_units_are_buildings(self, source):
        assert classify(source, target=63).target == GameConfig.target_code('building')

    def test_lane_creep_without_ability_is_discarded(self, source):
        assert classify(source, target=60) == Discarded(LANE_CREEP_WITHOUT_ABILITY)

    def test_lane_creep_with_ability_is_kept(self, source):
        label = classify(source, target=60, ability=30)

        assert label.target == GameConfig.target_code('lane_creep')
        assert label.ability_name == 'axe_berserkers_call'


@pytest.mark.unit
class TestAbilityOrders:
    """Test ability and item use."""

    def test_untargeted_ability_is_self_cast(self, source):
        label = classify(source, ability=30)

        assert label == ActionLabel(
            is_attack=1.0,
            target=GameConfig.target_code('self'),
            move=AXE_POSITION,
            ability_name='axe_berserkers_call',
        )

    def test_item_use(self, source):
        label = classify(source, target=LINA, ability=41)

        assert label.item_name == 'item_blink'
        assert label.ability_name is None
        assert label.target == GameConfig.target_code('enemy_hero')

    def test_ability_of_another_hero_is_unlabeled(self, source):
        label = classify(source, ability=32)

        assert label.ability_name is None
        assert label.item_name is None
        assert label.is_attack == 1.0

    def test_unresolved_ability_is_discarded(self, source):
        assert classify(source, ability=999) == Discarded(UNRESOLVED_ABILITY)

    def test_classify_ability_directly(self, source):
        assert classify_ability(source, source.entity(30), 'axe') == ('axe_berserkers_call', None)
        assert classify_ability(source, source.entity(40), 'axe') == (None, 'item_tango')
        assert classify_ability(source, source.entity(32), 'axe') == (None, None)


@pytest.mark.unit
class TestMoveOrders:
    """Test plain moves and explicit positions."""

    def test_plain_move(self, source):
        label = classify(source, position=(0.0, 0.0))

        assert label.is_attack == 0.0
        assert label.target == GameConfig.target_code('none')
        assert label.move == (0.5, 0.5)

    def test_order_without_target_or_position(self, source):
        label = classify(source)

        assert label == ActionLabel(is_attack=0.0, target=0, move=(0.0, 0.0))

    def test_explicit_position_overrides_target_position(self, source):
        label = classify(source, target=LINA, position=(GameConfig.MAX_X, GameConfig.MIN_Y))

        assert label.target == GameConfig.target_code('enemy_hero')
        assert label.move == (1.0, 0.0)
