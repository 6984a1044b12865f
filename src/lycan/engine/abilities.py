"""Which night actions a player may submit.

The resolver applies whatever it is given; this module is what an
orchestrator consults before collecting a player's action.
"""

from typing import Optional

from lycan.engine.game_state import GameState
from lycan.models.action import ActionType, BaseAction
from lycan.models.config import GagMode
from lycan.models.player import Character, Player

# Ability keys recorded in GameState.used_abilities
HERO_KILL = "hero_kill"
MEDIUM_INVESTIGATION = "medium_investigation"
BLOOD_BOND = "blood_bond"
GAG = "gag"

ROLE_ACTIONS: dict[Character, tuple[ActionType, ...]] = {
    Character.WEREWOLF: (ActionType.KILL,),
    Character.VOODOO_WEREWOLF: (ActionType.KILL, ActionType.VOODOO_KILL),
    Character.GAG_WEREWOLF: (ActionType.KILL, ActionType.SILENCE),
    Character.VAMPIRE: (ActionType.KILL,),
    Character.HERO: (ActionType.KILL,),
    Character.GUARDIAN: (ActionType.PROTECT,),
    Character.SEER: (ActionType.INVESTIGATE,),
    Character.MEDIUM: (ActionType.INVESTIGATE,),
    Character.WITCH: (ActionType.HEAL, ActionType.POISON),
    Character.ZOMBIE: (ActionType.INFECT,),
    Character.BLOOD_MAGE: (ActionType.BLOOD_BOND,),
}

# Abilities usable once per game, keyed by (character, action type)
ONCE_PER_GAME: dict[tuple[Character, ActionType], str] = {
    (Character.HERO, ActionType.KILL): HERO_KILL,
    (Character.MEDIUM, ActionType.INVESTIGATE): MEDIUM_INVESTIGATION,
    (Character.BLOOD_MAGE, ActionType.BLOOD_BOND): BLOOD_BOND,
}


def _gag_available(state: GameState, player: Player) -> bool:
    uses = state.ability_uses(player.id, GAG)
    value = state.config.werewolf_gag_value
    if state.config.werewolf_gag_mode == GagMode.PER_GAME:
        return len(uses) < value
    # Cooldown: value full nights must pass between two gags
    return not uses or state.night - max(uses) > value


def available_actions(state: GameState, player: Player) -> list[ActionType]:
    """List the action types a player may submit tonight.

    Args:
        state: Current game state (potions, ability history, config).
        player: The acting player.

    Returns:
        Action types in the order the role would be asked for them;
        empty for dead players and roles without night actions.
    """
    if not player.is_alive:
        return []

    character = player.effective_character
    available: list[ActionType] = []
    for action_type in ROLE_ACTIONS.get(character, ()):
        key = ONCE_PER_GAME.get((character, action_type))
        if key is not None and state.ability_uses(player.id, key):
            continue
        if action_type == ActionType.HEAL and not state.witch_potions.healing_potion:
            continue
        if action_type == ActionType.POISON and not state.witch_potions.poison_potion:
            continue
        if action_type == ActionType.SILENCE and not _gag_available(state, player):
            continue
        if action_type == ActionType.BLOOD_BOND and player.blood_bond_partner_id:
            continue
        available.append(action_type)
    return available


def ability_key(player: Player, action: BaseAction) -> Optional[str]:
    """The used-ability key an action consumes, if any."""
    action_type = ActionType(action.type)
    if action_type == ActionType.SILENCE and player.effective_character == Character.GAG_WEREWOLF:
        return GAG
    return ONCE_PER_GAME.get((player.effective_character, action_type))
