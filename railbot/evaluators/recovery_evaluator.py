"""
Blocked-Network Recovery

When the direct paths of our objectives offer nothing to claim, or the
hand has grown too large to be useful:
- hub relay: route each objective through a hub city instead, two legs
  computed independently, and claim the first open route on either leg
- emergency unblock: forget objectives, dump the hand into the longest
  routes available
"""

import logging
from typing import Optional

from ..models import GameState, Move, Objective
from ..pathfinding import shortest_path
from ..route_queries import can_claim_index, network_cities
from ..strategy_config import get_config
from .base import DecisionContext
from .network_evaluator import build_longest_route
from .pursuit_evaluator import claim_along_path

logger = logging.getLogger(__name__)

# Default relay hubs (city ids)
HUB_CITIES = [5, 10, 15, 20, 25]
EMERGENCY_LENGTHS = [6, 5]


def _get_recovery_config(key: str, default):
    """Get recovery config value."""
    return get_config().get('recovery', key, default)


def find_hub_relay_claim(state: GameState, objective: Objective) -> Optional[Move]:
    """
    Claim toward an objective through a hub city.

    Hubs equal to an endpoint or outside the map are skipped; both legs
    must be reachable before anything is claimed.
    """
    for hub in _get_recovery_config('hubs', HUB_CITIES):
        if not state.is_valid_city(hub) or hub in (objective.from_city, objective.to_city):
            continue

        first_leg = shortest_path(state, objective.from_city, hub)
        second_leg = shortest_path(state, hub, objective.to_city)
        if first_leg is None or second_leg is None:
            continue

        move = claim_along_path(state, first_leg) or claim_along_path(state, second_leg)
        if move is not None:
            logger.info(f"🔀 Hub relay via {hub} for objective {objective}")
            return move

    return None


def hub_relay(context: DecisionContext) -> Optional[Move]:
    """Hub relay for each incomplete objective in turn"""
    state = context.state
    for _, objective in state.incomplete_objectives():
        move = find_hub_relay_claim(state, objective)
        if move is not None:
            context.note(f"hub relay for {objective}")
            return move
    return None


def alternative_routing(context: DecisionContext) -> Move:
    """Hub relays first, then plain network growth; always returns a move"""
    move = hub_relay(context)
    if move is not None:
        return move
    context.note("no hub relay, building network")
    return build_longest_route(context)


def emergency_unblock(context: DecisionContext) -> Move:
    """
    Spend down an oversized hand regardless of objectives.

    Longest routes first, then anything touching the network, then
    anything at all, else draw blind.
    """
    state = context.state
    logger.warning(f"🚨 Emergency unblock with {context.held_cards} cards in hand")

    for length in _get_recovery_config('emergency_lengths', EMERGENCY_LENGTHS):
        for idx, route in enumerate(state.routes):
            if route.is_free and route.length == length:
                plan = can_claim_index(state, idx)
                if plan is not None:
                    return plan.to_move()

    network = network_cities(state)
    for idx, route in enumerate(state.routes):
        if route.is_free and (route.from_city in network or route.to_city in network):
            plan = can_claim_index(state, idx)
            if plan is not None:
                return plan.to_move()

    for idx, route in enumerate(state.routes):
        if route.is_free:
            plan = can_claim_index(state, idx)
            if plan is not None:
                return plan.to_move()

    return Move.draw_blind()
