"""
Phase Tactics

Tactics specific to the closing phases of the game:
- anti-opponent rush: the opponent is about to end the game (or this is
  our last turn), so cash in whatever is quickest
- endgame: finish objectives one route away, else take the route with
  the best points per wagon
- late game: pursue the objective with the best points per wagon
"""

import logging
from typing import Optional

from ..models import Move
from ..pathfinding import shortest_path
from ..route_queries import can_claim_index, route_points
from ..strategy_config import get_config
from .base import DecisionContext
from .network_evaluator import claim_longest_route, objective_statuses
from .objective_evaluator import most_efficient_objective, quickest_objective
from .pursuit_evaluator import claim_along_path, walk_objective

logger = logging.getLogger(__name__)


def _get_threshold_config(key: str, default):
    return get_config().get('thresholds', key, default)


# =============================================================================
# ANTI-OPPONENT
# =============================================================================

def rush_quickest_objective(context: DecisionContext) -> Optional[Move]:
    """Claim on the path of the cheapest objective we can still afford"""
    state = context.state
    index = quickest_objective(state)
    if index is None:
        return None

    objective = state.objectives[index]
    path = shortest_path(state, objective.from_city, objective.to_city)
    move = claim_along_path(state, path)
    if move is not None:
        context.note(f"rushing objective {objective}")
    return move


def claim_long_route(context: DecisionContext) -> Optional[Move]:
    """Longest claimable route of at least the anti-opponent minimum length"""
    return claim_longest_route(context, min_length=_get_threshold_config('anti_opponent_min_length', 4))


# =============================================================================
# ENDGAME
# =============================================================================

def finish_near_objectives(context: DecisionContext) -> Optional[Move]:
    """Complete any objective missing a single route that fits our wagons"""
    state = context.state
    for status in objective_statuses(context):
        if status.path is None:
            continue
        needed = status.breakdown.unclaimed
        if needed == 0 or needed > 1 or needed > state.wagons_left:
            continue
        move = claim_along_path(state, status.path)
        if move is not None:
            context.note(f"finishing objective {status.objective}")
            return move
    return None


def claim_highest_value_route(context: DecisionContext) -> Optional[Move]:
    """Claimable route with the best points per wagon within our wagon budget"""
    state = context.state
    best_plan = None
    best_value = 0.0

    for idx, route in enumerate(state.routes):
        if not route.is_free or route.length > state.wagons_left:
            continue
        plan = can_claim_index(state, idx)
        if plan is None:
            continue
        value = route_points(route.length) / route.length
        if value > best_value:
            best_value = value
            best_plan = plan

    return best_plan.to_move() if best_plan else None


# =============================================================================
# LATE GAME
# =============================================================================

def pursue_efficient_objective(context: DecisionContext) -> Optional[Move]:
    """Walk the path of the objective with the best points per estimated wagon"""
    index = most_efficient_objective(context.state)
    if index is None:
        return None
    return walk_objective(context, index)
