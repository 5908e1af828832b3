"""
Objective Pursuit

Walks the current shortest path of one objective and acts on the first
route we do not own yet: claim it if the hand can pay, otherwise draw
cards for its color. Objectives that turn out to be dead ends are
excluded and the next best one is tried, so the walk is bounded by the
number of objectives held.
"""

import logging
from typing import Optional

from ..models import GameState, Move, Owner
from ..pathfinding import PathResult, shortest_path
from ..route_queries import can_claim, draw_for_color
from .base import DecisionContext
from .objective_evaluator import prioritize_objective

logger = logging.getLogger(__name__)


def claim_along_path(state: GameState, path: Optional[PathResult]) -> Optional[Move]:
    """Claim the first unclaimed route on the path that the hand can pay for"""
    if path is None:
        return None
    for step, (a, b) in enumerate(path.edges()):
        if state.routes[path.route_indices[step]].owner != Owner.UNCLAIMED:
            continue
        plan = can_claim(state, a, b)
        if plan is not None:
            return plan.to_move()
    return None


def walk_objective(context: DecisionContext, index: int) -> Optional[Move]:
    """
    Act on the first missing route of an objective's path.

    Opponent routes never appear on a path, so a path with a positive cost
    always has an unclaimed route to act on.

    Returns:
        A claim, or an aggressive draw for the route color; None when the
        objective is complete or has nothing left to claim.
    """
    state = context.state
    objective = state.objectives[index]

    if state.is_objective_completed(objective):
        return None

    path = shortest_path(state, objective.from_city, objective.to_city)
    if path is None or path.cost <= 0:
        logger.debug(f"🚧 Objective {objective} has nothing left to claim")
        context.session.invalidate()
        return None

    context.session.pursue(index, path.cities)

    step = next(i for i, idx in enumerate(path.route_indices)
                if state.routes[idx].owner == Owner.UNCLAIMED)
    a, b = path.cities[step], path.cities[step + 1]

    plan = can_claim(state, a, b)
    if plan is not None:
        context.note(f"objective {objective}: claim {a}-{b}")
        return plan.to_move()

    context.note(f"objective {objective}: collecting cards for {a}-{b}")
    route = state.routes[path.route_indices[step]]
    return draw_for_color(state, route.color, aggressive=True)


def pursue_single_objective(context: DecisionContext) -> Optional[Move]:
    """Work on the objective closest to completion, falling back to the next one"""
    state = context.state
    context.session.refresh(state)

    exhausted = set()
    for _ in range(len(state.objectives)):
        index = prioritize_objective(state, exclude=exhausted)
        if index is None:
            break
        move = walk_objective(context, index)
        if move is not None:
            return move
        exhausted.add(index)

    return None
