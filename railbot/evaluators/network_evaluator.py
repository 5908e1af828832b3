"""
Network Evaluator

Route-picking tactics that grow our network:
- shared-route analysis: routes that sit on the paths of several
  incomplete objectives at once get priority
- longest-route building: extend the network with long routes once the
  objectives are done (or out of reach)
- network extension by value, for the anti-opponent rush
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..models import Move
from ..route_queries import can_claim, can_claim_index, draw_for_route, network_cities
from ..strategy_config import get_config
from .base import DecisionContext
from .objective_evaluator import ObjectiveStatus, analyze_incomplete_objectives

logger = logging.getLogger(__name__)


def _get_network_config(key: str, default):
    """Get network strategy config value."""
    return get_config().get('network', key, default)


def _get_threshold_config(key: str, default):
    return get_config().get('thresholds', key, default)


@dataclass
class RouteAnalysis:
    """An unclaimed route scored by the objectives it serves"""
    route_index: int
    from_city: int
    to_city: int
    length: int
    useful_for: int
    total_value: int
    priority: int


# =============================================================================
# SHARED OBJECTIVE ANALYSIS
# =============================================================================

def objective_statuses(context: DecisionContext) -> List[ObjectiveStatus]:
    """Incomplete objectives with paths, computed once per decision"""
    if 'objective_statuses' not in context.cache:
        context.cache['objective_statuses'] = analyze_incomplete_objectives(context.state)
    return context.cache['objective_statuses']


def all_objectives_blocked(context: DecisionContext) -> bool:
    statuses = objective_statuses(context)
    return bool(statuses) and all(s.is_blocked for s in statuses)


def rank_shared_routes(context: DecisionContext) -> List[RouteAnalysis]:
    """
    Score every unclaimed route by the objective paths running through it.

    priority = summed objective points, plus a shared-route bonus for each
    objective served beyond the first.
    """
    if 'shared_routes' in context.cache:
        return context.cache['shared_routes']

    state = context.state
    shared_bonus = _get_network_config('shared_route_bonus', 50)
    open_paths = [s for s in objective_statuses(context) if not s.is_blocked]

    analyses: List[RouteAnalysis] = []
    for idx, route in enumerate(state.routes):
        if not route.is_free:
            continue

        useful = 0
        value = 0
        for status in open_paths:
            if any(route.connects(a, b) for a, b in status.path.edges()):
                useful += 1
                value += status.objective.score

        if useful == 0:
            continue

        priority = value + (useful - 1) * shared_bonus
        analyses.append(RouteAnalysis(
            route_index=idx,
            from_city=route.from_city,
            to_city=route.to_city,
            length=route.length,
            useful_for=useful,
            total_value=value,
            priority=priority,
        ))

    analyses.sort(key=lambda r: r.priority, reverse=True)
    context.cache['shared_routes'] = analyses
    return analyses


def claim_shared_route(context: DecisionContext) -> Optional[Move]:
    """Claim one of the top-priority shared routes"""
    top = _get_network_config('top_routes', 5)
    for analysis in rank_shared_routes(context)[:top]:
        plan = can_claim(context.state, analysis.from_city, analysis.to_city)
        if plan is not None:
            logger.debug(f"🛤️  Shared route {analysis.from_city}-{analysis.to_city} "
                         f"serves {analysis.useful_for} objective(s), priority {analysis.priority}")
            return plan.to_move()
    return None


def draw_for_top_route(context: DecisionContext) -> Optional[Move]:
    """Draw cards toward the highest-priority shared route"""
    ranked = rank_shared_routes(context)
    if not ranked:
        return None
    top = ranked[0]
    return draw_for_route(context.state, top.from_city, top.to_city)


# =============================================================================
# LONGEST-ROUTE BUILDING
# =============================================================================

def _length_score(length: int) -> int:
    score = length * _get_network_config('length_weight', 10)
    if length >= 5:
        score += _get_network_config('length5_bonus', 100)
    if length >= 4:
        score += _get_network_config('length4_bonus', 50)
    if length >= 3:
        score += _get_network_config('length3_bonus', 25)
    return score


def draw_more_objectives(context: DecisionContext) -> Optional[Move]:
    """With a big hand and room for more objectives, take new objectives"""
    state = context.state
    if (context.held_cards > _get_threshold_config('draw_objectives_cards', 15) and
            len(state.objectives) < _get_threshold_config('max_objectives', 5)):
        return Move.draw_objectives()
    return None


def claim_network_route(context: DecisionContext) -> Optional[Move]:
    """Best claimable route touching the network, longer is better"""
    state = context.state
    network = network_cities(state)
    best_plan = None
    best_score = 0

    for idx, route in enumerate(state.routes):
        if not route.is_free:
            continue
        if route.from_city not in network and route.to_city not in network:
            continue
        plan = can_claim_index(state, idx)
        if plan is None:
            continue
        score = _length_score(route.length)
        if score > best_score:
            best_score = score
            best_plan = plan

    return best_plan.to_move() if best_plan else None


def claim_longest_route(context: DecisionContext, min_length: int = 1) -> Optional[Move]:
    """Longest claimable route anywhere on the map"""
    state = context.state
    best_plan = None
    best_length = min_length - 1

    for idx, route in enumerate(state.routes):
        if not route.is_free or route.length <= best_length:
            continue
        plan = can_claim_index(state, idx)
        if plan is not None:
            best_length = route.length
            best_plan = plan

    return best_plan.to_move() if best_plan else None


def build_longest_route(context: DecisionContext) -> Move:
    """Grow the network with long routes; always returns a move"""
    for tactic in (draw_more_objectives, claim_network_route, claim_longest_route):
        move = tactic(context)
        if move is not None:
            return move
    return Move.draw_blind()


# =============================================================================
# ANTI-OPPONENT EXTENSION
# =============================================================================

def extend_network_by_value(context: DecisionContext) -> Optional[Move]:
    """Highest-value claimable route touching the network"""
    state = context.state
    network = network_cities(state)
    long_bonus = _get_network_config('extension_long_bonus', 50)
    best_plan = None
    best_value = 0

    for idx, route in enumerate(state.routes):
        if not route.is_free:
            continue
        if route.from_city not in network and route.to_city not in network:
            continue
        plan = can_claim_index(state, idx)
        if plan is None:
            continue
        value = route.length * _get_network_config('length_weight', 10)
        if route.length >= 5:
            value += long_bonus
        if value > best_value:
            best_value = value
            best_plan = plan

    return best_plan.to_move() if best_plan else None
