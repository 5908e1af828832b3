"""
Objective Evaluator

Scores objectives in two situations:
- Selection: which of the freshly offered objective cards to keep
- Prioritization: which held, incomplete objective to work on next

Selection score = points / extra wagons, then multiplied by:
- region penalty when an endpoint is in the disadvantaged region
- network bonus when the path reuses routes we already own
- short-path bonus (1 or 2 routes missing), long-path penalty (>5 missing)
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

from ..models import GameState, Objective
from ..pathfinding import PathResult, shortest_path
from ..route_queries import PathBreakdown, path_breakdown
from ..strategy_config import get_config

logger = logging.getLogger(__name__)

# Default disadvantaged region (city ids)
DISADVANTAGED_CITIES = list(range(20, 41))


def _get_selection_config(key: str, default):
    """Get objective selection config value."""
    return get_config().get('objective_selection', key, default)


def _get_selection_weight(key: str, default: float) -> float:
    """Get an objective selection multiplier."""
    return get_config().get_weight('objective_selection', key, default)


def _get_threshold_config(key: str, default):
    return get_config().get('thresholds', key, default)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass
class ObjectiveEvaluation:
    """A candidate objective scored for selection"""
    index: int
    objective: Objective
    score: float = 0.0
    path: Optional[PathResult] = None
    routes_needed: int = 0
    uses_network: bool = False
    in_region: bool = False
    reasoning: List[str] = field(default_factory=list)

    def apply(self, reason: str, multiplier: float):
        """Multiply the score and record why"""
        self.score *= multiplier
        self.reasoning.append(f"{reason} (x{multiplier:g})")

    def __repr__(self):
        return f"ObjectiveEvaluation(#{self.index} {self.objective}, score={self.score:.3f})"


@dataclass
class ObjectiveStatus:
    """A held objective with its current path and ownership breakdown"""
    index: int
    objective: Objective
    path: Optional[PathResult]
    breakdown: PathBreakdown

    @property
    def reachable(self) -> bool:
        return self.path is not None

    @property
    def is_blocked(self) -> bool:
        """Unreachable, or nothing on the path left for us to claim"""
        if self.path is None or self.path.cost <= 0:
            return True
        return self.breakdown.unclaimed == 0 and self.breakdown.owned < self.breakdown.total


def analyze_objective(state: GameState, index: int, objective: Objective) -> ObjectiveStatus:
    path = shortest_path(state, objective.from_city, objective.to_city)
    breakdown = path_breakdown(state, path) if path is not None else PathBreakdown()
    return ObjectiveStatus(index=index, objective=objective, path=path, breakdown=breakdown)


def analyze_incomplete_objectives(state: GameState) -> List[ObjectiveStatus]:
    return [analyze_objective(state, i, obj) for i, obj in state.incomplete_objectives()]


# =============================================================================
# SELECTION
# =============================================================================

def evaluate_candidate(state: GameState, index: int, objective: Objective) -> ObjectiveEvaluation:
    """Score one offered objective"""
    region = set(_get_selection_config('disadvantaged_cities', DISADVANTAGED_CITIES))
    evaluation = ObjectiveEvaluation(index=index, objective=objective)
    evaluation.in_region = objective.from_city in region or objective.to_city in region

    path = shortest_path(state, objective.from_city, objective.to_city)
    evaluation.path = path
    if path is None or path.cost <= 0:
        evaluation.reasoning.append("unreachable or already connected")
        return evaluation

    breakdown = path_breakdown(state, path)
    evaluation.routes_needed = breakdown.routes_needed
    evaluation.uses_network = breakdown.owned > 0

    evaluation.score = objective.score / path.cost
    evaluation.reasoning.append(f"{objective.score}pts / {path.cost} wagons")

    if evaluation.in_region:
        evaluation.apply("disadvantaged region", _get_selection_weight('region_multiplier', 0.3))
    if evaluation.uses_network:
        evaluation.apply("uses our network", _get_selection_weight('network_multiplier', 2.0))

    if evaluation.routes_needed <= 1:
        evaluation.apply("1 route missing", _get_selection_weight('one_route_multiplier', 1.5))
    elif evaluation.routes_needed <= 2:
        evaluation.apply("2 routes missing", _get_selection_weight('two_route_multiplier', 1.2))

    if evaluation.routes_needed > _get_selection_config('long_path_routes', 5):
        evaluation.apply(f"{evaluation.routes_needed} routes missing",
                         _get_selection_weight('long_path_multiplier', 0.5))

    return evaluation


def evaluate_candidates(state: GameState, candidates: Sequence[Objective]) -> List[ObjectiveEvaluation]:
    """Score offered objectives, best first (ties keep offer order)"""
    evaluations = [evaluate_candidate(state, i, obj) for i, obj in enumerate(candidates)]
    return sorted(evaluations, key=lambda e: e.score, reverse=True)


def select_objectives(state: GameState, candidates: Sequence[Objective]) -> List[bool]:
    """
    Decide which offered objectives to keep.

    Keeps the best one when it scores above zero and the runner-up when it
    beats the second-pick threshold. With no objective held yet, fills up
    to two picks in offer order whatever the scores.

    Returns:
        One keep flag per candidate, in offer order
    """
    keep = [False] * len(candidates)
    if not candidates:
        return keep

    ranked = evaluate_candidates(state, candidates)
    for evaluation in ranked:
        logger.debug(f"📜 {evaluation} - {' | '.join(evaluation.reasoning)}")

    chosen = 0
    if ranked[0].score > 0:
        keep[ranked[0].index] = True
        chosen += 1

    second_threshold = _get_selection_weight('second_pick_threshold', 0.2)
    if len(ranked) > 1 and ranked[1].score > second_threshold:
        keep[ranked[1].index] = True
        chosen += 1

    first_draw_keep = _get_selection_config('first_draw_keep', 2)
    if chosen < first_draw_keep and not state.objectives:
        for i in range(len(candidates)):
            if not keep[i]:
                keep[i] = True
                chosen += 1
                if chosen >= first_draw_keep:
                    break

    logger.info(f"📜 Keeping objectives {[str(c) for c, k in zip(candidates, keep) if k]}")
    return keep


# =============================================================================
# PRIORITIZATION
# =============================================================================

def prioritize_objective(state: GameState, exclude: Iterable[int] = ()) -> Optional[int]:
    """
    Pick the held objective closest to completion.

    - one route missing and nothing blocked: taken immediately
    - otherwise a two-route objective, or the one with the most routes
      already owned among those missing at most four
    Objectives with an opponent route on their path are never picked.
    """
    excluded = set(exclude)
    best = None
    lowest_needed = 999
    highest_progress = -1

    for status in analyze_incomplete_objectives(state):
        if status.index in excluded:
            continue
        if status.path is None or status.path.cost <= 0:
            continue

        needed = status.breakdown.unclaimed
        owned = status.breakdown.owned
        blocked = status.breakdown.blocked

        if needed == 1 and blocked == 0:
            return status.index

        if needed == 2 and blocked == 0 and needed < lowest_needed:
            lowest_needed = needed
            best = status.index
            highest_progress = owned

        if blocked == 0 and owned > highest_progress and needed <= 4:
            if needed < lowest_needed or (needed == lowest_needed and owned > highest_progress):
                lowest_needed = needed
                best = status.index
                highest_progress = owned

    return best


def quickest_objective(state: GameState) -> Optional[int]:
    """Incomplete objective with the lowest rough wagon cost that still fits"""
    per_route = _get_threshold_config('anti_opponent_wagons_per_route', 2)
    best = None
    lowest_cost = None

    for status in analyze_incomplete_objectives(state):
        if status.path is None or status.path.cost <= 0:
            continue
        wagons_needed = status.breakdown.unclaimed * per_route
        if wagons_needed > state.wagons_left:
            continue
        if lowest_cost is None or wagons_needed < lowest_cost:
            lowest_cost = wagons_needed
            best = status.index

    return best


def most_efficient_objective(state: GameState) -> Optional[int]:
    """Incomplete objective with the best points per estimated wagon that still fits"""
    per_route = _get_threshold_config('late_game_wagons_per_route', 3)
    best = None
    best_efficiency = 0.0

    for status in analyze_incomplete_objectives(state):
        if status.path is None:
            continue
        wagons_needed = status.breakdown.unclaimed * per_route
        if wagons_needed <= 0 or wagons_needed > state.wagons_left:
            continue
        efficiency = status.objective.score / wagons_needed
        if efficiency > best_efficiency:
            best_efficiency = efficiency
            best = status.index

    return best
