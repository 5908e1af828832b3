"""
Strategy Controller

Classifies each turn into a game phase and assembles the ordered list of
strategy handlers for that phase.

Phases, first match wins:
1. NO_OBJECTIVES  - nothing to work on yet, draw objectives
2. ANTI_OPPONENT  - opponent nearly out of wagons while we sit on cards,
                    or this is our last turn
3. ENDGAME        - either player at 3 wagons or fewer
4. LATE_GAME      - either player at 8 wagons or fewer
5. ALL_COMPLETE   - every held objective is done
6. MID_GAME       - normal objective work
"""

import logging
from enum import Enum
from typing import Dict, List, Optional

from .evaluators.base import (
    DRAW_BLIND,
    DecisionContext,
    FunctionHandler,
    StrategyHandler,
    StrategyPipeline,
)
from .evaluators.network_evaluator import (
    all_objectives_blocked,
    build_longest_route,
    claim_shared_route,
    draw_for_top_route,
    extend_network_by_value,
    objective_statuses,
)
from .evaluators.phase_evaluator import (
    claim_highest_value_route,
    claim_long_route,
    finish_near_objectives,
    pursue_efficient_objective,
    rush_quickest_objective,
)
from .evaluators.pursuit_evaluator import pursue_single_objective
from .evaluators.recovery_evaluator import alternative_routing, emergency_unblock
from .models import GameState, Move
from .strategy_config import get_config

logger = logging.getLogger(__name__)


class GamePhase(Enum):
    """Turn classification, in precedence order"""
    NO_OBJECTIVES = "no_objectives"
    ANTI_OPPONENT = "anti_opponent"
    ENDGAME = "endgame"
    LATE_GAME = "late_game"
    ALL_COMPLETE = "all_complete"
    MID_GAME = "mid_game"


def _get_threshold_config(key: str, default):
    """Get phase threshold config value."""
    return get_config().get('thresholds', key, default)


# =============================================================================
# PHASE CLASSIFICATION
# =============================================================================

def is_anti_opponent_mode(state: GameState) -> bool:
    """Opponent about to end the game while we hold lots of cards, or last turn"""
    opponent_near_end = state.opponent_wagons_left <= _get_threshold_config('anti_opponent_wagons', 5)
    too_many_cards = state.held_cards > _get_threshold_config('anti_opponent_cards', 15)
    return (opponent_near_end and too_many_cards) or state.last_turn


def is_endgame(state: GameState) -> bool:
    limit = _get_threshold_config('endgame_wagons', 3)
    return state.last_turn or state.wagons_left <= limit or state.opponent_wagons_left <= limit


def is_late_game(state: GameState) -> bool:
    limit = _get_threshold_config('late_game_wagons', 8)
    return state.wagons_left <= limit or state.opponent_wagons_left <= limit


def classify_phase(state: GameState) -> GamePhase:
    if not state.objectives:
        return GamePhase.NO_OBJECTIVES
    if is_anti_opponent_mode(state):
        return GamePhase.ANTI_OPPONENT
    if is_endgame(state):
        return GamePhase.ENDGAME
    if is_late_game(state):
        return GamePhase.LATE_GAME
    if state.all_objectives_completed():
        return GamePhase.ALL_COMPLETE
    return GamePhase.MID_GAME


# =============================================================================
# HANDLER CONDITIONS
# =============================================================================

def _cards_above(key: str, default: int):
    def condition(context: DecisionContext) -> bool:
        return context.held_cards > _get_threshold_config(key, default)
    return condition


def _needs_alternative_routing(context: DecisionContext) -> bool:
    return (all_objectives_blocked(context) or
            context.held_cards > _get_threshold_config('alternative_routing_cards', 30))


def _no_open_objectives(context: DecisionContext) -> bool:
    return not objective_statuses(context)


def _draw_objectives(context: DecisionContext) -> Optional[Move]:
    return Move.draw_objectives()


def _single_objective_or_network(context: DecisionContext) -> Move:
    """Big-hand pursuit; with no objective left to walk, grow the network"""
    move = pursue_single_objective(context)
    if move is not None:
        return move
    context.note("no objective to pursue, building network")
    return build_longest_route(context)


# =============================================================================
# CONTROLLER
# =============================================================================

class StrategyController:
    """
    Maps each game phase to its handler pipeline.

    Every pipeline ends in a handler that always produces a move, so a
    decision never comes back empty for a well-formed state.
    """

    def __init__(self):
        self.pipelines: Dict[GamePhase, StrategyPipeline] = {
            phase: StrategyPipeline(phase.value, handlers)
            for phase, handlers in self._build_handlers().items()
        }
        logger.debug(f"StrategyController initialized with {len(self.pipelines)} pipelines")

    @staticmethod
    def _build_handlers() -> Dict[GamePhase, List[StrategyHandler]]:
        longest_route = FunctionHandler("build_longest_route", build_longest_route)

        return {
            GamePhase.NO_OBJECTIVES: [
                FunctionHandler("draw_objectives", _draw_objectives),
            ],
            GamePhase.ANTI_OPPONENT: [
                FunctionHandler("rush_quickest_objective", rush_quickest_objective),
                FunctionHandler("extend_network", extend_network_by_value),
                FunctionHandler("claim_long_route", claim_long_route),
                DRAW_BLIND,
            ],
            GamePhase.ENDGAME: [
                FunctionHandler("finish_near_objectives", finish_near_objectives),
                FunctionHandler("claim_highest_value_route", claim_highest_value_route),
                DRAW_BLIND,
            ],
            GamePhase.LATE_GAME: [
                FunctionHandler("pursue_efficient_objective", pursue_efficient_objective),
                longest_route,
            ],
            GamePhase.ALL_COMPLETE: [
                longest_route,
            ],
            GamePhase.MID_GAME: [
                FunctionHandler("emergency_unblock", emergency_unblock,
                                _cards_above('emergency_unblock_cards', 40)),
                FunctionHandler("single_objective", _single_objective_or_network,
                                _cards_above('single_objective_cards', 25)),
                FunctionHandler("alternative_routing", alternative_routing,
                                _needs_alternative_routing),
                FunctionHandler("no_open_objectives", build_longest_route,
                                _no_open_objectives),
                FunctionHandler("claim_shared_route", claim_shared_route),
                FunctionHandler("alternative_routing_big_hand", alternative_routing,
                                _cards_above('single_objective_cards', 25)),
                FunctionHandler("draw_for_top_route", draw_for_top_route),
                FunctionHandler("single_objective_fallback", pursue_single_objective),
                longest_route,
            ],
        }

    def pipeline_for(self, phase: GamePhase) -> StrategyPipeline:
        return self.pipelines[phase]

    def decide(self, context: DecisionContext) -> Optional[Move]:
        """Classify the turn and run the matching pipeline"""
        phase = classify_phase(context.state)
        context.phase = phase.value
        logger.info(f"🧠 Phase: {phase.value} (wagons {context.state.wagons_left}/"
                    f"{context.state.opponent_wagons_left}, cards {context.held_cards}, "
                    f"objectives {len(context.state.objectives)})")
        return self.pipeline_for(phase).run(context)
