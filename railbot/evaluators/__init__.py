"""
Strategy Handler System

This package contains the strategy handlers the decision engine composes
into per-phase pipelines. Each handler either proposes a move or lets the
next one try.
"""

from .base import DecisionContext, StrategyHandler, FunctionHandler, StrategyPipeline, DRAW_BLIND
from .objective_evaluator import (
    ObjectiveEvaluation,
    ObjectiveStatus,
    select_objectives,
    prioritize_objective,
)
from .pursuit_evaluator import pursue_single_objective, walk_objective
from .network_evaluator import build_longest_route, rank_shared_routes
from .recovery_evaluator import alternative_routing, emergency_unblock

__all__ = [
    'DecisionContext',
    'StrategyHandler',
    'FunctionHandler',
    'StrategyPipeline',
    'DRAW_BLIND',
    'ObjectiveEvaluation',
    'ObjectiveStatus',
    'select_objectives',
    'prioritize_objective',
    'pursue_single_objective',
    'walk_objective',
    'build_longest_route',
    'rank_shared_routes',
    'alternative_routing',
    'emergency_unblock',
]
