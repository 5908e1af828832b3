"""
Match Session - per-match decision memory.

Holds the objective we are currently pursuing and the path last computed
for it. One session per match; it travels in and out of every decision
call so nothing leaks between matches.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .models import GameState
from .pathfinding import shortest_path

logger = logging.getLogger(__name__)


@dataclass
class MatchSession:
    """Decision memory carried from one turn to the next"""
    current_objective: Optional[int] = None
    current_path: List[int] = field(default_factory=list)
    decisions_made: int = 0

    @property
    def has_target(self) -> bool:
        return self.current_objective is not None

    def pursue(self, objective_index: int, path: List[int]):
        if objective_index != self.current_objective:
            logger.debug(f"🎯 Now pursuing objective #{objective_index}")
        self.current_objective = objective_index
        self.current_path = list(path)

    def invalidate(self):
        self.current_objective = None
        self.current_path = []

    def refresh(self, state: GameState):
        """
        Drop the pursued objective once it is completed or out of reach.

        Runs at the start of every decision so current_objective and
        current_path (reported in the decision log) never describe a stale
        target.
        """
        if self.current_objective is None:
            return

        idx = self.current_objective
        if idx >= len(state.objectives):
            logger.debug(f"🎯 Objective #{idx} no longer held, resetting")
            self.invalidate()
            return

        objective = state.objectives[idx]
        if state.is_objective_completed(objective):
            logger.info(f"🎯 Objective {objective} completed")
            self.invalidate()
            return

        if shortest_path(state, objective.from_city, objective.to_city) is None:
            logger.info(f"🚧 Objective {objective} became unreachable")
            self.invalidate()
