"""
Base Classes for the Strategy Handler System

A decision is produced by an ordered list of strategy handlers. Each
handler looks at the decision context and either proposes a move or
declines (returns None). The pipeline returns the first proposal, so
fallbacks are explicit list entries rather than nested calls.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import logging

from ..match_session import MatchSession
from ..models import GameState, Move

logger = logging.getLogger(__name__)


@dataclass
class DecisionContext:
    """
    Everything a handler needs for one decision:
    - the observable game state
    - the per-match session (pursued objective memory)
    - the phase chosen by the strategy controller
    """
    state: GameState
    session: MatchSession
    phase: str = ""

    # Why we decided what we did (for logging)
    reasoning: List[str] = field(default_factory=list)

    # Per-decision memo for analyses shared by several handlers
    cache: Dict[str, Any] = field(default_factory=dict)

    def note(self, reason: str):
        self.reasoning.append(reason)

    @property
    def held_cards(self) -> int:
        return self.state.held_cards


class StrategyHandler(ABC):
    """
    Base class for strategy handlers.

    Handlers are small: they own one tactic (claim toward an objective,
    extend the network, draw for a route...) and say nothing when the
    tactic does not apply.
    """

    def __init__(self, name: str):
        self.name = name
        self.enabled = True
        self.logger = logging.getLogger(f"{__name__}.{name}")

    def can_handle(self, context: DecisionContext) -> bool:
        """Whether this handler should be asked at all (default: always)"""
        return True

    @abstractmethod
    def propose(self, context: DecisionContext) -> Optional[Move]:
        """
        Propose a move, or None to let the next handler try.

        Args:
            context: Decision context with game state and session

        Returns:
            A move, or None
        """
        pass


class FunctionHandler(StrategyHandler):
    """Wraps a plain (context) -> Optional[Move] function as a handler"""

    def __init__(self, name: str, fn: Callable[[DecisionContext], Optional[Move]],
                 condition: Optional[Callable[[DecisionContext], bool]] = None):
        super().__init__(name)
        self.fn = fn
        self.condition = condition

    def can_handle(self, context: DecisionContext) -> bool:
        if self.condition is None:
            return True
        return self.condition(context)

    def propose(self, context: DecisionContext) -> Optional[Move]:
        return self.fn(context)

    def __repr__(self):
        return f"FunctionHandler({self.name})"


class StrategyPipeline:
    """
    Runs handlers in priority order and returns the first move proposed.

    The pipeline is finite and never recurses; a pipeline that ends in a
    terminal handler (draw blind) always produces a move.
    """

    def __init__(self, name: str, handlers: List[StrategyHandler]):
        self.name = name
        self.handlers = handlers
        self.logger = logging.getLogger(__name__)

    def run(self, context: DecisionContext) -> Optional[Move]:
        for handler in self.handlers:
            if not handler.enabled:
                continue
            if not handler.can_handle(context):
                self.logger.debug(f"  [{self.name}] {handler.name}: skipped")
                continue

            move = handler.propose(context)
            if move is not None:
                context.note(f"{handler.name}: {move}")
                self.logger.debug(f"  [{self.name}] {handler.name} -> {move}")
                return move
            self.logger.debug(f"  [{self.name}] {handler.name}: nothing")

        self.logger.warning(f"⚠️  Pipeline {self.name} produced no move")
        return None


def draw_blind(context: DecisionContext) -> Move:
    """Terminal handler: always proposes a blind draw"""
    return Move.draw_blind()


DRAW_BLIND = FunctionHandler("draw_blind", draw_blind)
