"""
Decision Handler

Entry points used by the game client:
- decide_next_move(): one legal move for the current turn
- choose_objectives(): keep/discard flags for freshly offered objectives

CRITICAL DESIGN PRINCIPLE:
Every decision MUST produce a move. A bad move is better than no move;
the game continues with a bad move but stalls with none.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from . import decision_logger
from .decision_safety import DecisionSafety
from .evaluators.base import DecisionContext
from .evaluators.objective_evaluator import select_objectives
from .match_session import MatchSession
from .models import GameState, Move, Objective
from .strategy_controller import StrategyController

logger = logging.getLogger(__name__)

_controller: Optional[StrategyController] = None


def _get_controller() -> StrategyController:
    global _controller
    if _controller is None:
        _controller = StrategyController()
    return _controller


@dataclass
class DecisionResult:
    """
    Result of one decision call.

    Attributes:
        move: The move to send to the game
        session: The match session, updated for the next call
        phase: Phase the turn was classified into
        reasoning: Handler notes explaining the choice
        was_emergency: True when the safety fallback replaced the handlers' move
    """
    move: Move
    session: MatchSession
    phase: str = ""
    reasoning: List[str] = field(default_factory=list)
    was_emergency: bool = False


def decide_next_move(state: GameState, session: Optional[MatchSession] = None) -> DecisionResult:
    """
    Produce the next move for the current state.

    GUARANTEE: always returns a legal move for a well-formed state.

    Args:
        state: Observable game state
        session: Session of the current match (a new one when omitted)

    Raises:
        ValueError: state is None
    """
    if state is None:
        raise ValueError("decide_next_move needs a game state")

    if session is None:
        session = MatchSession()
    session.refresh(state)

    context = DecisionContext(state=state, session=session)
    move = _get_controller().decide(context)
    move, was_emergency = DecisionSafety.ensure_valid(state, move)

    session.decisions_made += 1
    logger.info(f"✅ Move: {move}")
    if context.reasoning:
        logger.debug(f"   Reasoning: {' | '.join(context.reasoning)}")

    decision_logger.log_decision(
        state, move,
        phase=context.phase,
        reasoning=context.reasoning,
        decision_number=session.decisions_made,
        was_emergency=was_emergency,
        session=session,
    )

    return DecisionResult(
        move=move,
        session=session,
        phase=context.phase,
        reasoning=context.reasoning,
        was_emergency=was_emergency,
    )


def choose_objectives(state: GameState, candidates: Sequence[Objective]) -> List[bool]:
    """
    Keep/discard flags for offered objectives, in offer order.

    With no objective held yet, at least one is always kept.
    """
    if state is None:
        raise ValueError("choose_objectives needs a game state")
    return select_objectives(state, candidates)


class DecisionHandler:
    """Decision entry point bound to one match"""

    def __init__(self):
        self.session = MatchSession()

    def new_match(self, opponent_name: str = None, won: bool = None):
        """Reset the session; archives the decision log of the finished match"""
        if self.session.decisions_made:
            decision_logger.rotate_decision_log(opponent_name, won)
        self.session = MatchSession()
        logger.info("🆕 New match session")

    def decide(self, state: GameState) -> Move:
        result = decide_next_move(state, self.session)
        self.session = result.session
        return result.move

    def choose_objectives(self, state: GameState, candidates: Sequence[Objective]) -> List[bool]:
        return choose_objectives(state, candidates)
