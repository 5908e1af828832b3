"""
Decision Safety Module

Guarantees that every decision call ends in a legal move. This is the
last line of defense: if the handlers produce nothing, or something the
game would reject, we fall back to a blind draw.

Design Philosophy:
- EVERY decision must get a move - a bad move beats no move
- A blind draw is always legal, so it is the emergency answer
- Log everything for debugging, but never fail silently
"""

import logging
from typing import Optional, Tuple

from .models import CardColor, ClaimRoute, GameState, Move, MoveType, Route

logger = logging.getLogger(__name__)


class DecisionSafety:
    """Validates moves against the game state and supplies the fallback"""

    @staticmethod
    def validate_move(state: GameState, move: Optional[Move]) -> Tuple[bool, str]:
        """
        Check a move against the observable state.

        Returns:
            (is_valid, reason)
        """
        if move is None:
            return False, "no move"

        if move.action == MoveType.CLAIM_ROUTE:
            return DecisionSafety._validate_claim(state, move)

        if move.action == MoveType.DRAW_CARD:
            if move.card is None or move.card == CardColor.NONE:
                return False, "draw card without a color"
            if move.card not in state.visible_cards:
                return False, f"{move.card.name} is not visible"
            return True, "ok"

        if move.action in (MoveType.DRAW_BLIND_CARD, MoveType.DRAW_OBJECTIVES):
            return True, "ok"

        return False, f"unknown action {move.action}"

    @staticmethod
    def _validate_claim(state: GameState, move: Move) -> Tuple[bool, str]:
        claim = move.claim
        if claim is None:
            return False, "claim without route"

        candidates = [r for r in state.routes
                      if r.connects(claim.from_city, claim.to_city) and r.is_free]
        if not candidates:
            return False, f"no unclaimed route {claim.from_city}-{claim.to_city}"

        # Double routes: the claim is fine if any of them accepts the payment
        reason = ""
        for route in candidates:
            valid, reason = DecisionSafety._validate_payment(state, route, claim)
            if valid:
                return True, "ok"
        return False, reason

    @staticmethod
    def _validate_payment(state: GameState, route: Route, claim: ClaimRoute) -> Tuple[bool, str]:
        if route.length > state.wagons_left:
            return False, f"route needs {route.length} wagons, {state.wagons_left} left"

        if not 0 <= claim.nb_locomotives <= route.length:
            return False, f"bad locomotive count {claim.nb_locomotives}"

        if claim.nb_locomotives > state.cards_of(CardColor.LOCOMOTIVE):
            return False, "not enough locomotives"

        if claim.color == CardColor.LOCOMOTIVE:
            if claim.nb_locomotives != route.length:
                return False, "locomotive payment must cover the whole route"
            return True, "ok"

        if not route.is_gray and claim.color != route.color:
            return False, f"{claim.color.name} cannot pay a {route.color.name} route"

        if state.cards_of(claim.color) < route.length - claim.nb_locomotives:
            return False, f"not enough {claim.color.name} cards"

        return True, "ok"

    @staticmethod
    def emergency_move() -> Move:
        """The move that is always legal"""
        return Move.draw_blind()

    @staticmethod
    def ensure_valid(state: GameState, move: Optional[Move]) -> Tuple[Move, bool]:
        """
        Return the move if it is legal, the emergency move otherwise.

        Returns:
            (move, was_emergency)
        """
        valid, reason = DecisionSafety.validate_move(state, move)
        if valid:
            return move, False
        logger.error(f"🚨 Rejected move {move}: {reason} - drawing blind")
        return DecisionSafety.emergency_move(), True
