"""
Route and Objective Query Layer

Ownership lookups, claim feasibility with the card-color payment policy,
and card-draw target selection.

Payment policy (keep locomotives for when they are really needed):
- Colored route: exact color alone, else exact color topped up with
  locomotives, else give up.
- Gray route: a single color that covers the whole length (most cards
  wins), else the first color in enumeration order that locomotives can
  top up, else locomotives only.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

from .models import CardColor, GameState, Move, Owner
from .pathfinding import PathResult

logger = logging.getLogger(__name__)

# Points scored when claiming a route, by length
ROUTE_POINTS = {1: 1, 2: 2, 3: 4, 4: 7, 5: 10, 6: 15}


def route_points(length: int) -> int:
    return ROUTE_POINTS.get(length, 0)


# =============================================================================
# OWNERSHIP
# =============================================================================

def find_route(state: GameState, a: int, b: int, unclaimed_only: bool = False) -> Optional[int]:
    """Index of the first route joining a and b, optionally only unclaimed ones"""
    for idx, route in enumerate(state.routes):
        if route.connects(a, b):
            if unclaimed_only and not route.is_free:
                continue
            return idx
    return None


def route_owner(state: GameState, a: int, b: int) -> Optional[Owner]:
    """Owner of the first route joining a and b, None if there is no such route"""
    idx = find_route(state, a, b)
    if idx is None:
        return None
    return state.routes[idx].owner


def network_cities(state: GameState) -> Set[int]:
    """Cities touched by the routes we have claimed"""
    cities: Set[int] = set()
    for idx in state.claimed_routes:
        if 0 <= idx < len(state.routes):
            route = state.routes[idx]
            cities.add(route.from_city)
            cities.add(route.to_city)
    return cities


@dataclass
class PathBreakdown:
    """Ownership classification of the routes along a path"""
    owned: int = 0
    unclaimed: int = 0
    blocked: int = 0
    unclaimed_edges: List[Tuple[int, int]] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.owned + self.unclaimed + self.blocked

    @property
    def routes_needed(self) -> int:
        """Routes on the path we do not own yet"""
        return self.total - self.owned


def path_breakdown(state: GameState, path: PathResult) -> PathBreakdown:
    """Count owned / unclaimed / opponent routes along a path, in path order"""
    breakdown = PathBreakdown()
    for step, (a, b) in enumerate(path.edges()):
        if step < len(path.route_indices):
            owner = state.routes[path.route_indices[step]].owner
        else:
            owner = route_owner(state, a, b)
        if owner == Owner.SELF:
            breakdown.owned += 1
        elif owner == Owner.UNCLAIMED:
            breakdown.unclaimed += 1
            breakdown.unclaimed_edges.append((a, b))
        else:
            breakdown.blocked += 1
    return breakdown


# =============================================================================
# CLAIMING
# =============================================================================

@dataclass
class ClaimPlan:
    """How to pay for a route: the color played plus locomotives used"""
    route_index: int
    from_city: int
    to_city: int
    color: CardColor
    nb_locomotives: int

    def to_move(self) -> Move:
        return Move.claim_route(self.from_city, self.to_city, self.color, self.nb_locomotives)


def _choose_payment(state: GameState, length: int, route_color: CardColor) -> Optional[Tuple[CardColor, int]]:
    locomotives = state.cards_of(CardColor.LOCOMOTIVE)

    if route_color != CardColor.LOCOMOTIVE:
        have = state.cards_of(route_color)
        if have >= length:
            return route_color, 0
        if have + locomotives >= length:
            return route_color, length - have
        return None

    # Gray route - a single color that covers it, most cards first
    best_color = None
    max_cards = 0
    for color in CardColor.plain_colors():
        count = state.cards_of(color)
        if count >= length and count > max_cards:
            max_cards = count
            best_color = color
    if best_color is not None:
        return best_color, 0

    for color in CardColor.plain_colors():
        count = state.cards_of(color)
        if count + locomotives >= length:
            return color, length - count

    if locomotives >= length:
        return CardColor.LOCOMOTIVE, length
    return None


def can_claim(state: GameState, a: int, b: int) -> Optional[ClaimPlan]:
    """
    Check whether we can claim a route between a and b right now.

    Returns:
        ClaimPlan for the first unclaimed route joining the cities, or None
        when there is no such route, it needs more wagons than we have left,
        or the hand cannot pay for it.
    """
    idx = find_route(state, a, b, unclaimed_only=True)
    if idx is None:
        return None
    return _plan_claim(state, idx, a, b)


def can_claim_index(state: GameState, route_index: int) -> Optional[ClaimPlan]:
    """can_claim() for a specific route of the route list"""
    route = state.routes[route_index]
    if not route.is_free:
        return None
    return _plan_claim(state, route_index, route.from_city, route.to_city)


def _plan_claim(state: GameState, idx: int, a: int, b: int) -> Optional[ClaimPlan]:
    route = state.routes[idx]
    if state.wagons_left < route.length:
        return None

    payment = _choose_payment(state, route.length, route.color)
    if payment is None:
        return None

    color, nb_locomotives = payment
    return ClaimPlan(route_index=idx, from_city=a, to_city=b,
                     color=color, nb_locomotives=nb_locomotives)


# =============================================================================
# CARD DRAWS
# =============================================================================

def _visible(state: GameState) -> List[CardColor]:
    return [CardColor(c) for c in state.visible_cards]


def draw_target(state: GameState, route_color: CardColor) -> Optional[CardColor]:
    """
    Visible card to draw for a route of the given color.

    Locomotive first, then the exact color; gray routes take any plain
    visible color. None means draw blind.
    """
    visible = _visible(state)
    if CardColor.LOCOMOTIVE in visible:
        return CardColor.LOCOMOTIVE

    if route_color != CardColor.LOCOMOTIVE:
        if route_color in visible:
            return route_color
        return None

    for card in visible:
        if card not in (CardColor.NONE, CardColor.LOCOMOTIVE):
            return card
    return None


def aggressive_draw_target(state: GameState, route_color: CardColor) -> Optional[CardColor]:
    """Like draw_target() but settles for any plain visible color"""
    visible = _visible(state)
    if CardColor.LOCOMOTIVE in visible:
        return CardColor.LOCOMOTIVE

    if route_color != CardColor.LOCOMOTIVE and route_color in visible:
        return route_color

    for card in visible:
        if card not in (CardColor.NONE, CardColor.LOCOMOTIVE):
            return card
    return None


def draw_for_route(state: GameState, a: int, b: int, aggressive: bool = False) -> Move:
    """Draw move working toward the unclaimed route joining a and b"""
    idx = find_route(state, a, b, unclaimed_only=True)
    if idx is None:
        return Move.draw_blind()
    return draw_for_color(state, state.routes[idx].color, aggressive)


def draw_for_color(state: GameState, route_color: CardColor, aggressive: bool = False) -> Move:
    """Draw move for a route of the given color, blind when nothing visible fits"""
    if aggressive:
        target = aggressive_draw_target(state, route_color)
    else:
        target = draw_target(state, route_color)

    if target is None:
        logger.debug(f"🃏 No visible card for a {route_color.name} route, drawing blind")
        return Move.draw_blind()
    return Move.draw_card(target)
