"""
Data models for the route-claiming game.

These are the structures the surrounding game client fills in from the
server and hands to the decision engine each turn. The engine only reads
them; the one exception is GameState.claim_route(), which the client (and
the tests) use once a claim has been confirmed by the rules.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Tuple


# Visible face-up card window
VISIBLE_CARD_SLOTS = 5


class CardColor(IntEnum):
    """Card colors, in the fixed enumeration order used for tie-breaks"""
    NONE = 0  # Empty visible slot / no color
    PURPLE = 1
    WHITE = 2
    BLUE = 3
    YELLOW = 4
    ORANGE = 5
    BLACK = 6
    RED = 7
    GREEN = 8
    LOCOMOTIVE = 9  # Wildcard card; as a route color it means "any color"

    @classmethod
    def plain_colors(cls) -> List['CardColor']:
        """Non-wildcard colors PURPLE..GREEN, in enumeration order"""
        return [c for c in cls if cls.PURPLE <= c <= cls.GREEN]


class Owner(IntEnum):
    """Route ownership. Monotonic: never reverts to UNCLAIMED."""
    UNCLAIMED = 0
    SELF = 1
    OPPONENT = 2


@dataclass
class Route:
    """An undirected route between two cities"""
    from_city: int
    to_city: int
    length: int
    color: CardColor
    owner: Owner = Owner.UNCLAIMED

    @property
    def is_free(self) -> bool:
        return self.owner == Owner.UNCLAIMED

    @property
    def is_gray(self) -> bool:
        """Gray routes accept any single color"""
        return self.color == CardColor.LOCOMOTIVE

    def connects(self, a: int, b: int) -> bool:
        return ((self.from_city == a and self.to_city == b) or
                (self.from_city == b and self.to_city == a))

    def touches(self, city: int) -> bool:
        return self.from_city == city or self.to_city == city

    def other_end(self, city: int) -> int:
        return self.to_city if self.from_city == city else self.from_city

    def __str__(self) -> str:
        return f"{self.from_city}-{self.to_city} ({self.length} {self.color.name})"


@dataclass
class Objective:
    """A secret goal: connect two cities through owned routes"""
    from_city: int
    to_city: int
    score: int

    def __str__(self) -> str:
        return f"{self.from_city}->{self.to_city} [{self.score}pts]"


def _never_completed(state: 'GameState', objective: Objective) -> bool:
    return False


@dataclass
class GameState:
    """
    Observable game state for one decision.

    Objective completion is decided by the rules module of the game client,
    injected here as objective_checker(state, objective) -> bool.
    """
    nb_cities: int
    routes: List[Route] = field(default_factory=list)
    hand: List[int] = field(default_factory=lambda: [0] * len(CardColor))
    visible_cards: List[CardColor] = field(
        default_factory=lambda: [CardColor.NONE] * VISIBLE_CARD_SLOTS)
    objectives: List[Objective] = field(default_factory=list)
    wagons_left: int = 45
    opponent_wagons_left: int = 45
    last_turn: bool = False
    claimed_routes: List[int] = field(default_factory=list)  # Route indices we own
    nb_cards: Optional[int] = None  # Aggregate hand size as reported by the server
    objective_checker: Callable[['GameState', Objective], bool] = _never_completed

    def cards_of(self, color: CardColor) -> int:
        if 0 <= color < len(self.hand):
            return self.hand[color]
        return 0

    @property
    def total_cards(self) -> int:
        """Cards held, summed over PURPLE..LOCOMOTIVE"""
        return sum(self.cards_of(c) for c in CardColor if c != CardColor.NONE)

    @property
    def held_cards(self) -> int:
        """Server-reported hand size, falling back to the per-color total"""
        return self.nb_cards if self.nb_cards is not None else self.total_cards

    def is_valid_city(self, city: int) -> bool:
        return 0 <= city < self.nb_cities

    def is_objective_completed(self, objective: Objective) -> bool:
        return self.objective_checker(self, objective)

    def incomplete_objectives(self) -> List[Tuple[int, Objective]]:
        """(index, objective) for every held objective not yet completed"""
        return [(i, obj) for i, obj in enumerate(self.objectives)
                if not self.is_objective_completed(obj)]

    def all_objectives_completed(self) -> bool:
        return all(self.is_objective_completed(obj) for obj in self.objectives)

    def claim_route(self, route_index: int, owner: Owner = Owner.SELF):
        """Record a confirmed claim"""
        route = self.routes[route_index]
        if route.owner != Owner.UNCLAIMED:
            raise ValueError(f"Route {route} is already owned by {route.owner.name}")
        route.owner = owner
        if owner == Owner.SELF:
            self.claimed_routes.append(route_index)


# =============================================================================
# MOVES
# =============================================================================

class MoveType(Enum):
    """The four kinds of action a turn can produce"""
    CLAIM_ROUTE = "claim_route"
    DRAW_BLIND_CARD = "draw_blind_card"
    DRAW_CARD = "draw_card"
    DRAW_OBJECTIVES = "draw_objectives"


@dataclass(frozen=True)
class ClaimRoute:
    from_city: int
    to_city: int
    color: CardColor
    nb_locomotives: int


@dataclass(frozen=True)
class Move:
    """
    One turn action. Exactly one payload is set, matching action:
    claim for CLAIM_ROUTE, card for DRAW_CARD, nothing otherwise.
    """
    action: MoveType
    claim: Optional[ClaimRoute] = None
    card: Optional[CardColor] = None

    @classmethod
    def claim_route(cls, from_city: int, to_city: int, color: CardColor,
                    nb_locomotives: int) -> 'Move':
        return cls(MoveType.CLAIM_ROUTE,
                   claim=ClaimRoute(from_city, to_city, color, nb_locomotives))

    @classmethod
    def draw_card(cls, color: CardColor) -> 'Move':
        return cls(MoveType.DRAW_CARD, card=color)

    @classmethod
    def draw_blind(cls) -> 'Move':
        return cls(MoveType.DRAW_BLIND_CARD)

    @classmethod
    def draw_objectives(cls) -> 'Move':
        return cls(MoveType.DRAW_OBJECTIVES)

    def __str__(self) -> str:
        if self.action == MoveType.CLAIM_ROUTE:
            c = self.claim
            return (f"claim {c.from_city}-{c.to_city} with {c.color.name} "
                    f"(+{c.nb_locomotives} loco)")
        if self.action == MoveType.DRAW_CARD:
            return f"draw visible {self.card.name}"
        return self.action.value
