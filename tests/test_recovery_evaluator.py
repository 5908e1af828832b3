"""
Tests for recovery_evaluator.py

Hub relays around blocked objectives and the emergency hand dump.
"""

from railbot.evaluators.base import DecisionContext
from railbot.evaluators.recovery_evaluator import (
    alternative_routing,
    emergency_unblock,
    find_hub_relay_claim,
    hub_relay,
)
from railbot.match_session import MatchSession
from railbot.models import Move, Objective
from tests.map_builders import B, G, GRAY, R, make_state

# 0 -R2- 5 -B2- 1, plus a detached green route; city 5 is the first hub
HUB_MAP = [
    (0, 5, 2, R),
    (5, 1, 2, B),
    (2, 3, 3, G),
]


def _context(state):
    return DecisionContext(state=state, session=MatchSession())


class TestHubRelay:
    """Claims toward an objective through a hub city"""

    def test_claims_on_first_leg(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={R: 2})
        move = find_hub_relay_claim(state, Objective(0, 1, 5))
        assert move == Move.claim_route(0, 5, R, 0)

    def test_claims_on_second_leg(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={B: 2})
        move = find_hub_relay_claim(state, Objective(0, 1, 5))
        assert move == Move.claim_route(5, 1, B, 0)

    def test_hub_equal_to_endpoint_skipped(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={R: 2})
        assert find_hub_relay_claim(state, Objective(0, 5, 5)) is None

    def test_unreachable_leg_skipped(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={R: 2}, opponent=[1])
        assert find_hub_relay_claim(state, Objective(0, 1, 5)) is None

    def test_context_relay_notes_reason(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={R: 2}, objectives=[(0, 1, 5)])
        context = _context(state)
        assert hub_relay(context) == Move.claim_route(0, 5, R, 0)
        assert any("hub relay" in note for note in context.reasoning)


class TestAlternativeRouting:
    """Hub relay first, network building otherwise"""

    def test_relay_when_possible(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={B: 2}, objectives=[(0, 1, 5)])
        assert alternative_routing(_context(state)) == Move.claim_route(5, 1, B, 0)

    def test_falls_back_to_longest_route(self):
        state = make_state(HUB_MAP, nb_cities=6, hand={G: 3}, objectives=[(0, 1, 5)])
        assert alternative_routing(_context(state)) == Move.claim_route(2, 3, G, 0)

    def test_always_returns_a_move(self):
        state = make_state(HUB_MAP, nb_cities=6, objectives=[(0, 1, 5)])
        assert alternative_routing(_context(state)) == Move.draw_blind()


class TestEmergencyUnblock:
    """Dump an oversized hand into whatever route fits"""

    LONG_MAP = [(0, 1, 5, R), (1, 2, 6, GRAY), (2, 3, 2, B)]

    def test_length_six_first(self):
        state = make_state(self.LONG_MAP, nb_cities=4, hand={R: 41})
        assert emergency_unblock(_context(state)) == Move.claim_route(1, 2, R, 0)

    def test_length_five_when_six_does_not_fit(self):
        state = make_state(self.LONG_MAP, nb_cities=4, hand={R: 41}, wagons=5)
        assert emergency_unblock(_context(state)) == Move.claim_route(0, 1, R, 0)

    def test_network_route_before_any_route(self):
        routes = [(3, 4, 2, B), (0, 1, 1, G), (1, 2, 2, B)]
        state = make_state(routes, nb_cities=5, hand={B: 2}, owned=[1])
        assert emergency_unblock(_context(state)) == Move.claim_route(1, 2, B, 0)

    def test_any_route_without_network(self):
        routes = [(3, 4, 2, B), (0, 1, 1, G), (1, 2, 2, B)]
        state = make_state(routes, nb_cities=5, hand={B: 2})
        assert emergency_unblock(_context(state)) == Move.claim_route(3, 4, B, 0)

    def test_draws_blind_when_nothing_fits(self):
        state = make_state(self.LONG_MAP, nb_cities=4)
        assert emergency_unblock(_context(state)) == Move.draw_blind()
