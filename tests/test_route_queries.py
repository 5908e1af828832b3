"""
Tests for route_queries.py

Route ownership lookups, the card payment policy and draw targets.
"""

import pytest

from railbot.models import CardColor, MoveType, Owner
from railbot.pathfinding import shortest_path
from railbot.route_queries import (
    aggressive_draw_target,
    can_claim,
    draw_for_route,
    draw_target,
    find_route,
    network_cities,
    path_breakdown,
    route_owner,
    route_points,
)
from tests.map_builders import B, G, GRAY, LINE_MAP, LOCO, NONE, R, make_state


def _single_route(length, color, hand, wagons=45):
    return make_state([(0, 1, length, color)], nb_cities=2, hand=hand, wagons=wagons)


class TestRouteOwner:
    """Ownership lookup in both directions"""

    def test_unclaimed_self_opponent(self):
        state = make_state(LINE_MAP, nb_cities=4, owned=[0], opponent=[1])
        assert route_owner(state, 0, 1) == Owner.SELF
        assert route_owner(state, 2, 1) == Owner.OPPONENT
        assert route_owner(state, 3, 2) == Owner.UNCLAIMED

    def test_no_such_route(self, line_state):
        assert route_owner(line_state, 0, 2) is None

    def test_find_unclaimed_double_route(self):
        """With a double route, the free twin is found"""
        state = make_state([(0, 1, 2, R), (0, 1, 2, B)], nb_cities=2, opponent=[0])
        assert find_route(state, 0, 1) == 0
        assert find_route(state, 0, 1, unclaimed_only=True) == 1


class TestColoredRoutePayment:
    """Colored routes: exact color, then top up with locomotives"""

    def test_exact_color_only(self):
        plan = can_claim(_single_route(3, R, {R: 3, LOCO: 2}), 0, 1)
        assert plan.color == R
        assert plan.nb_locomotives == 0

    def test_topped_up_with_locomotives(self):
        plan = can_claim(_single_route(3, R, {R: 1, LOCO: 2}), 0, 1)
        assert plan.color == R
        assert plan.nb_locomotives == 2

    def test_locomotives_only_still_reported_as_route_color(self):
        plan = can_claim(_single_route(3, R, {LOCO: 3}), 0, 1)
        assert plan.color == R
        assert plan.nb_locomotives == 3

    def test_wrong_color_cannot_pay(self):
        assert can_claim(_single_route(3, R, {B: 5, LOCO: 1}), 0, 1) is None


class TestGrayRoutePayment:
    """Gray routes: single color with most cards, then first topped-up color"""

    def test_single_color_preferred_over_locomotives(self):
        plan = can_claim(_single_route(3, GRAY, {R: 3}), 0, 1)
        assert plan.color == R
        assert plan.nb_locomotives == 0

    def test_color_with_most_cards_wins(self):
        plan = can_claim(_single_route(3, GRAY, {R: 3, G: 5}), 0, 1)
        assert plan.color == G

    def test_tie_goes_to_enumeration_order(self):
        """BLUE comes before RED in the color enumeration"""
        plan = can_claim(_single_route(3, GRAY, {R: 3, B: 3}), 0, 1)
        assert plan.color == B

    def test_first_color_topped_up(self):
        plan = can_claim(_single_route(3, GRAY, {R: 1, LOCO: 2}), 0, 1)
        assert plan.color == R
        assert plan.nb_locomotives == 2

    def test_topping_up_follows_enumeration_not_count(self):
        """BLUE (1 card) is tried before RED (2 cards) when topping up"""
        plan = can_claim(_single_route(4, GRAY, {R: 2, B: 1, LOCO: 3}), 0, 1)
        assert plan.color == B
        assert plan.nb_locomotives == 3

    def test_locomotives_alone(self):
        plan = can_claim(_single_route(3, GRAY, {LOCO: 3}), 0, 1)
        assert plan.nb_locomotives == 3

    def test_not_enough_cards(self):
        assert can_claim(_single_route(3, GRAY, {R: 1}), 0, 1) is None


class TestClaimLimits:
    """Wagon budget and locomotive-count bounds"""

    def test_not_enough_wagons(self):
        assert can_claim(_single_route(3, R, {R: 3}, wagons=2), 0, 1) is None

    def test_owned_route_not_claimable(self):
        state = make_state(LINE_MAP, nb_cities=4, hand={R: 5}, owned=[0])
        assert can_claim(state, 0, 1) is None

    def test_missing_route(self, line_state):
        assert can_claim(line_state, 0, 2) is None

    @pytest.mark.parametrize("hand", [
        {R: 6}, {R: 2, LOCO: 4}, {LOCO: 6}, {B: 1, LOCO: 5}, {G: 6, LOCO: 6},
    ])
    @pytest.mark.parametrize("color", [R, GRAY])
    def test_locomotive_count_within_bounds(self, hand, color):
        plan = can_claim(_single_route(6, color, hand), 0, 1)
        if plan is not None:
            assert 0 <= plan.nb_locomotives <= 6

    def test_plan_to_move(self):
        move = can_claim(_single_route(2, B, {B: 2}), 0, 1).to_move()
        assert move.action == MoveType.CLAIM_ROUTE
        assert (move.claim.from_city, move.claim.to_city) == (0, 1)


class TestDrawTargets:
    """Which visible card to take for a route"""

    def test_locomotive_first(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[R, B, LOCO, G, NONE])
        assert draw_target(state, B) == LOCO

    def test_exact_color(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[R, G, B, NONE, NONE])
        assert draw_target(state, B) == B

    def test_colored_route_no_match_draws_blind(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[R, G, NONE, NONE, NONE])
        assert draw_target(state, B) is None

    def test_gray_route_takes_any_color(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[NONE, G, R, NONE, NONE])
        assert draw_target(state, GRAY) == G

    def test_aggressive_settles_for_other_color(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[NONE, R, G, NONE, NONE])
        assert aggressive_draw_target(state, B) == R

    def test_empty_window(self, line_state):
        assert aggressive_draw_target(line_state, GRAY) is None

    def test_draw_for_route_moves(self):
        state = make_state(LINE_MAP, nb_cities=4, visible=[NONE, R, NONE, NONE, NONE])
        move = draw_for_route(state, 1, 2)
        assert move.action == MoveType.DRAW_BLIND_CARD

        move = draw_for_route(state, 1, 2, aggressive=True)
        assert move.action == MoveType.DRAW_CARD
        assert move.card == R

    def test_draw_for_missing_route_is_blind(self, line_state):
        assert draw_for_route(line_state, 0, 2).action == MoveType.DRAW_BLIND_CARD

    def test_draw_for_double_route_uses_open_twin(self):
        state = make_state([(0, 1, 2, B), (0, 1, 2, R)], nb_cities=2,
                           visible=[B, R, NONE, NONE, NONE], opponent=[0])
        assert draw_for_route(state, 0, 1).card == R


class TestNetworkAndBreakdown:
    """Network cities and path classification"""

    def test_network_cities(self):
        state = make_state(LINE_MAP, nb_cities=4, owned=[0, 1])
        assert network_cities(state) == {0, 1, 2}

    def test_network_ignores_bad_indices(self, line_state):
        line_state.claimed_routes = [42, -1]
        assert network_cities(line_state) == set()

    def test_path_breakdown(self):
        state = make_state(LINE_MAP, nb_cities=4, owned=[0], opponent=[3])
        breakdown = path_breakdown(state, shortest_path(state, 0, 3))
        assert breakdown.owned == 1
        assert breakdown.unclaimed == 2
        assert breakdown.blocked == 0
        assert breakdown.routes_needed == 2
        assert breakdown.unclaimed_edges == [(1, 2), (2, 3)]

    def test_route_points_table(self):
        assert [route_points(n) for n in range(1, 7)] == [1, 2, 4, 7, 10, 15]
        assert route_points(9) == 0

    def test_hand_colors_counted(self):
        state = make_state(LINE_MAP, nb_cities=4, hand={R: 2, LOCO: 1})
        assert state.cards_of(CardColor.RED) == 2
        assert state.total_cards == 3
