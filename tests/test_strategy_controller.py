"""
Tests for strategy_controller.py and the handler pipeline it builds on.
"""

import pytest

from railbot.evaluators.base import (
    DRAW_BLIND,
    DecisionContext,
    FunctionHandler,
    StrategyPipeline,
)
from railbot.match_session import MatchSession
from railbot.models import Move
from railbot.strategy_controller import (
    GamePhase,
    StrategyController,
    classify_phase,
    is_anti_opponent_mode,
    is_endgame,
    is_late_game,
)
from tests.map_builders import DIAMOND_MAP, R, make_state

OBJECTIVES = [(0, 4, 10)]


def _state(**kwargs):
    kwargs.setdefault('objectives', OBJECTIVES)
    return make_state(DIAMOND_MAP, **kwargs)


class TestPhaseClassification:
    """First matching phase wins"""

    def test_no_objectives(self):
        assert classify_phase(_state(objectives=[], wagons=2, last_turn=True)) == GamePhase.NO_OBJECTIVES

    def test_anti_opponent_needs_big_hand(self):
        assert is_anti_opponent_mode(_state(opponent_wagons=5, hand={R: 16}))
        assert not is_anti_opponent_mode(_state(opponent_wagons=5, hand={R: 15}))
        assert not is_anti_opponent_mode(_state(opponent_wagons=6, hand={R: 30}))

    def test_last_turn_is_anti_opponent(self):
        assert classify_phase(_state(last_turn=True)) == GamePhase.ANTI_OPPONENT

    def test_server_hand_size_counts(self):
        state = _state(opponent_wagons=4)
        state.nb_cards = 20
        assert classify_phase(state) == GamePhase.ANTI_OPPONENT

    @pytest.mark.parametrize("wagons,opponent_wagons", [(3, 45), (45, 3), (1, 2)])
    def test_endgame(self, wagons, opponent_wagons):
        state = _state(wagons=wagons, opponent_wagons=opponent_wagons)
        assert is_endgame(state)
        assert classify_phase(state) == GamePhase.ENDGAME

    @pytest.mark.parametrize("wagons,opponent_wagons", [(8, 45), (45, 8), (4, 30)])
    def test_late_game(self, wagons, opponent_wagons):
        state = _state(wagons=wagons, opponent_wagons=opponent_wagons)
        assert is_late_game(state)
        assert classify_phase(state) == GamePhase.LATE_GAME

    def test_all_complete(self):
        state = _state(objectives=[(3, 4, 3)], owned=[4])
        assert classify_phase(state) == GamePhase.ALL_COMPLETE

    def test_late_game_beats_all_complete(self):
        state = _state(objectives=[(3, 4, 3)], owned=[4], wagons=8)
        assert classify_phase(state) == GamePhase.LATE_GAME

    def test_mid_game(self):
        assert classify_phase(_state()) == GamePhase.MID_GAME


class TestStrategyPipeline:
    """Ordered handlers, first proposal wins"""

    def _context(self):
        return DecisionContext(state=_state(), session=MatchSession())

    def test_first_proposal_wins(self):
        pipeline = StrategyPipeline("test", [
            FunctionHandler("nothing", lambda ctx: None),
            FunctionHandler("objectives", lambda ctx: Move.draw_objectives()),
            DRAW_BLIND,
        ])
        context = self._context()
        assert pipeline.run(context) == Move.draw_objectives()
        assert context.reasoning == ["objectives: draw_objectives"]

    def test_condition_skips_handler(self):
        pipeline = StrategyPipeline("test", [
            FunctionHandler("gated", lambda ctx: Move.draw_objectives(), lambda ctx: False),
            DRAW_BLIND,
        ])
        assert pipeline.run(self._context()) == Move.draw_blind()

    def test_disabled_handler_skipped(self):
        handler = FunctionHandler("off", lambda ctx: Move.draw_objectives())
        handler.enabled = False
        pipeline = StrategyPipeline("test", [handler, DRAW_BLIND])
        assert pipeline.run(self._context()) == Move.draw_blind()

    def test_empty_result(self):
        pipeline = StrategyPipeline("test", [FunctionHandler("nothing", lambda ctx: None)])
        assert pipeline.run(self._context()) is None


class TestStrategyController:
    """Every phase pipeline ends in a move"""

    def test_every_phase_has_a_pipeline(self):
        controller = StrategyController()
        for phase in GamePhase:
            assert controller.pipeline_for(phase).handlers

    def test_decide_records_phase(self):
        context = DecisionContext(state=_state(objectives=[]), session=MatchSession())
        move = StrategyController().decide(context)
        assert move == Move.draw_objectives()
        assert context.phase == GamePhase.NO_OBJECTIVES.value

    @pytest.mark.parametrize("kwargs", [
        dict(objectives=[]),
        dict(last_turn=True),
        dict(wagons=2),
        dict(wagons=7),
        dict(objectives=[(3, 4, 3)], owned=[4]),
        dict(),
        dict(hand={R: 45}),
    ])
    def test_decide_always_moves(self, kwargs):
        context = DecisionContext(state=_state(**kwargs), session=MatchSession())
        assert StrategyController().decide(context) is not None
