"""Shared test fixtures."""

import pytest

from tests.map_builders import DIAMOND_MAP, LINE_MAP, make_state


@pytest.fixture
def line_state():
    """Line map, empty hand, no objectives."""
    return make_state(LINE_MAP, nb_cities=4)


@pytest.fixture
def diamond_state():
    """Diamond map, empty hand, no objectives."""
    return make_state(DIAMOND_MAP, nb_cities=5)


@pytest.fixture(autouse=True)
def default_strategy_config():
    """Every test starts from the default config file."""
    from railbot import strategy_config
    strategy_config.reset_config()
    yield
    strategy_config.reset_config()
