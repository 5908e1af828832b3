"""
Decision Logger

Captures every decision the bot makes: the phase, a summary of the state,
the move chosen and the reasoning behind it. This enables post-game
analysis and debugging of the strategy.

Enabled by global.decision_log_enabled in the strategy config. Log files
are rotated per match.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .match_session import MatchSession
from .models import CardColor, GameState, Move
from .strategy_config import get_config

# Player name for log filename
_log_username = os.environ.get('RAILBOT_PLAYER', 'railbot')

# Log directory
LOG_DIR = Path(os.environ.get('RAILBOT_LOG_DIR', Path(__file__).parent.parent / "logs"))

# Decision log file path
DECISION_LOG_PATH = LOG_DIR / f"{_log_username}_decisions.log"

# Dedicated decision logger
decision_logger = logging.getLogger("decision_log")
decision_logger.setLevel(logging.INFO)
decision_logger.propagate = False  # Don't propagate to root logger

_file_handler: Optional[logging.FileHandler] = None


def is_enabled() -> bool:
    return bool(get_config().get_global('decision_log_enabled', False))


def _ensure_handler():
    """Lazily initialize the file handler."""
    global _file_handler
    if _file_handler is None:
        DECISION_LOG_PATH.parent.mkdir(parents=True, exist_ok=True)
        _file_handler = logging.FileHandler(str(DECISION_LOG_PATH))
        _file_handler.setFormatter(logging.Formatter('%(message)s'))  # Raw format
        decision_logger.addHandler(_file_handler)


def log_decision(
    state: GameState,
    move: Move,
    phase: str = "",
    reasoning: Optional[List[str]] = None,
    decision_number: int = 0,
    was_emergency: bool = False,
    session: Optional[MatchSession] = None,
):
    """
    Log one decision with a state summary.

    Args:
        state: The state the decision was made on
        move: The move returned
        phase: Phase chosen by the strategy controller
        reasoning: Handler reasoning, in order
        decision_number: Decision count within the match
        was_emergency: True when decision safety replaced the move
        session: Match session, for the objective being pursued
    """
    if not is_enabled():
        return
    _ensure_handler()

    timestamp = datetime.now().isoformat()
    objectives = ", ".join(
        f"{obj}{' ✓' if state.is_objective_completed(obj) else ''}" for obj in state.objectives
    ) or "none"

    entry_lines = [
        f"=== DECISION {decision_number} @ {timestamp} ===",
        f"Phase: {phase}",
        f"Wagons: {state.wagons_left} (opponent {state.opponent_wagons_left}), "
        f"LastTurn: {state.last_turn}",
        f"Cards: {state.held_cards}, Visible: {[CardColor(c).name for c in state.visible_cards]}",
        f"Objectives: {objectives}",
    ]
    if session is not None and session.has_target:
        path = "-".join(str(city) for city in session.current_path)
        entry_lines.append(f"Pursuing: objective #{session.current_objective} via {path}")
    entry_lines += [
        "",
        f"Chosen: {move}" + (" (EMERGENCY)" if was_emergency else ""),
    ]

    if reasoning:
        entry_lines.append(f"Reasoning: {' | '.join(reasoning)}")

    entry_lines.append("=" * 50)
    entry_lines.append("")  # Blank line between entries

    decision_logger.info('\n'.join(entry_lines))


def rotate_decision_log(opponent_name: str = None, won: bool = None):
    """
    Rotate the decision log file after a match ends.

    Args:
        opponent_name: Name of the opponent (for filename)
        won: Whether the bot won (for filename)
    """
    global _file_handler

    try:
        if _file_handler is None:
            return  # No log to rotate

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        result_str = "win" if won else "loss" if won is not None else "unknown"
        opponent_str = opponent_name.replace(' ', '_') if opponent_name else "unknown"

        new_filename = f"{_log_username}_{timestamp}_vs_{opponent_str}_{result_str}_decisions.log"
        new_path = DECISION_LOG_PATH.parent / new_filename

        # Flush and close current handler
        _file_handler.flush()
        _file_handler.close()
        decision_logger.removeHandler(_file_handler)
        _file_handler = None

        if DECISION_LOG_PATH.exists() and DECISION_LOG_PATH.stat().st_size > 0:
            shutil.move(str(DECISION_LOG_PATH), str(new_path))

    except OSError as e:
        # Use standard logging for errors (decision_logger might be broken)
        logging.getLogger(__name__).error(f"Error rotating decision log: {e}")

