"""
Learner data persistence.

Keeps the value table, skill state and new-user flag in a single JSON document
(default ~/.pianoquiz/data.json):

    {"qtable": {"newUser": true,
                "table": {"[0,1,0]": {"[12]": 0.25}},
                "userState": {"notes": 0, "chords": 1, "scales": 0}}}

Data is read and written wholesale at session boundaries. Quiz reports are
stored as separate JSON files.
"""

from __future__ import annotations

import copy
import json
import re
from pathlib import Path

from loguru import logger

from src.adaptive.skill_state import MAX_LEVEL, SkillState
from src.adaptive.value_table import QTable
from src.study.session_tracker import QuizReport

DEFAULT_DATA_DIR = Path.home() / ".pianoquiz"

DEFAULT_DOCUMENT: dict = {
    "qtable": {
        "newUser": True,
        "table": {},
        "userState": {"notes": 0, "chords": 0, "scales": 0},
    }
}

_STATE_KEY = re.compile(r"^\[\s*(-?\d+)\s*,\s*(-?\d+)\s*,\s*(-?\d+)\s*\]$")
_ACTION_KEY = re.compile(r"^\[?\s*(-?\d+)\s*\]?$")


def state_to_key(state: SkillState) -> str:
    """Encode a state as "[notes,chords,scales]"."""
    return f"[{state.notes},{state.chords},{state.scales}]"


def state_from_key(key: str) -> SkillState | None:
    """Decode "[n,c,s]"; None when the key is malformed."""
    match = _STATE_KEY.match(key.strip())
    if not match:
        return None
    notes, chords, scales = (int(part) for part in match.groups())
    return SkillState(notes=notes, chords=chords, scales=scales)


def action_to_key(question_id: int) -> str:
    return f"[{question_id}]"


def action_from_key(key: str) -> int | None:
    match = _ACTION_KEY.match(key.strip())
    return int(match.group(1)) if match else None


def encode_value_table(table: QTable) -> dict[str, dict[str, float]]:
    return {
        state_to_key(state): {action_to_key(qid): value for qid, value in sorted(actions.items())}
        for state, actions in sorted(table.items())
    }


def decode_value_table(raw: dict) -> QTable:
    """Parse the persisted table, skipping malformed keys and values."""
    table: QTable = {}
    if not isinstance(raw, dict):
        return table

    for state_key, actions in raw.items():
        state = state_from_key(str(state_key))
        if state is None or not isinstance(actions, dict):
            logger.warning(f"Skipping malformed value-table state {state_key!r}")
            continue
        row = table.setdefault(state, {})
        for action_key, value in actions.items():
            qid = action_from_key(str(action_key))
            if qid is None or not isinstance(value, (int, float)):
                logger.warning(f"Skipping malformed value-table entry {state_key}{action_key}")
                continue
            row[qid] = float(value)
    return table


class LearnerStore:
    """
    JSON-backed store for one learner.

    The whole document is loaded on construction and written back on every
    save call.
    """

    def __init__(self, data_dir: Path | None = None, data_file: str = "data.json"):
        self.data_dir = data_dir or DEFAULT_DATA_DIR
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.data_path = self.data_dir / data_file
        self._data: dict = {}
        self.load()

    def load(self) -> bool:
        """
        Load the document from disk, creating the default one if needed.

        Returns:
            True if existing data was loaded, False if defaults were used
        """
        if not self.data_path.exists():
            logger.info(f"No learner data at {self.data_path}; creating defaults")
            self._data = copy.deepcopy(DEFAULT_DOCUMENT)
            self.save()
            return False

        try:
            with open(self.data_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read learner data {self.data_path}: {e}; using defaults")
            self._data = copy.deepcopy(DEFAULT_DOCUMENT)
            return False

        if not isinstance(data, dict):
            logger.warning(f"Learner data {self.data_path} is not a JSON object; using defaults")
            self._data = copy.deepcopy(DEFAULT_DOCUMENT)
            return False

        if not isinstance(data.get("qtable"), dict):
            data["qtable"] = copy.deepcopy(DEFAULT_DOCUMENT["qtable"])
        self._data = data
        logger.debug(f"Loaded learner data from {self.data_path}")
        return True

    def save(self) -> bool:
        """Write the document to disk."""
        try:
            with open(self.data_path, "w", encoding="utf-8") as f:
                json.dump(self._data, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save learner data to {self.data_path}: {e}")
            return False
        return True

    @property
    def _qtable_section(self) -> dict:
        return self._data.setdefault("qtable", copy.deepcopy(DEFAULT_DOCUMENT["qtable"]))

    # ========================================
    # New-user flag
    # ========================================

    def is_new_user(self) -> bool:
        return bool(self._qtable_section.get("newUser", True))

    def set_new_user(self, is_new: bool) -> bool:
        self._qtable_section["newUser"] = is_new
        return self.save()

    # ========================================
    # Value table & skill state
    # ========================================

    def load_value_table(self) -> QTable:
        return decode_value_table(self._qtable_section.get("table", {}))

    def save_value_table(self, table: QTable) -> bool:
        """Persist the table; a saved table means the learner is no longer new."""
        section = self._qtable_section
        section["table"] = encode_value_table(table)
        section["newUser"] = False
        return self.save()

    def load_user_state(self, max_level: int = MAX_LEVEL) -> SkillState:
        """Stored skill state, clamped into [0, max_level]."""
        raw = self._qtable_section.get("userState")
        if not isinstance(raw, dict):
            return SkillState()
        try:
            state = SkillState.from_dict(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Invalid stored skill state {raw!r}: {e}")
            return SkillState()
        if not state.is_valid(max_level):
            logger.warning(f"Stored skill state {state.as_tuple()} out of range; clamping")
            state = state.clamped(max_level)
        return state

    def save_user_state(self, state: SkillState) -> bool:
        self._qtable_section["userState"] = state.to_dict()
        return self.save()

    def reset(self) -> bool:
        """Forget the learner: default state, empty table, new-user flag set."""
        self._data["qtable"] = copy.deepcopy(DEFAULT_DOCUMENT["qtable"])
        return self.save()

    # ========================================
    # Quiz reports
    # ========================================

    def report_path(self, filename: str = "quiz_report.json") -> Path:
        return self.data_dir / filename

    def save_quiz_report(self, report: QuizReport, filename: str = "quiz_report.json") -> bool:
        path = self.report_path(filename)
        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(report.to_dict(), f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save quiz report to {path}: {e}")
            return False
        logger.debug(f"Saved quiz report to {path}")
        return True

    def load_quiz_report(self, filename: str = "quiz_report.json") -> QuizReport | None:
        path = self.report_path(filename)
        if not path.exists():
            return None
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
            return QuizReport.from_dict(data)
        except (OSError, json.JSONDecodeError, AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Could not read quiz report {path}: {e}")
            return None
