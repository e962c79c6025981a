"""
Signals Module - Assessment-load signals from the Canvas cache.
===============================================================

Optional per-course signals (``assessmentLightness``, ``finalExam``) scraped
from Canvas syllabi and stored as a JSON object keyed by course identifier.
A missing or unreadable cache simply means no signals.
"""

import json
import threading
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from gem_miner.shared.identifiers import strip_section_number
from gem_miner.shared.logging import get_logger
from gem_miner.shared.schemas import AssessmentSignal
from gem_miner.shared.utils import load_json

logger = get_logger(__name__)


class AssessmentSignalProvider:
    """Load-once, read-only view over the assessment-signal cache."""

    def __init__(self, cache_path: Path):
        self.cache_path = Path(cache_path)
        self._signals: Optional[dict[str, AssessmentSignal]] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._signals is not None

    def load_all(self) -> dict[str, AssessmentSignal]:
        if self._signals is not None:
            return self._signals

        with self._lock:
            if self._signals is not None:
                return self._signals

            if not self.cache_path.exists():
                logger.debug(f"No assessment-signal cache at {self.cache_path}")
                return {}

            try:
                data = load_json(self.cache_path)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to read assessment-signal cache {self.cache_path}: {e}")
                return {}

            if not isinstance(data, dict):
                logger.warning(f"Assessment-signal cache is not a JSON object: {self.cache_path}")
                return {}

            signals: dict[str, AssessmentSignal] = {}
            for course_id, value in data.items():
                try:
                    signals[course_id] = AssessmentSignal.model_validate(value)
                except ValidationError:
                    logger.warning(f"Skipping invalid assessment signal for {course_id}")

            self._signals = signals
            logger.info(f"Loaded {len(signals)} assessment signals")
            return signals

    def get(self, course_id: str) -> Optional[AssessmentSignal]:
        """Signal for a course, trying the literal then the canonical identifier."""
        signals = self.load_all()
        if course_id in signals:
            return signals[course_id]
        return signals.get(strip_section_number(course_id))

    def signals_for(self, course_ids: Iterable[str]) -> dict[str, AssessmentSignal]:
        """Signals for the given identifiers; ids without a signal are omitted."""
        found: dict[str, AssessmentSignal] = {}
        for course_id in course_ids:
            signal = self.get(course_id)
            if signal is not None:
                found[course_id] = signal
        return found
