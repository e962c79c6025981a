"""
Catalog Loader - Academic-year course catalog.
==============================================

Loads the AY catalog CSV (the authoritative list of courses offered this
year) into ``CatalogEntry`` objects and provides lookups:

- ``get_by_id``: exact, then base-code prefix, then department alias swap
- ``search`` / ``by_weekdays`` / ``by_term`` / ``by_subject`` filters

Header names are matched exactly (case-insensitive). Title-page and table of
contents rows are dropped, meeting times are normalized and instructor names
are cleaned of description bleed.
"""

import threading
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from gem_miner.ingestion.cleaner import InstructorCleaner, meeting_from_fields, parse_meeting_time
from gem_miner.ingestion.parser import ColumnResolver, RowParseError, get_value, read_delimited
from gem_miner.shared.config import CatalogConfig
from gem_miner.shared.logging import get_logger
from gem_miner.shared.identifiers import alias_candidates
from gem_miner.shared.schemas import CatalogEntry
from gem_miner.shared.utils import contains_ci

logger = get_logger(__name__)

CATALOG_COLUMNS = (
    "department",
    "subject",
    "course_number",
    "title",
    "course_id",
    "term",
    "credits",
    "weekdays",
    "start_time",
    "end_time",
    "instructors",
    "distribution",
    "requirements",
    "description",
)

# Compound meeting string and exam flag appear only in some exports
OPTIONAL_CATALOG_COLUMNS = ("meeting", "final_exam")


def compose_course_id(subject: str, course_number: str, fallback: str = "") -> str:
    """
    Compose the catalog identifier from subject and course number.

    The raw ``course_id`` column is used when no course number is present.

    Example:
        >>> compose_course_id("COMPSCI", "50")
        'COMPSCI 50'
    """
    if course_number.strip():
        return f"{subject.strip()} {course_number.strip()}".strip()
    return fallback.strip()


class CatalogLoader:
    """
    Load-once cache over the AY catalog CSV.

    Example:
        >>> catalog = CatalogLoader(Path("data/AY_2025_2026_courses.csv"))
        >>> catalog.get_by_id("CS 50").course_id
        'COMPSCI 50'
    """

    def __init__(self, csv_path: Path, config: Optional[CatalogConfig] = None):
        self.csv_path = Path(csv_path)
        self.config = config or CatalogConfig()
        self._instructors = InstructorCleaner(not_listed=self.config.not_listed_instructor)
        self._cache: Optional[list[CatalogEntry]] = None
        self._lock = threading.Lock()
        logger.debug(f"AY catalog loader initialized: {self.csv_path}")

    @property
    def is_loaded(self) -> bool:
        return self._cache is not None

    def clear_cache(self) -> None:
        with self._lock:
            self._cache = None

    # ─────────────────────────────────────────────────────────────────────────
    # Loading
    # ─────────────────────────────────────────────────────────────────────────

    def load_all(self) -> list[CatalogEntry]:
        """
        Load every catalog entry.

        Returns:
            Cached entries (empty list if the source is unavailable)
        """
        if self._cache is not None:
            return self._cache

        with self._lock:
            if self._cache is not None:
                return self._cache

            if not self.csv_path.exists():
                logger.warning(f"AY catalog CSV not found: {self.csv_path}")
                return []

            try:
                entries = self._read()
            except (OSError, UnicodeDecodeError, RowParseError) as e:
                logger.error(f"Failed to load AY catalog CSV {self.csv_path}: {e}")
                return []

            self._cache = entries
            logger.info(f"Loaded {len(entries)} catalog entries from {self.csv_path.name}")
            return entries

    def _read(self) -> list[CatalogEntry]:
        table = read_delimited(self.csv_path)
        if not table.headers:
            logger.warning(f"AY catalog CSV is empty: {self.csv_path}")
            return []

        logger.debug(f"Catalog headers: {', '.join(table.headers)}")
        resolver = ColumnResolver(table.headers, substring=False, source=self.csv_path.name)
        columns = resolver.resolve_all(CATALOG_COLUMNS, OPTIONAL_CATALOG_COLUMNS)

        entries: list[CatalogEntry] = []
        for line_num, row in enumerate(table.rows, start=2):
            entry = self._to_entry(row, columns, line_num)
            if entry is not None:
                entries.append(entry)
        return entries

    def _is_front_matter(self, title: str) -> bool:
        return any(marker in title for marker in self.config.front_matter_markers)

    def _to_entry(
        self, row: dict[str, str], columns: dict[str, Optional[str]], line_num: int
    ) -> Optional[CatalogEntry]:
        values = {name: get_value(row, header).strip() for name, header in columns.items()}

        if self._is_front_matter(values["title"]):
            return None

        course_id = compose_course_id(values["subject"], values["course_number"], values["course_id"])
        if not course_id:
            return None

        meeting = meeting_from_fields(values["weekdays"], values["start_time"], values["end_time"])
        if not meeting.is_scheduled and values["meeting"]:
            meeting = parse_meeting_time(values["meeting"])

        try:
            return CatalogEntry(
                course_id=course_id,
                subject=values["subject"],
                course_number=values["course_number"],
                title=values["title"],
                department=values["department"],
                term=values["term"],
                credits=values["credits"],
                weekdays=meeting.weekdays if meeting.is_scheduled else values["weekdays"],
                start_time=meeting.start_time if meeting.is_scheduled else values["start_time"],
                end_time=meeting.end_time if meeting.is_scheduled else values["end_time"],
                instructors=self._instructors.clean(values["instructors"]),
                distribution=values["distribution"],
                requirements=values["requirements"],
                description=values["description"],
                meeting=meeting,
                final_exam=values["final_exam"] or None,
            )
        except ValidationError as e:
            logger.warning(f"Failed to parse catalog line {line_num}: {e.errors()[0]['msg']}")
            return None

    # ─────────────────────────────────────────────────────────────────────────
    # Lookups
    # ─────────────────────────────────────────────────────────────────────────

    def get_by_id(self, course_id: Optional[str]) -> Optional[CatalogEntry]:
        """
        Find a catalog entry by identifier.

        Tries, in order: exact match; an entry whose id starts with
        ``course_id + " "`` (a base code against a sectioned offering);
        the same two checks after swapping equivalent department codes.
        """
        if not course_id or not course_id.strip():
            return None

        entries = self.load_all()
        search_id = course_id.upper().strip()

        for entry in entries:
            if entry.course_id.upper().strip() == search_id:
                return entry

        found = self._find_exact_or_prefix(entries, search_id)
        if found is not None:
            return found

        for candidate in alias_candidates(search_id, self.config.department_aliases):
            found = self._find_exact_or_prefix(entries, candidate)
            if found is not None:
                return found

        return None

    @staticmethod
    def _find_exact_or_prefix(entries: list[CatalogEntry], search_id: str) -> Optional[CatalogEntry]:
        prefix = search_id + " "
        for entry in entries:
            entry_id = entry.course_id.upper().strip()
            if entry_id == search_id or entry_id.startswith(prefix):
                return entry
        return None

    def search(self, keyword: str) -> list[CatalogEntry]:
        """Entries whose title or description contains the keyword."""
        return [
            e for e in self.load_all()
            if contains_ci(e.title, keyword) or contains_ci(e.description, keyword)
        ]

    def by_weekdays(self, pattern: str) -> list[CatalogEntry]:
        """Entries meeting on a weekday pattern such as ``Tue/Thu``."""
        wanted = pattern.lower()
        results = []
        for entry in self.load_all():
            weekdays = (entry.weekdays or entry.meeting.weekdays or "").lower()
            if weekdays and (wanted in weekdays or weekdays in wanted):
                results.append(entry)
        return results

    def by_term(self, term: str) -> list[CatalogEntry]:
        return [e for e in self.load_all() if contains_ci(e.term, term)]

    def by_subject(self, subject: str) -> list[CatalogEntry]:
        return [e for e in self.load_all() if contains_ci(e.subject, subject)]
