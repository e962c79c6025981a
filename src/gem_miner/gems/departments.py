"""
Departments Module - Map everyday department names to catalog codes.
====================================================================

Students say "cs" or "econ"; the catalog says COMPSCI and ECON. Some
subjects have no department code of their own (psychology), so the mapping
can also turn a term into a title search instead.
"""

from dataclasses import dataclass
from typing import Optional

# None means "no department code, search titles instead"
DEPARTMENT_ALIASES: dict[str, Optional[str]] = {
    "cs": "COMPSCI",
    "comp sci": "COMPSCI",
    "computer science": "COMPSCI",
    "compsci": "COMPSCI",
    "econ": "ECON",
    "economics": "ECON",
    "gov": "GOV",
    "government": "GOV",
    "political science": "GOV",
    "poli sci": "GOV",
    "math": "MATH",
    "mathematics": "MATH",
    "stat": "STAT",
    "stats": "STAT",
    "statistics": "STAT",
    "hist": "HIST",
    "history": "HIST",
    "eng": "ENGLISH",
    "english": "ENGLISH",
    "bio": "MCB",
    "biology": "MCB",
    "chem": "CHEM",
    "chemistry": "CHEM",
    "phys": "PHYSICS",
    "physics": "PHYSICS",
    "anthro": "ANTHRO",
    "anthropology": "ANTHRO",
    "soc": "SOCIOL",
    "sociology": "SOCIOL",
    "phil": "PHIL",
    "philosophy": "PHIL",
    "psy": None,
    "psych": None,
    "psychology": None,
    "art": "AFVS",
    "visual studies": "AFVS",
    "music": "MUSIC",
    "ling": "LING",
    "linguistics": "LING",
    "african american studies": "AFRAMER",
    "afam": "AFRAMER",
    "aaas": "AFRAMER",
    "east asian": "EALC",
    "chinese": "CHNSE",
    "japanese": "JAPN",
    "applied math": "APMTH",
    "applied computation": "APCOMP",
    "am": "APMTH",
    "ac": "APCOMP",
    "engineering": "ES",
    "engsci": "ES",
    "es": "ES",
    "neuro": "NEURO",
    "neuroscience": "NEURO",
    "env sci": "ESPP",
    "environmental science": "ESPP",
    "espp": "ESPP",
}

FULL_DEPARTMENT_NAMES = [
    "African & African Amer Studies",
    "Anthropology",
    "Applied Computation",
    "Applied Mathematics",
    "Applied Physics",
    "Art, Film, and Visual Studies",
    "Astronomy",
    "Biomedical Engineering",
    "Chemistry & Chemical Biology",
    "Classics, The",
    "Comparative Literature",
    "Computer Science",
    "Earth & Planetary Sciences",
    "East Asian Langs & Civ",
    "Economics",
    "Engineering Sciences",
    "English",
    "Folklore & Mythology",
    "General Education",
    "Government",
    "History",
    "History & Literature",
    "History of Art & Architecture",
    "History of Science",
    "Linguistics",
    "Mathematics",
    "Mind, Brain & Behavior",
    "Molecular & Cellular Biology",
    "Music",
    "Philosophy",
    "Physics",
    "Psychology",
    "Religion, The Study of",
    "Social Studies",
    "Sociology",
    "Statistics",
    "Theater, Dance & Media",
    "Women, Gender & Sexuality",
]


@dataclass(frozen=True)
class DepartmentMatch:
    """Result of mapping a user's department term."""

    department: Optional[str] = None
    title_search: Optional[str] = None
    is_multi_dept: bool = False


def map_department(search_term: str) -> DepartmentMatch:
    """
    Map a user search term to a department code or a title search.

    Example:
        >>> map_department("CS").department
        'COMPSCI'
        >>> map_department("psychology").title_search
        'psychology'
    """
    term = search_term.lower().strip()

    if term in DEPARTMENT_ALIASES:
        mapped = DEPARTMENT_ALIASES[term]
        if mapped is None:
            return DepartmentMatch(title_search=term)
        return DepartmentMatch(department=mapped)

    # "data science" spans STAT and COMPSCI
    if "data" in term and "science" in term:
        return DepartmentMatch(title_search="data", is_multi_dept=True)

    for full_name in FULL_DEPARTMENT_NAMES:
        lowered = full_name.lower()
        if term in lowered or lowered in term:
            return DepartmentMatch(title_search=term)

    return DepartmentMatch(department=term.upper())
