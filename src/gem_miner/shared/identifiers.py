"""
Identifiers Module - Course identifier normalization.
=====================================================

Course identifiers arrive in several shapes across the sources:

- Q-Report rows name a specific section: ``ANTHRO 97Z 001``
- The catalog names the base course: ``ANTHRO 97Z``
- Two department codes are used for the same subject: ``CS`` / ``COMPSCI``

The canonical identifier drops a trailing section number. Only 001-099 is a
section number; 100-999 is an ordinary course number (``APMTH 109``).
"""

import re

_SECTION_SUFFIX = re.compile(r"\s+0\d{2}$")


def strip_section_number(course_id: str) -> str:
    """
    Remove a trailing section number (001-099) from a course identifier.

    Pure and idempotent.

    Example:
        >>> strip_section_number("ANTHRO 97Z 001")
        'ANTHRO 97Z'
        >>> strip_section_number("APMTH 109")
        'APMTH 109'
    """
    return _SECTION_SUFFIX.sub("", course_id.strip()).strip()


def matches_course_code(course_id: str, code: str) -> bool:
    """
    Exact-or-section match of an identifier against a course code.

    ``COMPSCI 50`` matches ``COMPSCI 50`` and ``COMPSCI 50 001`` but not
    ``COMPSCI 500``.
    """
    course_upper = (course_id or "").upper().strip()
    code_upper = (code or "").upper().strip()
    if not code_upper:
        return False
    return course_upper == code_upper or course_upper.startswith(code_upper + " ")


def alias_candidates(course_id: str, aliases: dict[str, str]) -> list[str]:
    """
    Swap an equivalent department code at the start of an identifier.

    Aliases are tried in both directions.

    Example:
        >>> alias_candidates("CS 50", {"CS": "COMPSCI"})
        ['COMPSCI 50']
        >>> alias_candidates("compsci 50", {"CS": "COMPSCI"})
        ['CS 50']
    """
    search_id = course_id.upper().strip()
    candidates: list[str] = []
    for short, canonical in aliases.items():
        short, canonical = short.upper(), canonical.upper()
        for src, dst in ((short, canonical), (canonical, short)):
            if search_id.startswith(src + " "):
                candidates.append(dst + search_id[len(src):])
    return candidates
