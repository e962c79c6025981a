"""
GenEd Module - General Education category mapping.
===================================================

Harvard GenEd courses satisfy one of four category requirements. The
catalog does not carry the category, so it comes from this table.
"""

from enum import Enum
from typing import Optional

from gem_miner.shared.identifiers import strip_section_number


class GenEdCategory(str, Enum):
    """The four GenEd requirement categories."""

    AESTHETICS_AND_CULTURE = "Aesthetics and Culture"
    ETHICS_AND_CIVICS = "Ethics and Civics"
    HISTORIES_SOCIETIES_INDIVIDUALS = "Histories, Societies, Individuals"
    SCIENCE_AND_TECHNOLOGY = "Science and Technology in Society"


_AC = GenEdCategory.AESTHETICS_AND_CULTURE.value
_EC = GenEdCategory.ETHICS_AND_CIVICS.value
_HSI = GenEdCategory.HISTORIES_SOCIETIES_INDIVIDUALS.value
_STS = GenEdCategory.SCIENCE_AND_TECHNOLOGY.value

GENED_CATEGORIES: dict[str, str] = {
    # Aesthetics and Culture
    "GENED 1034": _AC,  # Texts in Transition
    "GENED 1049": _AC,  # East Asian Cinema
    "GENED 1067": _AC,  # Creativity
    "GENED 1074": _AC,  # The Ancient Greek Hero
    "GENED 1083": _AC,  # Permanent Impermanence
    "GENED 1090": _AC,  # What Is a Book?
    "GENED 1114": _AC,  # Painting's Doubt
    "GENED 1145": _AC,  # Global Japanese Cinema
    "GENED 1160": _AC,  # Harvard Gets Medieval
    "GENED 1168": _AC,  # Tragedy Today
    "GENED 1169": _AC,  # What Is the Good China Story?
    "GENED 1176": _AC,  # Sexuality in Literature
    "GENED 1177": _AC,  # Language in Culture and Society
    "GENED 1185": _AC,  # The Story of Armenia
    "GENED 1186": _AC,  # The Age of Anxiety
    "GENED 1196": _AC,  # Tradition in Everyday Life
    "GENED 1197": _AC,  # Grimm's Fairy Tales
    # Ethics and Civics
    "GENED 1059": _EC,  # Moral Inquiry in Tolstoy and Dostoevsky
    "GENED 1194": _EC,  # Philosophy of Technology
    "GENED 1174": _EC,  # Life and Death in the Anthropocene
    "GENED 1091": _EC,  # Classical Chinese Ethical and Political Theory
    "GENED 1115": _EC,  # Human Trafficking, Slavery and Abolition
    "GENED 1051": _EC,  # Reclaiming Argument
    "GENED 1025": _EC,  # Happiness
    "GENED 1102": _EC,  # Making Change When Change is Hard
    "GENED 1161": _EC,  # If There Is No God, All Is Permitted
    "GENED 1032": _EC,  # What is a Republic?
    "GENED 1189": _EC,  # U.S. K-12 Schools
    "GENED 1046": _EC,  # Evolving Morality
    "GENED 1192": _EC,  # Philanthropy, Nonprofits, and the Social Good
    "GENED 1120": _EC,  # The Political Economy of Globalization
    "GENED 1202": _EC,  # Unity and Division
    "EDU HT123": _EC,  # Informal Learning for Children
    # Histories, Societies, Individuals
    "GENED 1147": _HSI,  # American Food: A Global History
    "GENED 1105": _HSI,  # Can We Know Our Past?
    "GENED 1089": _HSI,  # The Border
    "GENED 1099": _HSI,  # Pyramid Schemes
    "GENED 1178": _HSI,  # Mexico's Culinary Roots
    "GENED 1062": _HSI,  # Ballots and Bibles
    "GENED 1203": _HSI,  # How the Germans Embraced Hitler
    "GENED 1052": _HSI,  # Race in a Polarized America
    "GENED 1092": _HSI,  # American Society and Public Policy
    "GENED 1118": _HSI,  # The Holocaust
    "GENED 1136": _HSI,  # Power and Civilization: China
    "GENED 1206": _HSI,  # Asian Americans as an American Paradox
    "GENED 1019": _HSI,  # The Caribbean Crucible
    "GENED 1088": _HSI,  # The Crusades and the Making of East and West
    "GENED 1017": _HSI,  # Forced to Be Free
    "GENED 1112": _HSI,  # Prediction
    "GENED 1068": _HSI,  # The United States and China
    "GENED 1159": _HSI,  # American Capitalism
    "GENED 1204": _HSI,  # Why Democracy?
    "GENED 1148": _HSI,  # Moctezuma's Mexico Then and Now
    "GENED 1198": _HSI,  # Ancient Global Economies
    "GENED 1071": _HSI,  # African Spirituality
    "EDU T268C": _HSI,  # Methods 2
    "EDU S515": _HSI,  # Emancipatory Inquiry
    # Science and Technology in Society
    "GENED 1038": _STS,  # Sleep
    "ANTHRO 1956": _STS,  # Robots in Human Ecology
    "GENED 1053": _STS,  # The Global Heart Disease Epidemic
    "GENED 1056": _STS,  # Human Nature
    "GENED 1098": _STS,  # Natural Disasters
    "GENED 1205": _STS,  # Writing in East Asia (listed in both; this one wins)
    "GENED 1037": _STS,  # Great Experiments that Changed Our World
    "GENED 1199": _STS,  # Learning and Unlearning
    "GENED 1031": _STS,  # Finding Our Way
    "GENED 1079": _STS,  # Why Is There No Cure for Health?
    "GENED 1187": _STS,  # AI, Computing and Thinking
    "GENED 1158": _STS,  # Water and the Environment
    "GENED 1104": _STS,  # Science and Cooking
    "GENED 1027": _STS,  # Human Evolution, Human Health, and Climate Change
    "GENED 1070": _STS,  # Life as a Planetary Phenomenon
    "GENED 1029": _STS,  # What is Life?
    "GENED 1080": _STS,  # How Music Works
    "GENED 1093": _STS,  # Who Lives, Who Dies
}


def get_gened_category(course_id: Optional[str]) -> Optional[str]:
    """
    Get the GenEd category of a course.

    Example:
        >>> get_gened_category("GENED 1038 001")
        'Science and Technology in Society'
    """
    if not course_id:
        return None

    normalized = course_id.upper().strip()
    if normalized in GENED_CATEGORIES:
        return GENED_CATEGORIES[normalized]
    return GENED_CATEGORIES.get(strip_section_number(normalized))


def courses_in_category(category: str) -> list[str]:
    """All course ids mapped to a category."""
    return [course_id for course_id, cat in GENED_CATEGORIES.items() if cat == category]


def satisfies_gened_category(course_id: str, category: str) -> bool:
    return get_gened_category(course_id) == category
