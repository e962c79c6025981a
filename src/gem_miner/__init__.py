"""
Gem Miner - Course recommendation data pipeline
===============================================

Merges three loosely structured sources into unified course records and
ranks them for a conversational course-recommendation assistant:

- Q-Report evaluation summaries (ratings, workload, sentiment, comments)
- The academic-year course catalog (meeting times, instructors, GenEds)
- Optional assessment-load signals (final exam, assessment lightness)

Pipeline flow: load sources → normalize identifiers → merge and deduplicate →
filter → rank by GemScore.
"""

__version__ = "0.1.0"
__author__ = "Gem Miner Team"
__license__ = "MIT"

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Main modules (imported on demand)
    "shared",
    "ingestion",
    "gems",
    "cli",
]
