"""
Gems Module - Merge, score and rank courses.
============================================

This module turns loaded source records into ranked recommendations:

- merge: Field precedence, catalog join, deduplication and query filters
- ranking: GemScore and ordering
- miner: GemMiner, the query surface over the loaded sources
- gened: General Education category table
- departments: Everyday department names → catalog codes

Pipeline flow:
    Loaders → join_sources → apply_filters → rank_courses → RankedCourse[]
"""

from gem_miner.gems.departments import DepartmentMatch, map_department
from gem_miner.gems.gened import GenEdCategory, get_gened_category, satisfies_gened_category
from gem_miner.gems.merge import (
    MERGE_PRECEDENCE,
    apply_filters,
    build_catalog_index,
    catalog_only_course,
    dedupe_catalog,
    dedupe_merged,
    fallback_course,
    join_sources,
    lookup_catalog,
    merge_course,
)
from gem_miner.gems.ranking import compute_score, logistics_fit, rank_courses
from gem_miner.gems.miner import GemMiner, create_gem_miner

__all__ = [
    # Departments / GenEd
    "DepartmentMatch",
    "map_department",
    "GenEdCategory",
    "get_gened_category",
    "satisfies_gened_category",
    # Merge
    "MERGE_PRECEDENCE",
    "apply_filters",
    "build_catalog_index",
    "catalog_only_course",
    "dedupe_catalog",
    "dedupe_merged",
    "fallback_course",
    "join_sources",
    "lookup_catalog",
    "merge_course",
    # Ranking
    "compute_score",
    "logistics_fit",
    "rank_courses",
    # Miner
    "GemMiner",
    "create_gem_miner",
]
