"""
CLI Module - Command-line interface for Gem Miner.
==================================================

Provides CLI commands for:
- Ranking hidden-gem courses
- Listing catalog courses
- Looking up a single course
- Checking data-source status

Usage:
    gem-miner --help
    gem-miner gems --department econ --max-hours 5
    gem-miner catalog --subject GENED
    gem-miner course "CS 50"

Components:
- main: Typer CLI application
"""

from gem_miner.cli.main import app, cli

__all__ = ["app", "cli"]
