"""
Tests Package - Unit and integration tests for Gem Miner.
=========================================================

Test modules:
- test_shared: Identifier, config, schema and utility tests
- test_ingestion: Parser, cleaner and loader tests
- test_gems: Scoring, ranking, merge and GemMiner tests
- test_cli: Typer command tests

Run tests with:
    pytest tests/
    pytest tests/ -v --cov=gem_miner
    pytest tests/ -m "not integration"
"""
