"""
Test suite for calcsuite

Contains:
- tests/unit/          : Unit tests for formula modules, contracts, catalog and CLI
"""
