"""
Test suite for bonding-curve-pool

Contains:
- tests/unit/          : Unit tests for individual modules
"""
