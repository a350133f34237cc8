"""
Test suite for the token exchange engine

Contains:
- tests/unit/          : Unit tests for individual modules and swap scenarios
"""
