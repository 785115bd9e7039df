"""Test suite for qradar-lookup.

Run tests with:
    pytest tests/
    pytest tests/ -v  # verbose output
"""
