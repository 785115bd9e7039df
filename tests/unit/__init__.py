"""Unit tests for qradar-lookup.

All HTTP traffic to QRadar is mocked with respx, so the tests need neither
network access nor a QRadar console.
"""
