"""
Test suite for collateral-plugin-harness

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/integration/   : Full battery runs against the Lido plugin
"""
