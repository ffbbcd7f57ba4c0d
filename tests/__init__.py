"""
Tests for the NL reader.

Contains:
- tests/unit/          : Unit tests for individual modules
"""
