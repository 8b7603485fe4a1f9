"""
Test suite for bcmath-decimal

Contains:
- tests/unit/          : Unit tests for normalizer, engine, BigNumber, formatter, contracts
"""
