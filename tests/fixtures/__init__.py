"""Model fixtures for hookscope tests.

Kept as real source files: tests assert on their line numbers.
"""
