"""
geocircle Test Suite

Tests for the circle evaluator, its builder and angle reduction.
"""
