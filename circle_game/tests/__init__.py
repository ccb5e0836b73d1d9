"""
Tests for Circle Game.
"""
