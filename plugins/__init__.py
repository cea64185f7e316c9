"""Algorithms shipped with the harness."""
