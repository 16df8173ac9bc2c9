"""Packing pipeline: scoring, packing, constraints and placement."""
