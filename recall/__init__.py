"""Hybrid retrieval over a personal email or notes corpus."""
