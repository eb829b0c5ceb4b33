"""Semantic search over the training resource library."""
