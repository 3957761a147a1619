"""Concrete implementations of the review-source and key-value-store interfaces."""
