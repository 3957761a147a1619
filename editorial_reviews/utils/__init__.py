"""Shared utilities: logging, errors, text normalization, HTML scanning, truncation."""
