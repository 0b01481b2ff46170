# Path: catalog_validator/tests/__init__.py
"""Tests for the catalog validator."""
