# Path: catalog_validator/cli/__init__.py
"""
Catalog Validator command-line interface.
"""

from .validate_cli import main

__all__ = ['main']
