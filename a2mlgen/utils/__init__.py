"""
Shared Utilities
================

Common helpers used across the compiler.

Modules:
- naming: tag and name normalization, identifier validation
- tracking: duplicate detection
- diagnostics: error taxonomy and error context
"""
