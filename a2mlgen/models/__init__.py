"""
Data Models
===========

Pydantic data models used across the compiler pipeline.

Models:
- ast: syntax tree produced by the parser
- schema: resolved schema produced by the resolver
- results: compilation results
"""
