"""
Code Generation Module
======================

Components:
- generator: Python module generation from a schema
- expressions: decode/encode expressions for schema items
- canonical: plain A2ML rendering of a schema
"""
