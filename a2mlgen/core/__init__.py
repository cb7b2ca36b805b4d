"""
Core Compiler Logic
===================

Core modules of the specification compiler.

Modules:
- dsl: tokenizing and parsing of the enhanced A2ML dialect
- schema: semantic validation and schema resolution
- codegen: Python module generation and canonical text rendering
- compiler: composable compile/load entry points
"""
