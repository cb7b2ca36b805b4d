"""
A2ML Specification Compiler
===========================

Compiles "enhanced A2ML" specifications into Python modules with typed
models, decode/encode routines for the generic IF_DATA tree, and a canonical
plain-A2ML text constant.

This package provides:
- Lexing and recursive-descent parsing of the enhanced A2ML dialect
- Schema resolution with name synthesis and uniqueness checks
- Code generation of pydantic models and decode/encode logic
- A runtime representation of the generic tagged tree
"""

__version__ = "1.0.0"
__author__ = "a2mlgen Team"
