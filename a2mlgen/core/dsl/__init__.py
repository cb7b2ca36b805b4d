"""
DSL Processing Module
=====================

Enhanced A2ML tokenizing and parsing.

Components:
- lexer: tokens with source positions
- parser: recursive-descent parsing into the AST
"""
