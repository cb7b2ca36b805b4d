"""
Schema Resolution Module
========================

Turns a parsed specification into a validated, immutable schema.
"""
