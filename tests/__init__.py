"""
Test Suite
==========

Test suite matching the a2mlgen/ directory structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Compile, load and use generated modules end to end
"""
