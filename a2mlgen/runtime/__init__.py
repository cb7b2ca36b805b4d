"""
Generated Code Runtime
======================

The generic tagged tree and the decode/encode helpers imported by generated
modules.
"""
