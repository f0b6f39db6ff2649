"""
Infrastructure Layer
====================

Low-level technical concerns shared by all modules (database connector).
"""
