"""
Shared API
==========

Middleware and exception handlers applied to the whole application.
"""
