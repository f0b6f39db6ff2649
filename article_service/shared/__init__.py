"""
Shared Kernel Module
====================

Generic infrastructure used across bounded contexts (article, author):
logging, middleware, error handlers.

DO NOT add article or author business logic to the shared kernel.
"""

__version__ = "1.0.0"
