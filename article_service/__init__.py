"""
Article Service
===============

Layered HTTP service for articles and their authors.
"""

__version__ = "1.0.0"
