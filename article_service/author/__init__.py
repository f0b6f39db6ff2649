"""
Author Module
=============

Bounded context for article authors.

Authors are read-only from this service's point of view: the module only
exposes lookup by identifier, used to embed author data in article reads.
"""

__version__ = "1.0.0"
