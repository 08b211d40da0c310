"""
Support Desk
============

Support case and support staff management service.
"""

__version__ = "1.0.0"
