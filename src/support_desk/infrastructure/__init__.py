"""
Infrastructure Layer
=====================

Low-level technical concerns:
- Database engine and session lifecycle
- Entity store backends (in-memory and PostgreSQL)
"""
