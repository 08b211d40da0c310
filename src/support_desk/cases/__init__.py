"""
Support Cases Module
====================

Bounded context for support cases and their assignment to support staff.

Responsibilities:
- Validate that an assigned alias belongs to an existing, active person
- Screen assignment reasoning for length and personal data
- Legacy paged and filtered case listings
- Seed sample cases into an empty store
"""
