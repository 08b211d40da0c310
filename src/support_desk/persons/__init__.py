"""
Support Persons Module
======================

Bounded context for the support staff cases can be assigned to.

Responsibilities:
- Validate person records (alias, contact, specializations, seniority)
- Keep alias and email unique among active persons
- Soft-delete, refused while any case still references the alias
- Filtered, sorted and paginated listing of active persons
"""
