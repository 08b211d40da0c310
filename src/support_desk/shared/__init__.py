"""
Shared Kernel Module
====================

Shared infrastructure and domain elements used by every bounded context
(support cases and support persons).

Architecture Pattern: Modular Monolith
- Each module (cases, persons) is a bounded context
- Shared kernel holds generic query primitives, logging, telemetry and API glue
- The two contexts meet only through the entity store

DO NOT add case or person business rules to the shared kernel.
"""
