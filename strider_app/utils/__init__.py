"""
Utility functions module.

Common helpers shared across the system, currently clock access and
elapsed-time formatting.

Time Semantics:
- The tracker's injected clock is authoritative for elapsed time
- Sample timestamps from a position source are informational only
- All clocks return timezone-aware UTC datetimes
"""
