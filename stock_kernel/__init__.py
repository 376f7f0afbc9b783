"""
Stock Kernel - in-memory stock administration core

A single-writer, audit-on-every-mutation store with:
- Stock entries and exits that never drive stock negative
- User and supplier directory management
- Append-only, newest-first audit log
- JSON backup export and all-or-nothing restore
"""

__version__ = "0.1.0"
