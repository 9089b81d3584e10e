"""Library Tracker - Core Application Package

This package contains the core application modules including:
- Item and user models (items.py, users.py)
- Operation outcomes (outcomes.py)
- Registry and borrowing workflow (library.py)
- CLI interface (main.py)
- API endpoints (api.py)
"""
