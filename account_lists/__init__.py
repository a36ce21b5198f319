"""
Account Lists - Source Package

Loads a bundled JSON document of bank accounts, decodes it into
validated, immutable records and prepares them for list views.

PRINCIPLES:
1. All or nothing: a rejected document yields no accounts
2. Display fields are never blank
3. Every load is auditable
"""

__version__ = "1.0.0"
