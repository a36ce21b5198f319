"""
Data Models Package

This package contains all Pydantic models used by Account Lists.
All account data handed to the list views conforms to these schemas.
"""

from account_lists.models.account import (
    MISSING_IBAN_PLACEHOLDER,
    MISSING_NAME_PLACEHOLDER,
    Account,
    AccountPayload,
    AccountType,
    Currency,
)
from account_lists.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Account models
    "MISSING_IBAN_PLACEHOLDER",
    "MISSING_NAME_PLACEHOLDER",
    "Account",
    "AccountPayload",
    "AccountType",
    "Currency",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
