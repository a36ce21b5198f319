"""
Audit Models for Account Lists

Every load of the accounts document is logged for audit purposes.
This provides:
1. Traceability of where the displayed accounts came from
2. Debugging information when a document is rejected
3. A record of how many accounts each load produced
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Loading
    ACCOUNTS_LOAD_STARTED = "accounts_load_started"
    ACCOUNTS_SOURCE_MISSING = "accounts_source_missing"

    # Decoding
    ACCOUNTS_DECODED = "accounts_decoded"
    ACCOUNTS_DECODE_FAILED = "accounts_decode_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every load attempt creates a handful of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., all events in one load)"
    )

    # Event details
    source: Optional[str] = Field(
        default=None,
        description="Where the accounts document was read from"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "source": self.source,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.load_started(source, correlation_id)
        event = AuditEventBuilder.accounts_decoded(source, 4, correlation_id)
    """

    @staticmethod
    def load_started(
        source: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_LOAD_STARTED,
            severity=AuditSeverity.DEBUG,
            correlation_id=correlation_id,
            source=source,
            description="Loading accounts",
        )

    @staticmethod
    def source_missing(
        source: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_SOURCE_MISSING,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            source=source,
            description="Accounts source not found",
        )

    @staticmethod
    def accounts_decoded(
        source: str,
        account_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_DECODED,
            correlation_id=correlation_id,
            source=source,
            description=f"Decoded {account_count} accounts",
            details={
                "account_count": account_count,
            },
        )

    @staticmethod
    def decode_failed(
        source: str,
        error_code: str,
        error_message: str,
        failed_index: Optional[int],
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ACCOUNTS_DECODE_FAILED,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            source=source,
            description=f"Accounts document rejected: {error_code}",
            details={
                "failed_index": failed_index,
            },
            error_code=error_code,
            error_message=error_message,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
        source: Optional[str] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            source=source,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
