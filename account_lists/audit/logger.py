"""
Audit Logger

Every load of the accounts document is logged.
This provides:
1. Traceability of which document fed the list views
2. Debugging capability when a document is rejected

The audit logger:
- Is synchronous, like the decode it reports on
- Never raises (a logging failure must not hide the accounts)
- Supports correlation IDs to trace related events
"""

import contextlib
import logging
import sys
from typing import Callable, Optional
from uuid import UUID, uuid4

import structlog

from account_lists.config.settings import AppSettings
from account_lists.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def _processors(json_output: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors(json_output=True),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(settings: Optional[AppSettings] = None) -> None:
    """
    Apply log level, renderer and environment from settings.

    Debug mode forces the DEBUG level. Every event carries the
    application environment. Safe to call more than once; the last
    call wins.
    """
    settings = settings or AppSettings()
    level = logging.DEBUG if settings.debug_mode else settings.log_level_number

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
        force=True,
    )
    logging.getLogger("account_lists").setLevel(level)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(environment=settings.app_environment)

    structlog.configure(
        processors=_processors(json_output=settings.log_json),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


class AuditLogger:
    """
    Central audit logging service.

    Logs every event to the structured local log.
    """

    def __init__(self, logger_name: str = "account_lists.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be written.
        """
        try:
            log_dict = event.to_log_dict()
            if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            self._report_failure(e, event_id=str(getattr(event, "event_id", "")))
            return False

        return True

    def _report_failure(self, error: Exception, **context) -> None:
        with contextlib.suppress(Exception):
            self._logger.error("audit_logging_failed", error=str(error), **context)

    def _emit(self, build: Callable[..., AuditEvent], **kwargs) -> bool:
        """Build an event and log it; a build failure is reported like a write failure."""
        try:
            event = build(**kwargs)
        except Exception as e:
            self._report_failure(e, builder=build.__name__)
            return False
        return self.log(event)

    def log_load_started(self, source: str, correlation_id: UUID) -> None:
        """Log the start of an accounts load."""
        self._emit(
            AuditEventBuilder.load_started,
            source=source,
            correlation_id=correlation_id,
        )

    def log_source_missing(self, source: str, correlation_id: UUID) -> None:
        """Log a missing accounts source."""
        self._emit(
            AuditEventBuilder.source_missing,
            source=source,
            correlation_id=correlation_id,
        )

    def log_accounts_decoded(
        self,
        source: str,
        account_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a successful decode."""
        self._emit(
            AuditEventBuilder.accounts_decoded,
            source=source,
            account_count=account_count,
            correlation_id=correlation_id,
        )

    def log_decode_failed(
        self,
        source: str,
        error_code: str,
        error_message: str,
        failed_index: Optional[int],
        correlation_id: UUID,
    ) -> None:
        """Log a rejected accounts document."""
        self._emit(
            AuditEventBuilder.decode_failed,
            source=source,
            error_code=error_code,
            error_message=error_message,
            failed_index=failed_index,
            correlation_id=correlation_id,
        )

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
        source: Optional[str] = None,
    ) -> None:
        """Log an error."""
        self._emit(
            AuditEventBuilder.system_error,
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
            source=source,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a load. Pass it through all
    subsequent operations.
    """
    return uuid4()
