"""
Main Orchestrator for Account Lists

This module ties together all the components and defines the
end-to-end flow for showing accounts:

    source file → read → decode → audit → presenters

The coordinator owns reading and decoding. Presenters only ever see a
complete, validated list or nothing at all.
"""

from importlib import resources
from pathlib import Path
from typing import Optional, Union
from uuid import UUID

from account_lists.audit import AuditLogger, configure_logging, create_correlation_id
from account_lists.config import get_settings
from account_lists.decoding import AccountDecodeError, AccountDecoder
from account_lists.models.account import Account


BUNDLED_ACCOUNTS_RESOURCE = "accounts.json"


class AccountListsCoordinator:
    """
    Loads the accounts shown by the list views.

    Flow:
    1. Resolve → configured file, else the bundled document
    2. Read → raw bytes (a missing source means no accounts)
    3. Decode → full list or an AccountDecodeError
    """

    def __init__(
        self,
        decoder: Optional[AccountDecoder] = None,
        audit_logger: Optional[AuditLogger] = None,
        accounts_file: Optional[Union[str, Path]] = None,
    ):
        self._decoder = decoder or AccountDecoder()
        self._audit_logger = audit_logger
        self._accounts_file = accounts_file

    def resolve_source(self):
        """
        Get the location of the accounts document.

        Returns a Path for configured files and an importlib
        Traversable for the bundled document.
        """
        configured = self._accounts_file or get_settings().app.accounts_file
        if configured:
            return Path(configured)
        return resources.files("account_lists.data").joinpath(BUNDLED_ACCOUNTS_RESOURCE)

    def read_source(self) -> Optional[bytes]:
        """Read the raw accounts document, or None if it does not exist."""
        source = self.resolve_source()
        if not source.is_file():
            return None
        return source.read_bytes()

    def fetch_accounts(self, correlation_id: Optional[UUID] = None) -> list[Account]:
        """
        Read and decode the accounts document.

        Returns:
            Decoded accounts, or an empty list if there is no document

        Raises:
            AccountDecodeError: the document exists but was rejected
            OSError: the document exists but could not be read
        """
        correlation_id = correlation_id or create_correlation_id()
        source = str(self.resolve_source())

        if self._audit_logger:
            self._audit_logger.log_load_started(source, correlation_id)

        try:
            data = self.read_source()
        except OSError as e:
            if self._audit_logger:
                self._audit_logger.log_error(
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                    source=source,
                )
            raise

        if data is None:
            if self._audit_logger:
                self._audit_logger.log_source_missing(source, correlation_id)
            return []

        try:
            accounts = self._decoder.decode(data)
        except AccountDecodeError as e:
            if self._audit_logger:
                self._audit_logger.log_decode_failed(
                    source=source,
                    error_code=e.code,
                    error_message=str(e),
                    failed_index=e.index,
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            self._audit_logger.log_accounts_decoded(source, len(accounts), correlation_id)

        return accounts


def create_app_components(
    accounts_file: Optional[Union[str, Path]] = None,
):
    """
    Factory function to create all application components.

    Returns:
        (coordinator, presenters) where presenters maps each
        AccountListStyle to its AccountListPresenter
    """
    from account_lists.presenter import AccountListPresenter, AccountListStyle

    settings = get_settings()
    configure_logging(settings.app)

    audit_logger = AuditLogger()
    coordinator = AccountListsCoordinator(
        audit_logger=audit_logger,
        accounts_file=accounts_file,
    )

    presenters = {
        style: AccountListPresenter(coordinator, style=style)
        for style in AccountListStyle
    }

    return coordinator, presenters
