"""
Account Decoder

Turns the raw accounts document into a list of Account records.

Decoding is a single fail-fast pass:
1. Bytes must be valid UTF-8
2. Text must be valid JSON
3. Every element of `accounts` must match AccountPayload
4. Currency and account type must be known values

Any failure rejects the whole document. A partially decoded list is
never returned.
"""

import json
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, Field, ValidationError

from account_lists.models.account import (
    MISSING_IBAN_PLACEHOLDER,
    MISSING_NAME_PLACEHOLDER,
    Account,
    AccountPayload,
    AccountType,
    Currency,
)


logger = structlog.get_logger(__name__)

ACCOUNTS_KEY = "accounts"
ACCOUNT_NUMBER_KEY = "accountNumber"


# =============================================================================
# ERRORS
# =============================================================================

class AccountDecodeError(Exception):
    """Base exception for account decoding errors."""

    code: str = "decode_error"

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        super().__init__(message)


class EmptyDataError(AccountDecodeError):
    """Source could not be read as UTF-8 text."""
    code = "empty_data"


class MalformedJSONError(AccountDecodeError):
    """Source text is not valid JSON."""
    code = "malformed_json"


class InvalidJSONDataError(AccountDecodeError):
    """A required field is missing or an account field has the wrong type."""
    code = "invalid_json_data"


class InvalidAccountNumberError(AccountDecodeError):
    """Account number is missing or neither a string nor an integer."""
    code = "invalid_account_number"


class InvalidCurrencyError(AccountDecodeError):
    """Currency is not one of the supported currencies."""

    code = "invalid_currency"

    def __init__(self, value: str, index: Optional[int] = None):
        self.value = value
        super().__init__(f"Unsupported currency {value!r} at account {index}", index)


class InvalidAccountTypeError(AccountDecodeError):
    """Account type is not one of the supported types."""

    code = "invalid_account_type"

    def __init__(self, value: str, index: Optional[int] = None):
        self.value = value
        super().__init__(f"Unsupported account type {value!r} at account {index}", index)


# =============================================================================
# RESULT
# =============================================================================

class AccountDecodeResult(BaseModel):
    """
    Outcome of a decode for callers that prefer branching over exceptions.

    Either `success` is True and `accounts` holds every record, or it is
    False, `accounts` is empty and the error fields describe the failure.
    """

    success: bool
    accounts: list[Account] = Field(default_factory=list)
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    failed_index: Optional[int] = None

    @property
    def account_count(self) -> int:
        return len(self.accounts)


# =============================================================================
# DECODER
# =============================================================================

def _placeholder_if_blank(value: str, placeholder: str) -> str:
    return value if value.strip() else placeholder


class AccountDecoder:
    """
    Decodes accounts documents into Account records.

    Stateless; one instance can serve any number of decodes.
    """

    def _to_text(self, data: Union[str, bytes]) -> str:
        if isinstance(data, str):
            return data
        try:
            return data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise EmptyDataError(f"Accounts data is not valid UTF-8: {e}") from e

    def _parse(self, text: str) -> Any:
        # ValueError also covers oversized integer literals, RecursionError deep nesting
        try:
            return json.loads(text)
        except (ValueError, RecursionError) as e:
            raise MalformedJSONError(f"Accounts data is not valid JSON: {e}") from e

    def _account_entries(self, document: Any) -> list:
        """
        Get the raw `accounts` array.

        A missing or non-array member means "no accounts", not an error.
        """
        if not isinstance(document, dict):
            return []
        entries = document.get(ACCOUNTS_KEY)
        if not isinstance(entries, list):
            return []
        return entries

    def _validate_payload(self, entry: Any, index: int) -> AccountPayload:
        try:
            return AccountPayload.model_validate(entry)
        except ValidationError as e:
            errors = e.errors()
            only_number = all(
                err["loc"] and err["loc"][0] == ACCOUNT_NUMBER_KEY
                for err in errors
            )
            if only_number:
                raise InvalidAccountNumberError(
                    f"Account number must be a string or an integer at account {index}",
                    index,
                ) from e

            fields = sorted({
                str(err["loc"][0]) if err["loc"] else "<account>"
                for err in errors
                if not err["loc"] or err["loc"][0] != ACCOUNT_NUMBER_KEY
            })
            raise InvalidJSONDataError(
                f"Invalid account data at account {index}: {', '.join(fields)}",
                index,
            ) from e

    def _build_account(self, payload: AccountPayload, index: int) -> Account:
        number = payload.number if isinstance(payload.number, str) else str(payload.number)

        try:
            currency = Currency(payload.currency)
        except ValueError:
            raise InvalidCurrencyError(payload.currency, index) from None

        try:
            account_type = AccountType(payload.type)
        except ValueError:
            raise InvalidAccountTypeError(payload.type, index) from None

        return Account(
            balance_in_cents=payload.balance_in_cents,
            currency=currency,
            id=payload.id,
            name=_placeholder_if_blank(payload.name, MISSING_NAME_PLACEHOLDER),
            number=number,
            type=account_type,
            alias=payload.alias,
            iban=_placeholder_if_blank(payload.iban, MISSING_IBAN_PLACEHOLDER),
            linked_account_id=payload.linked_account_id,
            product_name=payload.product_name,
            product_type=payload.product_type,
            savings_target_reached=payload.savings_target_reached,
            target_amount_in_cents=payload.target_amount_in_cents,
        )

    def decode(self, data: Union[str, bytes]) -> list[Account]:
        """
        Decode an accounts document.

        Args:
            data: UTF-8 bytes or text of the JSON document

        Returns:
            Accounts in document order

        Raises:
            AccountDecodeError: the matching subclass for the first problem found
        """
        document = self._parse(self._to_text(data))
        entries = self._account_entries(document)

        accounts = []
        for index, entry in enumerate(entries):
            payload = self._validate_payload(entry, index)
            accounts.append(self._build_account(payload, index))

        logger.debug("accounts_decoded", account_count=len(accounts))
        return accounts

    def try_decode(self, data: Union[str, bytes]) -> AccountDecodeResult:
        """Decode without raising; the failure is described in the result."""
        try:
            accounts = self.decode(data)
        except AccountDecodeError as e:
            return AccountDecodeResult(
                success=False,
                error_code=e.code,
                error_message=str(e),
                failed_index=e.index,
            )
        return AccountDecodeResult(success=True, accounts=accounts)


def decode_accounts(data: Union[str, bytes]) -> list[Account]:
    """Decode an accounts document with a default AccountDecoder."""
    return AccountDecoder().decode(data)
