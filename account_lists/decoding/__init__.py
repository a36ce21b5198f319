"""Account decoding package."""

from account_lists.decoding.decoder import (
    AccountDecodeError,
    AccountDecodeResult,
    AccountDecoder,
    EmptyDataError,
    InvalidAccountNumberError,
    InvalidAccountTypeError,
    InvalidCurrencyError,
    InvalidJSONDataError,
    MalformedJSONError,
    decode_accounts,
)

__all__ = [
    "AccountDecodeError",
    "AccountDecodeResult",
    "AccountDecoder",
    "EmptyDataError",
    "InvalidAccountNumberError",
    "InvalidAccountTypeError",
    "InvalidCurrencyError",
    "InvalidJSONDataError",
    "MalformedJSONError",
    "decode_accounts",
]
