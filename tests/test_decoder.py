"""
Tests for the Account Decoder

Every test builds its document in memory; nothing touches the network
or the filesystem.
"""

import json

import pytest

from account_lists.decoding import (
    AccountDecodeError,
    AccountDecoder,
    EmptyDataError,
    InvalidAccountNumberError,
    InvalidAccountTypeError,
    InvalidCurrencyError,
    InvalidJSONDataError,
    MalformedJSONError,
    decode_accounts,
)
from account_lists.models.account import (
    MISSING_IBAN_PLACEHOLDER,
    MISSING_NAME_PLACEHOLDER,
    AccountType,
    Currency,
)


_REMOVE = object()


def make_entry(**overrides):
    """A valid account entry, with selected keys replaced or removed."""
    entry = {
        "accountBalanceInCents": 985000,
        "accountCurrency": "EUR",
        "accountId": 748757694,
        "accountName": "Hr P L G N StellingTD",
        "accountNumber": "748757694",
        "accountType": "PAYMENT",
        "alias": "Daily",
        "iban": "NL23INGB0748757694",
        "linkedAccountId": None,
        "productName": None,
        "productType": None,
        "savingsTargetReached": None,
        "targetAmountInCents": None,
    }
    for key, value in overrides.items():
        if value is _REMOVE:
            entry.pop(key, None)
        else:
            entry[key] = value
    return entry


def make_document(*entries):
    return json.dumps({"accounts": list(entries)})


class TestDecodeValidDocuments:
    """Tests for documents that decode successfully."""

    def test_decodes_single_account(self):
        """Test all fields of a single account are carried over."""
        accounts = decode_accounts(make_document(make_entry()))

        assert len(accounts) == 1
        account = accounts[0]
        assert account.balance_in_cents == 985000
        assert account.currency == Currency.EUR
        assert account.id == 748757694
        assert account.name == "Hr P L G N StellingTD"
        assert account.number == "748757694"
        assert account.type == AccountType.PAYMENT
        assert account.alias == "Daily"
        assert account.iban == "NL23INGB0748757694"
        assert account.linked_account_id is None
        assert account.savings_target_reached is None

    def test_length_and_order_preserved(self):
        """Test output follows the source array."""
        entries = [make_entry(accountId=i, accountName=f"Account {i}") for i in range(5)]
        accounts = decode_accounts(make_document(*entries))

        assert len(accounts) == 5
        assert [a.id for a in accounts] == [0, 1, 2, 3, 4]

    def test_integer_account_number_becomes_string(self):
        """Test integer account numbers are normalized to strings."""
        accounts = decode_accounts(make_document(make_entry(accountNumber=12345)))
        assert accounts[0].number == "12345"

    def test_negative_balance(self):
        """Test balances are signed."""
        accounts = decode_accounts(make_document(make_entry(accountBalanceInCents=-2500)))
        assert accounts[0].balance_in_cents == -2500

    def test_saving_account_with_optional_fields(self):
        """Test optional fields are kept when present."""
        entry = make_entry(
            accountType="SAVING",
            linkedAccountId=748757694,
            productName="Oranje Spaarrekening",
            productType=1000,
            savingsTargetReached=True,
            targetAmountInCents=2000,
        )
        account = decode_accounts(make_document(entry))[0]

        assert account.type == AccountType.SAVING
        assert account.is_saving is True
        assert account.linked_account_id == 748757694
        assert account.product_name == "Oranje Spaarrekening"
        assert account.product_type == 1000
        assert account.savings_target_reached is True
        assert account.target_amount_in_cents == 2000

    def test_optional_fields_may_be_absent(self):
        """Test optional keys can be left out entirely."""
        entry = make_entry(
            linkedAccountId=_REMOVE,
            productName=_REMOVE,
            productType=_REMOVE,
            savingsTargetReached=_REMOVE,
            targetAmountInCents=_REMOVE,
        )
        account = decode_accounts(make_document(entry))[0]
        assert account.product_name is None
        assert account.target_amount_in_cents is None

    def test_unknown_keys_ignored(self):
        """Test extra keys in an entry are ignored."""
        accounts = decode_accounts(make_document(make_entry(isVisible=True)))
        assert len(accounts) == 1

    def test_accepts_utf8_bytes(self):
        """Test bytes input is decoded as UTF-8."""
        data = make_document(make_entry(accountName="Spaarrekening Zoë")).encode("utf-8")
        accounts = decode_accounts(data)
        assert accounts[0].name == "Spaarrekening Zoë"

    def test_accepts_utf8_bom(self):
        """Test a leading byte order mark is tolerated."""
        data = b"\xef\xbb\xbf" + make_document(make_entry()).encode("utf-8")
        assert len(decode_accounts(data)) == 1


class TestPlaceholders:
    """Tests for placeholder substitution of blank display fields."""

    def test_empty_name_gets_placeholder(self):
        """Test an empty name is replaced."""
        account = decode_accounts(make_document(make_entry(accountName="")))[0]
        assert account.name == MISSING_NAME_PLACEHOLDER
        assert account.name == "⚠️ Missing Name"
        assert account.has_missing_name is True

    def test_whitespace_name_gets_placeholder(self):
        """Test a whitespace-only name is replaced."""
        account = decode_accounts(make_document(make_entry(accountName="   ")))[0]
        assert account.name == MISSING_NAME_PLACEHOLDER

    def test_empty_iban_gets_placeholder(self):
        """Test an empty IBAN is replaced."""
        account = decode_accounts(make_document(make_entry(iban="")))[0]
        assert account.iban == MISSING_IBAN_PLACEHOLDER
        assert account.iban == "⚠️ Missing IBAN"
        assert account.has_missing_iban is True

    def test_whitespace_iban_gets_placeholder(self):
        """Test a whitespace-only IBAN is replaced."""
        account = decode_accounts(make_document(make_entry(iban="   ")))[0]
        assert account.iban == MISSING_IBAN_PLACEHOLDER
        assert account.has_missing_iban is True

    def test_short_name_kept(self):
        """Test a one-character name is a real name."""
        account = decode_accounts(make_document(make_entry(accountName=",")))[0]
        assert account.name == ","
        assert account.has_missing_name is False


class TestMissingAccounts:
    """Tests for documents without a usable `accounts` array."""

    def test_missing_accounts_key(self):
        """Test a missing key yields no accounts, not an error."""
        assert decode_accounts("{}") == []

    def test_accounts_not_a_list(self):
        """Test a non-array member yields no accounts."""
        assert decode_accounts('{"accounts": {"accountId": 1}}') == []
        assert decode_accounts('{"accounts": null}') == []

    def test_top_level_not_an_object(self):
        """Test a top-level array yields no accounts."""
        assert decode_accounts("[1, 2, 3]") == []

    def test_empty_accounts(self):
        """Test an empty array yields no accounts."""
        assert decode_accounts('{"accounts": []}') == []


class TestDecodeErrors:
    """Tests for rejected documents."""

    def test_invalid_utf8(self):
        """Test undecodable bytes fail with EmptyDataError."""
        with pytest.raises(EmptyDataError) as exc_info:
            decode_accounts(b'{"accounts": []}\xff\xfe')
        assert exc_info.value.code == "empty_data"

    def test_malformed_json(self):
        """Test syntax errors fail before field validation."""
        with pytest.raises(MalformedJSONError) as exc_info:
            decode_accounts('{"accounts": [')
        assert exc_info.value.code == "malformed_json"
        assert exc_info.value.index is None

    def test_empty_text_is_malformed(self):
        """Test empty input is a parse failure."""
        with pytest.raises(MalformedJSONError):
            decode_accounts("")

    def test_oversized_integer_is_malformed(self):
        """Test an integer literal past the int conversion limit is a parse failure."""
        text = '{"accounts": [{"accountNumber": ' + "1" * 5000 + "}]}"
        with pytest.raises(MalformedJSONError) as exc_info:
            decode_accounts(text)
        assert exc_info.value.code == "malformed_json"

    def test_deeply_nested_document_is_malformed(self):
        """Test nesting too deep for the parser is a parse failure."""
        text = '{"accounts": ' + "[" * 100000 + "]" * 100000 + "}"
        with pytest.raises(MalformedJSONError):
            decode_accounts(text)

    def test_unknown_currency(self):
        """Test non-EUR currencies are rejected."""
        with pytest.raises(InvalidCurrencyError) as exc_info:
            decode_accounts(make_document(make_entry(accountCurrency="USD")))
        assert exc_info.value.value == "USD"
        assert exc_info.value.code == "invalid_currency"

    def test_unknown_account_type(self):
        """Test unknown account types are rejected."""
        with pytest.raises(InvalidAccountTypeError) as exc_info:
            decode_accounts(make_document(make_entry(accountType="CREDIT")))
        assert exc_info.value.value == "CREDIT"

    def test_currency_checked_before_type(self):
        """Test currency is resolved first when both are unknown."""
        entry = make_entry(accountCurrency="USD", accountType="CREDIT")
        with pytest.raises(InvalidCurrencyError):
            decode_accounts(make_document(entry))

    def test_boolean_account_number(self):
        """Test a boolean account number is rejected."""
        with pytest.raises(InvalidAccountNumberError) as exc_info:
            decode_accounts(make_document(make_entry(accountNumber=True)))
        assert exc_info.value.code == "invalid_account_number"

    @pytest.mark.parametrize("value", [12.5, None, ["123"], {"number": "123"}])
    def test_other_account_number_types(self, value):
        """Test account numbers that are neither string nor integer."""
        with pytest.raises(InvalidAccountNumberError):
            decode_accounts(make_document(make_entry(accountNumber=value)))

    def test_missing_account_number(self):
        """Test an absent account number is rejected."""
        with pytest.raises(InvalidAccountNumberError):
            decode_accounts(make_document(make_entry(accountNumber=_REMOVE)))

    @pytest.mark.parametrize("key", [
        "accountBalanceInCents",
        "accountCurrency",
        "accountId",
        "accountName",
        "accountType",
        "alias",
        "iban",
    ])
    def test_missing_required_field(self, key):
        """Test every required field must be present."""
        with pytest.raises(InvalidJSONDataError):
            decode_accounts(make_document(make_entry(**{key: _REMOVE})))

    @pytest.mark.parametrize("key,value", [
        ("accountBalanceInCents", "985000"),
        ("accountBalanceInCents", True),
        ("accountBalanceInCents", 12.5),
        ("accountCurrency", 978),
        ("accountId", "748757694"),
        ("accountName", None),
        ("accountType", 1),
        ("iban", 123),
    ])
    def test_mistyped_required_field(self, key, value):
        """Test required fields are strictly typed."""
        with pytest.raises(InvalidJSONDataError):
            decode_accounts(make_document(make_entry(**{key: value})))

    @pytest.mark.parametrize("key,value", [
        ("linkedAccountId", "748757694"),
        ("productName", 1000),
        ("productType", "1000"),
        ("savingsTargetReached", 1),
        ("targetAmountInCents", "2000"),
    ])
    def test_mistyped_optional_field(self, key, value):
        """Test present optional fields are strictly typed too."""
        with pytest.raises(InvalidJSONDataError):
            decode_accounts(make_document(make_entry(**{key: value})))

    def test_missing_field_wins_over_account_number(self):
        """Test structural errors take precedence over account number errors."""
        entry = make_entry(accountId=_REMOVE, accountNumber=True)
        with pytest.raises(InvalidJSONDataError):
            decode_accounts(make_document(entry))

    def test_non_object_entry(self):
        """Test array elements must be objects."""
        with pytest.raises(InvalidJSONDataError):
            decode_accounts('{"accounts": [42]}')

    def test_error_reports_failing_index(self):
        """Test the index of the rejected element is reported."""
        entries = [make_entry(), make_entry(), make_entry(accountType="CREDIT")]
        with pytest.raises(InvalidAccountTypeError) as exc_info:
            decode_accounts(make_document(*entries))
        assert exc_info.value.index == 2

    def test_all_errors_share_base_class(self):
        """Test every decode error is an AccountDecodeError."""
        with pytest.raises(AccountDecodeError):
            decode_accounts(make_document(make_entry(accountCurrency="GBP")))


class TestTryDecode:
    """Tests for the non-raising decode."""

    def test_success_result(self):
        """Test a successful result carries every account."""
        result = AccountDecoder().try_decode(make_document(make_entry(), make_entry()))
        assert result.success is True
        assert result.account_count == 2
        assert result.error_code is None

    def test_failure_result_has_no_accounts(self):
        """Test a failed decode never returns a partial list."""
        entries = [make_entry(), make_entry(), make_entry(accountCurrency="USD")]
        result = AccountDecoder().try_decode(make_document(*entries))

        assert result.success is False
        assert result.accounts == []
        assert result.error_code == "invalid_currency"
        assert result.failed_index == 2
        assert "USD" in result.error_message

    def test_failure_result_for_malformed_json(self):
        """Test parse failures are reported like other errors."""
        result = AccountDecoder().try_decode("not json")
        assert result.success is False
        assert result.error_code == "malformed_json"

    @pytest.mark.parametrize("text", [
        '{"accounts": [{"accountBalanceInCents": ' + "9" * 5000 + "}]}",
        '{"accounts": ' + "[" * 100000 + "]" * 100000 + "}",
    ], ids=["oversized_integer", "deep_nesting"])
    def test_failure_result_for_unparseable_document(self, text):
        """Test parser limits are reported instead of raised."""
        result = AccountDecoder().try_decode(text)
        assert result.success is False
        assert result.accounts == []
        assert result.error_code == "malformed_json"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
