"""
Core Account Models

These models define the schemas for account data flowing through the system:
1. AccountPayload - one element of the source document, exactly as it arrives
2. Account - the validated, immutable record the list views read

Both models run in strict mode. A JSON boolean is never accepted as an
integer and an integer is never accepted as a string.
"""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


MISSING_NAME_PLACEHOLDER = "⚠️ Missing Name"
MISSING_IBAN_PLACEHOLDER = "⚠️ Missing IBAN"


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class Currency(str, Enum):
    """Supported account currencies."""
    EUR = "EUR"


class AccountType(str, Enum):
    """
    Supported account types.

    Anything outside this set fails the whole decode.
    """
    PAYMENT = "PAYMENT"
    SAVING = "SAVING"


# =============================================================================
# WIRE SCHEMA
# =============================================================================

class AccountPayload(BaseModel):
    """
    One element of the `accounts` array in the source document.

    Currency and type stay plain strings here. They are resolved
    against their enums afterwards so that an unknown value can be
    reported separately from a mistyped one.
    """
    model_config = ConfigDict(strict=True, extra="ignore")

    balance_in_cents: int = Field(..., alias="accountBalanceInCents")
    currency: str = Field(..., alias="accountCurrency")
    id: int = Field(..., alias="accountId")
    name: str = Field(..., alias="accountName")
    number: Union[str, int] = Field(
        ...,
        alias="accountNumber",
        description="Account number, delivered either as a string or an integer"
    )
    type: str = Field(..., alias="accountType")
    alias: str = Field(..., alias="alias")
    iban: str = Field(..., alias="iban")

    linked_account_id: Optional[int] = Field(default=None, alias="linkedAccountId")
    product_name: Optional[str] = Field(default=None, alias="productName")
    product_type: Optional[int] = Field(default=None, alias="productType")
    savings_target_reached: Optional[bool] = Field(
        default=None,
        alias="savingsTargetReached"
    )
    target_amount_in_cents: Optional[int] = Field(
        default=None,
        alias="targetAmountInCents"
    )


# =============================================================================
# ACCOUNT RECORD
# =============================================================================

class Account(BaseModel):
    """
    A validated bank account.

    Records are built once per decode pass and never change afterwards.
    `name` and `iban` are never empty, `number` is always a string.
    """
    model_config = ConfigDict(frozen=True, strict=True)

    balance_in_cents: int = Field(
        ...,
        description="Signed balance in the smallest currency unit"
    )
    currency: Currency
    id: int
    name: str = Field(..., min_length=1)
    number: str
    type: AccountType
    alias: str
    iban: str = Field(..., min_length=1)

    linked_account_id: Optional[int] = None
    product_name: Optional[str] = None
    product_type: Optional[int] = None
    savings_target_reached: Optional[bool] = None
    target_amount_in_cents: Optional[int] = None

    @property
    def is_saving(self) -> bool:
        return self.type == AccountType.SAVING

    @property
    def has_missing_name(self) -> bool:
        """True if the source supplied no usable name."""
        return self.name == MISSING_NAME_PLACEHOLDER

    @property
    def has_missing_iban(self) -> bool:
        """True if the source supplied no usable IBAN."""
        return self.iban == MISSING_IBAN_PLACEHOLDER
