"""
Account List Presenter

Prepares decoded accounts for the two list styles:
- STANDARD: name, IBAN and the formatted balance
- ICON: name, IBAN and a colour for the account type

No toolkit code lives here. A view asks the presenter for rows and
renders them however it likes.
"""

from decimal import Decimal
from enum import Enum
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict

from account_lists.decoding import AccountDecodeError
from account_lists.models.account import Account, AccountType, Currency
from account_lists.orchestrator import AccountListsCoordinator


logger = structlog.get_logger(__name__)

CURRENCY_SYMBOLS = {
    Currency.EUR: "€",
}

ICON_COLORS = {
    AccountType.PAYMENT: "orange",
    AccountType.SAVING: "lightGray",
}

TINT_COLOR = "orange"


class AccountListStyle(str, Enum):
    """How a list renders its rows."""
    STANDARD = "standard"
    ICON = "icon"

    @property
    def title(self) -> str:
        """Tab title for this style."""
        return self.value.capitalize()


class AccountRow(BaseModel):
    """
    Display values for one account row.

    `balance` is only set for STANDARD rows, `icon_color` only for ICON rows.
    """
    model_config = ConfigDict(frozen=True)

    account_id: int
    name: str
    iban: str
    balance: Optional[str] = None
    icon_color: Optional[str] = None


def format_balance(balance_in_cents: int, currency: Currency = Currency.EUR) -> str:
    """
    Format a balance in cents for display.

    Examples: 123456 -> "€1,234.56", -1250 -> "-€12.50"
    """
    amount = Decimal(balance_in_cents) / Decimal(100)
    symbol = CURRENCY_SYMBOLS[currency]
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def icon_color_for(account_type: AccountType) -> str:
    """Get the icon colour for an account type."""
    return ICON_COLORS[account_type]


class AccountListPresenter:
    """
    Holds the accounts for one list view.

    Accounts are fetched once at construction. If the document is
    rejected the list stays empty and `error` describes why, so the
    view can show an empty state instead of failing.
    """

    def __init__(
        self,
        coordinator: AccountListsCoordinator,
        style: AccountListStyle = AccountListStyle.STANDARD,
        on_update: Optional[Callable[[list[Account]], None]] = None,
    ):
        self._coordinator = coordinator
        self._on_update = on_update
        self.style = style
        self.error: Optional[AccountDecodeError] = None
        self._accounts: list[Account] = []
        self.reload()

    @property
    def accounts(self) -> list[Account]:
        return list(self._accounts)

    @property
    def count(self) -> int:
        return len(self._accounts)

    @property
    def is_empty(self) -> bool:
        """True if there is nothing to show (no accounts or a rejected document)."""
        return not self._accounts

    def reload(self) -> None:
        """Fetch the accounts again and notify the view."""
        try:
            accounts = self._coordinator.fetch_accounts()
            self.error = None
        except AccountDecodeError as e:
            logger.error(
                "account_list_unavailable",
                style=self.style.value,
                error_code=e.code,
                error=str(e),
            )
            accounts = []
            self.error = e

        self._accounts = accounts
        if self._on_update:
            self._on_update(self.accounts)

    def account(self, index: int) -> Account:
        return self._accounts[index]

    def row(self, index: int) -> AccountRow:
        """Build the display row for the account at `index`."""
        account = self._accounts[index]

        if self.style == AccountListStyle.STANDARD:
            return AccountRow(
                account_id=account.id,
                name=account.name,
                iban=account.iban,
                balance=format_balance(account.balance_in_cents, account.currency),
            )

        return AccountRow(
            account_id=account.id,
            name=account.name,
            iban=account.iban,
            icon_color=icon_color_for(account.type),
        )

    def rows(self) -> list[AccountRow]:
        return [self.row(index) for index in range(self.count)]
