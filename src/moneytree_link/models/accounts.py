"""
Account balance models.

Shapes returned by ``GET link/accounts/{account_id}/balances/details.json``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AccountBalanceDetail(BaseModel):
    """
    Balance record for a single account.

    ``date`` is the day the balance was confirmed on the institution's
    website (YYYY-MM-DD).
    """
    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Balance record ID")
    account_id: int = Field(..., description="Account ID")
    date: str = Field(..., description="Confirmation date (YYYY-MM-DD)")
    balance: float = Field(..., description="Account balance")
    balance_in_base: float = Field(..., description="Balance converted to JPY")
    balance_type: Optional[int] = Field(
        default=None,
        description=(
            "0: total (ordinary balance for non-debt accounts), 1: undetermined, "
            "2: confirmed, 3: long-term debt (revolving, bonus, installments)"
        ),
    )


class AccountBalanceDetails(BaseModel):
    """Response of the account balance details endpoint."""
    model_config = ConfigDict(frozen=True)

    account_balances: list[AccountBalanceDetail] = Field(default_factory=list)
