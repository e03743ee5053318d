"""
Response models for the Moneytree LINK API endpoints exposed by the client.
"""

from moneytree_link.models.accounts import AccountBalanceDetail, AccountBalanceDetails
from moneytree_link.models.institutions import Institution, Institutions

__all__ = [
    "AccountBalanceDetail",
    "AccountBalanceDetails",
    "Institution",
    "Institutions",
]
