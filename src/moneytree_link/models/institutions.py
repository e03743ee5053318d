"""
Financial institution models.

Shapes returned by ``GET link/institutions.json``.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Institution(BaseModel):
    """
    A financial institution supported by Moneytree.

    Prefer ``entity_key`` over ``id``: ids differ between staging and
    production.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(default=None, description="Deprecated; environment specific")
    entity_key: str = Field(..., description="Stable institution key")
    institution_type: str = Field(
        ...,
        description="bank, credit_card, stored_value, point, corporate, stock, ...",
    )
    display_name: Optional[str] = None
    display_name_reading: Optional[str] = None
    status: Optional[str] = Field(default=None, description="active / inactive / null")
    status_reason: Optional[str] = Field(
        default=None,
        description="maintenance, unavailable, unsupported, wont_support, legacy, test",
    )
    login_url: Optional[str] = None
    guidance_url: Optional[str] = None
    billing_group: Optional[str] = None
    tags: list[str] = Field(default_factory=list)
    default_authorization_type: int = Field(
        default=0, description="0: web scraping, 1: API scraping"
    )


class Institutions(BaseModel):
    """Response of the institutions list endpoint."""
    model_config = ConfigDict(frozen=True)

    institutions: list[Institution] = Field(default_factory=list)
