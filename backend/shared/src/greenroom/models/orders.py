"""Order drafts submitted by the four product forms.

Drafts are deliberately lenient: every customer-entered field is optional so
that missing or malformed input surfaces as a FieldError from the validation
engine instead of a request parsing failure. The union is tagged by
``product_type``.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Draft(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True, extra="ignore")


class PersonInfo(_Draft):
    """Identity fields for one attendee; must match a government ID."""

    full_name: str = ""
    dob: str | None = Field(default=None, description="Date of birth (YYYY-MM-DD)")
    photo_url: str | None = Field(default=None, description="URL from the upload relay")
    id_number: str | None = Field(default=None, description="State ID / license number")


class MembershipDraft(_Draft):
    """Annual membership signup."""

    product_type: Literal["membership"] = "membership"
    email: str = ""
    phone: str = ""
    full_name: str = ""
    dob: str | None = None
    address: str = ""
    photo_url: str | None = None
    why_join: str = ""
    favorite_item: str = ""
    how_heard: str = ""


class ReservationDraft(_Draft):
    """Cafe table reservation for 1-4 guests."""

    product_type: Literal["reservation"] = "reservation"
    contact_name: str = ""
    email: str = ""
    phone: str = ""
    is_member: bool = False
    date: str | None = Field(default=None, description="Reservation date (YYYY-MM-DD)")
    time: str = ""
    party_size: int = 2
    guests: list[PersonInfo] = Field(default_factory=list)


class SocialEntryDraft(_Draft):
    """Social After Dark entry ticket, optionally with one member guest."""

    product_type: Literal["social-entry"] = "social-entry"
    email: str = ""
    phone: str = ""
    is_member: bool = False
    attendee: PersonInfo = Field(default_factory=PersonInfo)
    has_guest: bool = False
    guest: PersonInfo | None = None
    how_heard: str = ""


class MenuLine(_Draft):
    """One row of the After Dark menu form."""

    key: str
    # Typed loosely so the engine can reject fractional quantities itself
    quantity: int | float = 0
    enhance: bool = False


class MenuOrderDraft(_Draft):
    """After Dark menu order."""

    product_type: Literal["after-dark-order"] = "after-dark-order"
    name: str = ""
    email: str = ""
    phone: str = ""
    items: list[MenuLine] = Field(default_factory=list)


ProductOrder = Annotated[
    Union[MembershipDraft, ReservationDraft, SocialEntryDraft, MenuOrderDraft],
    Field(discriminator="product_type"),
]

_product_order_adapter: TypeAdapter[ProductOrder] = TypeAdapter(ProductOrder)


def parse_order(data: dict) -> ProductOrder:
    """Validate a raw dict into the matching order draft.

    Raises:
        pydantic.ValidationError: if ``product_type`` is missing or unknown
    """
    return _product_order_adapter.validate_python(data)
