"""API response models for checkout, webhook and catalog endpoints."""

import calendar
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, RootModel

from greenroom.models.notifications import ChannelAttempt, DispatchReport
from greenroom.models.orders import ProductOrder
from greenroom.services.catalog import Catalog, MenuItem


class CheckoutResponse(BaseModel):
    """Hosted checkout to redirect the customer to."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "url": "https://checkout.stripe.com/c/pay/cs_test_a1b2c3",
                    "session_id": "cs_test_a1b2c3",
                }
            ]
        }
    )

    url: str = Field(..., description="Stripe Checkout URL")
    session_id: str = Field(..., description="Stripe Checkout session ID")


class WebhookResponse(BaseModel):
    """Acknowledgement returned to Stripe."""

    received: bool = True
    event_id: str | None = None
    event_type: str | None = None
    processing_result: str = Field(..., description="success or ignored")
    attempts: list[ChannelAttempt] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: DispatchReport) -> "WebhookResponse":
        return cls(
            event_id=report.event_id,
            event_type=report.event_type,
            processing_result=report.result.value,
            attempts=report.attempts,
        )


class MembershipInfo(BaseModel):
    price: Decimal
    perks: str


class ReservationInfo(BaseModel):
    price_per_person: Decimal
    member_discount: Decimal
    min_party: int
    max_party: int
    open_days: list[str]
    time_slots: list[str]
    policy: str
    notes: str


class SocialEntryInfo(BaseModel):
    member_price: Decimal
    guest_price: Decimal
    non_member_price: Decimal
    hours: str
    rules: str


class MenuInfo(BaseModel):
    items: list[MenuItem]
    enhancement_fee: Decimal
    max_quantity: int
    policy: str


class CatalogResponse(BaseModel):
    """Public prices, menu, opening days and policies.

    The social entry address and codeword are only sent after payment.
    """

    membership: MembershipInfo
    reservation: ReservationInfo
    social_entry: SocialEntryInfo
    menu: MenuInfo

    @classmethod
    def from_catalog(cls, catalog: Catalog) -> "CatalogResponse":
        return cls(
            membership=MembershipInfo(
                price=catalog.membership_price, perks=catalog.membership_perks
            ),
            reservation=ReservationInfo(
                price_per_person=catalog.reservation_price_per_person,
                member_discount=catalog.reservation_member_discount,
                min_party=catalog.reservation_min_party,
                max_party=catalog.reservation_max_party,
                open_days=[calendar.day_name[day] for day in catalog.reservation_weekdays],
                time_slots=list(catalog.reservation_time_slots),
                policy=catalog.reservation_policy,
                notes=catalog.reservation_notes,
            ),
            social_entry=SocialEntryInfo(
                member_price=catalog.social_member_price,
                guest_price=catalog.social_guest_price,
                non_member_price=catalog.social_non_member_price,
                hours=catalog.social_hours,
                rules=catalog.social_rules,
            ),
            menu=MenuInfo(
                items=list(catalog.menu_items),
                enhancement_fee=catalog.menu_enhancement_fee,
                max_quantity=catalog.menu_max_quantity,
                policy=catalog.menu_policy,
            ),
        )


class OrderRequest(RootModel[ProductOrder]):
    """Order draft body tagged by ``product_type``."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "product_type": "reservation",
                    "contact_name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "phone": "555-123-4567",
                    "is_member": True,
                    "date": "2026-11-06",
                    "time": "7:00 PM",
                    "party_size": 2,
                    "guests": [
                        {"full_name": "Ada Lovelace", "dob": "1990-12-10"},
                        {"full_name": "Charles Babbage", "dob": "1991-12-26"},
                    ],
                }
            ]
        }
    )
