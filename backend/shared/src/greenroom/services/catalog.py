"""Published prices, menu, opening days and policy copy.

Every amount here is in major currency units (dollars). The catalog is the
single source for pricing rules, eligibility constants and the static text
that ends up in confirmation emails.
"""

from decimal import Decimal
from functools import lru_cache

from pydantic import BaseModel, ConfigDict, Field

from greenroom.models.enums import ProductType


class MenuItem(BaseModel):
    """An After Dark menu item."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    price: Decimal
    can_enhance: bool = True


class Catalog(BaseModel):
    """Business constants for all four products."""

    model_config = ConfigDict(frozen=True)

    # Membership
    membership_price: Decimal = Decimal("60")
    membership_perks: str = (
        "$10 entry to Social After Dark; $10 off Cafe Reservations. One-year membership."
    )
    membership_qr_note: str = (
        "A unique QR code will be issued after review; save it to your phone. "
        "IDs checked on arrival."
    )

    # Cafe reservations
    reservation_price_per_person: Decimal = Decimal("80")
    reservation_member_discount: Decimal = Decimal("10")
    reservation_min_party: int = 1
    reservation_max_party: int = 4
    # date.weekday(): Monday=0 ... Friday=4, Saturday=5
    reservation_weekdays: tuple[int, ...] = (4, 5)
    reservation_time_slots: tuple[str, ...] = (
        "5:00 PM",
        "6:00 PM",
        "7:00 PM",
        "8:00 PM",
        "9:00 PM",
        "10:00 PM",
    )
    reservation_policy: str = (
        "Cancellation & Refund Policy: 50% refund if cancelled at least 24 hours "
        "prior to the scheduled reservation time. No full refunds. No refund within "
        "24 hours. Be on time; dining time is 1.5-2 hours."
    )
    reservation_notes: str = (
        "Dining window: 1.5-2 hours. Friday & Saturday only. Max party size 4. "
        "All guests must be 21+ (IDs checked on arrival)."
    )

    # Social After Dark entry
    social_member_price: Decimal = Decimal("10")
    social_guest_price: Decimal = Decimal("15")
    social_non_member_price: Decimal = Decimal("20")
    social_address: str = "123 Secret Ave, Suite B"
    social_codeword: str = "GreenLight"
    social_hours: str = "Friday & Saturday, 11 PM - 3 AM"
    social_rules: str = (
        "Have your QR code ready to be scanned. IDs checked on arrival. No outside "
        "food or drink. Zero tolerance for violence/theft/damage (permanent ban)."
    )
    social_qr_note: str = (
        "Your QR code will be sent separately; have it ready to scan at entry."
    )

    # After Dark menu
    menu_items: tuple[MenuItem, ...] = (
        MenuItem(key="wings", label="Chicken Wings", price=Decimal("14")),
        MenuItem(key="mozz", label="Mozzarella Sticks", price=Decimal("11")),
        MenuItem(key="truffle", label="Truffle Fries", price=Decimal("12")),
        MenuItem(key="pretzel", label="Pretzel Bites", price=Decimal("9")),
        MenuItem(key="dessert", label="Dessert of the Day", price=Decimal("10"), can_enhance=False),
    )
    menu_enhancement_fee: Decimal = Decimal("5")
    menu_max_quantity: int = 10
    menu_policy: str = "Menu subject to change."

    # Checkout line item names
    product_names: dict[ProductType, str] = Field(
        default_factory=lambda: {
            ProductType.MEMBERSHIP: "The Green Room Membership",
            ProductType.RESERVATION: "Cafe Reservation",
            ProductType.SOCIAL_ENTRY: "Social After Dark Entry",
            ProductType.AFTER_DARK_ORDER: "After Dark Order",
        }
    )

    def menu_item(self, key: str) -> MenuItem | None:
        """Look up a menu item by key."""
        for item in self.menu_items:
            if item.key == key:
                return item
        return None

    def product_name(self, product_type: ProductType | str) -> str:
        """Checkout line item name for a product type."""
        try:
            return self.product_names[ProductType(product_type)]
        except ValueError:
            return self.product_names[ProductType.AFTER_DARK_ORDER]


@lru_cache(maxsize=1)
def get_catalog() -> Catalog:
    """Get the shared Catalog instance."""
    return Catalog()
