"""Price calculation for the four products.

Pure functions over the catalog; no I/O. Amounts are Decimal major units.
"""

from decimal import Decimal
from typing import Iterable

from greenroom.models.metadata import MenuLineSummary
from greenroom.models.orders import (
    MembershipDraft,
    MenuLine,
    MenuOrderDraft,
    ProductOrder,
    ReservationDraft,
    SocialEntryDraft,
)
from greenroom.models.pricing import PriceBreakdown
from greenroom.services.catalog import Catalog, get_catalog

ZERO = Decimal("0")


def is_whole_quantity(value: object) -> bool:
    """True for real ints (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def membership_price(catalog: Catalog | None = None) -> PriceBreakdown:
    """Flat annual membership fee."""
    catalog = catalog or get_catalog()
    return PriceBreakdown(subtotal=catalog.membership_price, total=catalog.membership_price)


def reservation_price(
    persons: int, is_member: bool, catalog: Catalog | None = None
) -> PriceBreakdown:
    """Per-person price less the member discount, floored at zero.

    Args:
        persons: Party size (not range-checked here)
        is_member: Whether the member discount applies
        catalog: Catalog override

    Returns:
        PriceBreakdown with ``total = max(0, persons * price - discount)``
    """
    catalog = catalog or get_catalog()
    subtotal = Decimal(max(persons, 0)) * catalog.reservation_price_per_person
    discount = catalog.reservation_member_discount if is_member else ZERO
    return PriceBreakdown(
        subtotal=subtotal,
        discount=discount,
        total=max(ZERO, subtotal - discount),
    )


def social_entry_price(
    is_member: bool, has_guest: bool, catalog: Catalog | None = None
) -> PriceBreakdown:
    """Entry price; a guest is only priced for members."""
    catalog = catalog or get_catalog()
    if not is_member:
        total = catalog.social_non_member_price
    else:
        total = catalog.social_member_price + (catalog.social_guest_price if has_guest else ZERO)
    return PriceBreakdown(subtotal=total, total=total)


def priced_menu_lines(
    lines: Iterable[MenuLine], catalog: Catalog | None = None
) -> list[MenuLineSummary]:
    """Price every menu line with a positive whole quantity and a known key.

    Enhancement is only charged on items that allow it; the validator reports
    the rest.
    """
    catalog = catalog or get_catalog()
    priced: list[MenuLineSummary] = []
    for line in lines:
        if not is_whole_quantity(line.quantity) or line.quantity <= 0:
            continue
        item = catalog.menu_item(line.key)
        if item is None:
            continue
        enhanced = line.enhance and item.can_enhance
        unit_price = item.price + (catalog.menu_enhancement_fee if enhanced else ZERO)
        priced.append(
            MenuLineSummary(
                key=item.key,
                label=item.label,
                quantity=line.quantity,
                unit_price=item.price,
                enhanced=enhanced,
                line_total=unit_price * line.quantity,
            )
        )
    return priced


def menu_price(lines: Iterable[MenuLine], catalog: Catalog | None = None) -> PriceBreakdown:
    """Sum of ``qty * price`` plus ``qty * enhancement fee`` on enhanced lines."""
    catalog = catalog or get_catalog()
    subtotal = ZERO
    enhancement_total = ZERO
    for line in priced_menu_lines(lines, catalog):
        subtotal += line.unit_price * line.quantity
        if line.enhanced:
            enhancement_total += catalog.menu_enhancement_fee * line.quantity
    return PriceBreakdown(
        subtotal=subtotal,
        enhancement_total=enhancement_total,
        total=subtotal + enhancement_total,
    )


def price_order(order: ProductOrder, catalog: Catalog | None = None) -> PriceBreakdown:
    """Price any order draft."""
    catalog = catalog or get_catalog()
    if isinstance(order, MembershipDraft):
        return membership_price(catalog)
    if isinstance(order, ReservationDraft):
        return reservation_price(order.party_size, order.is_member, catalog)
    if isinstance(order, SocialEntryDraft):
        return social_entry_price(order.is_member, order.has_guest, catalog)
    if isinstance(order, MenuOrderDraft):
        return menu_price(order.items, catalog)
    raise TypeError(f"Unsupported order type: {type(order).__name__}")
