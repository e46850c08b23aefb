"""Eligibility rules for the four order drafts.

``validate`` is pure: it prices the draft, collects every failed rule as a
FieldError and, when nothing failed, builds the typed ValidOrder (including
the notification payload that will travel through Stripe metadata).

Field paths use dots for nesting, e.g. ``guests.1.dob`` or ``attendee.photo_url``.
"""

import datetime as dt
from typing import Callable

from greenroom.models.checkout import ValidationResult, ValidOrder
from greenroom.models.enums import ProductType
from greenroom.models.errors import FieldError, OrderValidationError
from greenroom.models.metadata import (
    AfterDarkOrderPayload,
    GuestSummary,
    MembershipPayload,
    OrderPayload,
    ReservationPayload,
    SocialEntryPayload,
)
from greenroom.models.orders import (
    MembershipDraft,
    MenuOrderDraft,
    PersonInfo,
    ProductOrder,
    ReservationDraft,
    SocialEntryDraft,
)
from greenroom.models.pricing import PriceBreakdown
from greenroom.services.catalog import Catalog, get_catalog
from greenroom.services.pricing import is_whole_quantity, price_order, priced_menu_lines
from greenroom.utils.contact import (
    MINIMUM_AGE,
    calculate_age,
    is_valid_email,
    normalize_phone,
    parse_date,
)

Rules = Callable[[ProductOrder, Catalog, dt.date], list[FieldError]]
PayloadBuilder = Callable[[ProductOrder, Catalog, PriceBreakdown, dt.date], OrderPayload]


def _opt(value: str | None) -> str | None:
    return value or None


def _require(errors: list[FieldError], field: str, value: str | None, label: str) -> None:
    if not value:
        errors.append(FieldError(field=field, message=f"{label} is required"))


def _check_email(errors: list[FieldError], value: str, field: str = "email") -> None:
    if not value:
        errors.append(FieldError(field=field, message="Email is required"))
    elif not is_valid_email(value):
        errors.append(FieldError(field=field, message="Enter a valid email address"))


def _check_phone(errors: list[FieldError], value: str, field: str = "phone") -> None:
    if not normalize_phone(value):
        errors.append(FieldError(field=field, message="Phone number is required"))


def _check_dob(errors: list[FieldError], field: str, value: str | None, today: dt.date) -> None:
    if not value:
        errors.append(FieldError(field=field, message="Date of birth is required"))
        return
    dob = parse_date(value)
    if dob is None:
        errors.append(FieldError(field=field, message="Enter a valid date of birth"))
    elif calculate_age(dob, today) < MINIMUM_AGE:
        errors.append(FieldError(field=field, message=f"Must be {MINIMUM_AGE} or older"))


def _check_person(
    errors: list[FieldError],
    prefix: str,
    person: PersonInfo | None,
    today: dt.date,
    *,
    photo_required: bool,
) -> None:
    person = person or PersonInfo()
    _require(errors, f"{prefix}.full_name", person.full_name, "Full name")
    _check_dob(errors, f"{prefix}.dob", person.dob, today)
    if photo_required:
        _require(errors, f"{prefix}.photo_url", person.photo_url, "Photo")


def _age_or_none(dob: str | None, today: dt.date) -> int | None:
    parsed = parse_date(dob)
    return calculate_age(parsed, today) if parsed else None


# === Membership ===


def _membership_rules(order: MembershipDraft, catalog: Catalog, today: dt.date) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_email(errors, order.email)
    _check_phone(errors, order.phone)
    _require(errors, "full_name", order.full_name, "Full name")
    _check_dob(errors, "dob", order.dob, today)
    _require(errors, "address", order.address, "Address")
    _require(errors, "photo_url", order.photo_url, "Photo")
    _require(errors, "why_join", order.why_join, "Why you want to join")
    _require(errors, "favorite_item", order.favorite_item, "Favorite item")
    _require(errors, "how_heard", order.how_heard, "How you heard about us")
    return errors


def _membership_payload(
    order: MembershipDraft, catalog: Catalog, breakdown: PriceBreakdown, today: dt.date
) -> MembershipPayload:
    return MembershipPayload(
        contact_email=order.email,
        contact_phone=_opt(normalize_phone(order.phone)),
        full_name=order.full_name,
        dob=order.dob,
        address=order.address,
        why_join=order.why_join,
        favorite_item=order.favorite_item,
        how_heard=order.how_heard,
        photo_url=order.photo_url,
        over21=True,
        perks=catalog.membership_perks,
        qr_note=catalog.membership_qr_note,
    )


# === Reservation ===


def _reservation_rules(
    order: ReservationDraft, catalog: Catalog, today: dt.date
) -> list[FieldError]:
    errors: list[FieldError] = []
    _require(errors, "contact_name", order.contact_name, "Contact name")
    _check_email(errors, order.email)

    persons = order.party_size
    if not catalog.reservation_min_party <= persons <= catalog.reservation_max_party:
        errors.append(
            FieldError(
                field="party_size",
                message=(
                    f"Party size must be between {catalog.reservation_min_party} "
                    f"and {catalog.reservation_max_party}"
                ),
            )
        )

    day = parse_date(order.date)
    if day is None:
        errors.append(FieldError(field="date", message="Choose a reservation date"))
    elif day.weekday() not in catalog.reservation_weekdays:
        errors.append(FieldError(field="date", message="Reservations are Friday & Saturday only"))

    if order.time not in catalog.reservation_time_slots:
        errors.append(FieldError(field="time", message="Choose one of the available times"))

    # Guests beyond the party size are ignored
    for index in range(max(0, min(persons, catalog.reservation_max_party))):
        guest = order.guests[index] if index < len(order.guests) else None
        _check_person(errors, f"guests.{index}", guest, today, photo_required=False)
    return errors


def _reservation_payload(
    order: ReservationDraft, catalog: Catalog, breakdown: PriceBreakdown, today: dt.date
) -> ReservationPayload:
    guests = [
        GuestSummary(full_name=g.full_name, dob=g.dob, age=_age_or_none(g.dob, today))
        for g in order.guests[: order.party_size]
    ]
    return ReservationPayload(
        contact_email=order.email,
        contact_phone=_opt(normalize_phone(order.phone)),
        name=order.contact_name,
        party_size=order.party_size,
        date=order.date,
        time=order.time,
        is_member=order.is_member,
        guests=guests,
        policy=catalog.reservation_policy,
        notes=catalog.reservation_notes,
        pricing=breakdown,
    )


# === Social entry ===


def _social_entry_rules(
    order: SocialEntryDraft, catalog: Catalog, today: dt.date
) -> list[FieldError]:
    errors: list[FieldError] = []
    _check_email(errors, order.email)
    _check_phone(errors, order.phone)
    _check_person(
        errors, "attendee", order.attendee, today, photo_required=not order.is_member
    )
    _require(errors, "attendee.id_number", order.attendee.id_number, "ID number")
    _require(errors, "how_heard", order.how_heard, "How you heard about us")
    # Non-members cannot bring a guest; their guest fields are ignored
    if order.is_member and order.has_guest:
        _check_person(errors, "guest", order.guest, today, photo_required=True)
    return errors


def _social_entry_payload(
    order: SocialEntryDraft, catalog: Catalog, breakdown: PriceBreakdown, today: dt.date
) -> SocialEntryPayload:
    with_guest = order.is_member and order.has_guest and order.guest is not None
    guest = order.guest if with_guest else None
    return SocialEntryPayload(
        contact_email=order.email,
        contact_phone=_opt(normalize_phone(order.phone)),
        full_name=order.attendee.full_name,
        dob=order.attendee.dob,
        id_number=_opt(order.attendee.id_number),
        photo_url=_opt(order.attendee.photo_url),
        is_member=order.is_member,
        has_guest=with_guest,
        guest_name=guest.full_name if guest else None,
        guest_dob=guest.dob if guest else None,
        guest_photo_url=_opt(guest.photo_url) if guest else None,
        how_heard=_opt(order.how_heard),
        qr_system_note=catalog.social_qr_note,
        pricing=breakdown,
    )


# === After Dark menu ===


def _menu_rules(order: MenuOrderDraft, catalog: Catalog, today: dt.date) -> list[FieldError]:
    errors: list[FieldError] = []
    _require(errors, "name", order.name, "Name")
    _check_email(errors, order.email)

    for index, line in enumerate(order.items):
        prefix = f"items.{index}"
        item = catalog.menu_item(line.key)
        if item is None:
            errors.append(FieldError(field=f"{prefix}.key", message="Unknown menu item"))
        if not is_whole_quantity(line.quantity):
            errors.append(
                FieldError(field=f"{prefix}.quantity", message="Quantity must be a whole number")
            )
        elif line.quantity < 0:
            errors.append(
                FieldError(field=f"{prefix}.quantity", message="Quantity cannot be negative")
            )
        elif line.quantity > catalog.menu_max_quantity:
            errors.append(
                FieldError(
                    field=f"{prefix}.quantity",
                    message=f"Quantity cannot exceed {catalog.menu_max_quantity}",
                )
            )
        if item is not None and line.enhance and not item.can_enhance:
            errors.append(
                FieldError(
                    field=f"{prefix}.enhance", message=f"{item.label} cannot be enhanced"
                )
            )

    if price_order(order, catalog).total <= 0:
        errors.append(FieldError(field="items", message="Add at least one item"))
    return errors


def _menu_payload(
    order: MenuOrderDraft, catalog: Catalog, breakdown: PriceBreakdown, today: dt.date
) -> AfterDarkOrderPayload:
    return AfterDarkOrderPayload(
        contact_email=order.email,
        contact_phone=_opt(normalize_phone(order.phone)),
        name=order.name,
        items=priced_menu_lines(order.items, catalog),
        policy=catalog.menu_policy,
        pricing=breakdown,
    )


_VALIDATORS: dict[type, tuple[ProductType, Rules, PayloadBuilder]] = {
    MembershipDraft: (ProductType.MEMBERSHIP, _membership_rules, _membership_payload),
    ReservationDraft: (ProductType.RESERVATION, _reservation_rules, _reservation_payload),
    SocialEntryDraft: (ProductType.SOCIAL_ENTRY, _social_entry_rules, _social_entry_payload),
    MenuOrderDraft: (ProductType.AFTER_DARK_ORDER, _menu_rules, _menu_payload),
}


def validate(
    order: ProductOrder,
    today: dt.date | None = None,
    catalog: Catalog | None = None,
) -> ValidationResult:
    """Price and check an order draft.

    Args:
        order: Any of the four order drafts
        today: Reference date for age checks (defaults to today)
        catalog: Catalog override

    Returns:
        ValidationResult; ``order`` is populated only when eligible
    """
    try:
        product_type, rules, build_payload = _VALIDATORS[type(order)]
    except KeyError:
        raise TypeError(f"Unsupported order type: {type(order).__name__}") from None

    today = today or dt.date.today()
    catalog = catalog or get_catalog()

    breakdown = price_order(order, catalog)
    errors = rules(order, catalog, today)

    valid_order = None
    if not errors:
        valid_order = ValidOrder(
            product_type=product_type,
            amount=breakdown.total,
            breakdown=breakdown,
            payload=build_payload(order, catalog, breakdown, today),
            customer_email=order.email,
        )

    return ValidationResult(
        product_type=product_type,
        eligible=not errors,
        amount=breakdown.total,
        breakdown=breakdown,
        errors=errors,
        order=valid_order,
    )


def validate_or_raise(
    order: ProductOrder,
    today: dt.date | None = None,
    catalog: Catalog | None = None,
) -> ValidOrder:
    """Validate and return the ValidOrder.

    Raises:
        OrderValidationError: if any rule fails
    """
    result = validate(order, today, catalog)
    if result.order is None:
        raise OrderValidationError(result.errors, product_type=result.product_type.value)
    return result.order
