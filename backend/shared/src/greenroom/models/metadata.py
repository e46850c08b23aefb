"""Typed notification payloads carried through Stripe Checkout metadata.

Stripe only carries a flat ``dict[str, str]`` (50 keys, 500 characters per
value). The payloads here hold everything the webhook needs to render a
confirmation and are flattened only at that boundary:

- nested lists and the pricing breakdown are JSON-encoded (compact)
- booleans become ``"true"`` / ``"false"``
- keys are camelCase (``contactEmail``, ``partySize``, ...)
- values over 500 characters continue in ``<key>_1``, ``<key>_2``, ...

``parse_metadata`` reverses the mapping and never raises: missing keys become
None, malformed JSON becomes None and an unknown ``type`` yields a
``GenericPayload``.
"""

import json
import logging
import re
from decimal import Decimal
from typing import Any, ClassVar, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from greenroom.models.enums import GENERIC_ORDER_TYPE, ProductType
from greenroom.models.errors import MetadataTooLargeError
from greenroom.models.pricing import PriceBreakdown

logger = logging.getLogger(__name__)

# Stripe metadata limits
METADATA_VALUE_MAX_LENGTH = 500
METADATA_MAX_KEYS = 50

_CONTINUATION_KEY = re.compile(r"^(?P<base>.+)_(?P<index>[1-9][0-9]*)$")


def split_metadata_value(key: str, text: str) -> dict[str, str]:
    """Spread a value over ``key``, ``key_1``, ``key_2`` ... in 500-character parts."""
    if len(text) <= METADATA_VALUE_MAX_LENGTH:
        return {key: text}
    parts = [
        text[start : start + METADATA_VALUE_MAX_LENGTH]
        for start in range(0, len(text), METADATA_VALUE_MAX_LENGTH)
    ]
    logger.info("Metadata value for %s split into %d parts", key, len(parts))
    split = {key: parts[0]}
    for index, part in enumerate(parts[1:], start=1):
        split[f"{key}_{index}"] = part
    return split


def join_metadata_values(metadata: Mapping[str, Any]) -> dict[str, Any]:
    """Reassemble values written by ``split_metadata_value``."""
    joined = {str(key): value for key, value in metadata.items()}
    continued: set[str] = set()
    for key in joined:
        match = _CONTINUATION_KEY.match(key)
        if match and isinstance(joined.get(match.group("base")), str):
            continued.add(match.group("base"))
    for base in sorted(continued, key=len):
        if not isinstance(joined.get(base), str):
            continue
        index = 1
        while isinstance(joined.get(f"{base}_{index}"), str):
            joined[base] += joined.pop(f"{base}_{index}")
            index += 1
    return joined


class _WireModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class GuestSummary(_WireModel):
    """Guest row in a reservation confirmation."""

    full_name: str | None = None
    dob: str | None = None
    age: int | None = None


class MenuLineSummary(_WireModel):
    """Priced menu line in an After Dark order confirmation."""

    key: str
    label: str | None = None
    quantity: int = 0
    unit_price: Decimal | None = None
    enhanced: bool = False
    line_total: Decimal | None = None


class NotificationPayload(_WireModel):
    """Fields shared by every payload."""

    # Fields stored as JSON strings on the wire
    json_fields: ClassVar[frozenset[str]] = frozenset()

    contact_email: str | None = None
    contact_phone: str | None = None

    @property
    def product_type(self) -> str:
        return getattr(self, "type")

    def to_metadata(self) -> dict[str, str]:
        """Flatten the payload into Stripe metadata.

        Raises:
            MetadataTooLargeError: if the flattened payload needs more keys
                than Stripe allows
        """
        data = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        metadata: dict[str, str] = {}
        for key, value in data.items():
            if isinstance(value, bool):
                text = "true" if value else "false"
            elif isinstance(value, (list, dict)):
                text = json.dumps(value, separators=(",", ":"))
            else:
                text = str(value)
            metadata.update(split_metadata_value(key, text))
        if len(metadata) > METADATA_MAX_KEYS:
            raise MetadataTooLargeError(len(metadata), METADATA_MAX_KEYS)
        return metadata


class MembershipPayload(NotificationPayload):
    type: Literal["membership"] = "membership"
    full_name: str | None = None
    dob: str | None = None
    address: str | None = None
    why_join: str | None = None
    favorite_item: str | None = None
    how_heard: str | None = None
    photo_url: str | None = None
    over21: bool | None = None
    perks: str | None = None
    qr_note: str | None = None


class ReservationPayload(NotificationPayload):
    json_fields: ClassVar[frozenset[str]] = frozenset({"guests", "pricing"})

    type: Literal["reservation"] = "reservation"
    name: str | None = None
    party_size: int | None = None
    date: str | None = None
    time: str | None = None
    is_member: bool | None = None
    guests: list[GuestSummary] | None = None
    policy: str | None = None
    notes: str | None = None
    pricing: PriceBreakdown | None = None


class SocialEntryPayload(NotificationPayload):
    json_fields: ClassVar[frozenset[str]] = frozenset({"pricing"})

    type: Literal["social-entry"] = "social-entry"
    full_name: str | None = None
    dob: str | None = None
    id_number: str | None = None
    photo_url: str | None = None
    is_member: bool | None = None
    has_guest: bool | None = None
    guest_name: str | None = None
    guest_dob: str | None = None
    guest_photo_url: str | None = None
    how_heard: str | None = None
    qr_system_note: str | None = None
    pricing: PriceBreakdown | None = None


class AfterDarkOrderPayload(NotificationPayload):
    json_fields: ClassVar[frozenset[str]] = frozenset({"items", "pricing"})

    type: Literal["after-dark-order"] = "after-dark-order"
    name: str | None = None
    items: list[MenuLineSummary] | None = None
    policy: str | None = None
    pricing: PriceBreakdown | None = None


class GenericPayload(NotificationPayload):
    """Fallback for payments whose metadata names no known product."""

    type: str = GENERIC_ORDER_TYPE
    name: str | None = None


OrderPayload = Union[
    MembershipPayload,
    ReservationPayload,
    SocialEntryPayload,
    AfterDarkOrderPayload,
    GenericPayload,
]

PAYLOAD_TYPES: dict[str, type[NotificationPayload]] = {
    ProductType.MEMBERSHIP.value: MembershipPayload,
    ProductType.RESERVATION.value: ReservationPayload,
    ProductType.SOCIAL_ENTRY.value: SocialEntryPayload,
    ProductType.AFTER_DARK_ORDER.value: AfterDarkOrderPayload,
}


def _decode_json_fields(
    payload_cls: type[NotificationPayload], raw: dict[str, Any]
) -> dict[str, Any]:
    decoded = dict(raw)
    for name in payload_cls.json_fields:
        alias = to_camel(name)
        value = decoded.get(alias)
        if not isinstance(value, str):
            continue
        try:
            decoded[alias] = json.loads(value)
        except ValueError:
            logger.warning("Malformed JSON in metadata field %s", alias)
            decoded.pop(alias)
    return decoded


def parse_metadata(metadata: Mapping[str, Any] | None) -> OrderPayload:
    """Rebuild the typed payload from Stripe metadata.

    Args:
        metadata: Metadata dict from a Checkout Session (may be None)

    Returns:
        The payload matching ``metadata["type"]``, or a GenericPayload
    """
    raw: dict[str, Any] = {
        key: value
        for key, value in join_metadata_values(metadata or {}).items()
        if value not in (None, "")
    }
    # Older forms sent a bare ``email`` key
    if "contactEmail" not in raw and isinstance(raw.get("email"), str):
        raw["contactEmail"] = raw["email"]

    kind = str(raw.get("type") or GENERIC_ORDER_TYPE)
    payload_cls = PAYLOAD_TYPES.get(kind, GenericPayload)
    raw["type"] = kind

    decoded = _decode_json_fields(payload_cls, raw)
    try:
        return payload_cls.model_validate(decoded)
    except ValidationError as e:
        bad = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        logger.warning("Dropping unreadable metadata fields: %s", ", ".join(sorted(bad)))
        cleaned = {key: value for key, value in decoded.items() if key not in bad}
        cleaned["type"] = kind
        return payload_cls.model_validate(cleaned)
