"""Unit tests for flattening payloads into Stripe metadata and back."""

import json
import logging
from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from greenroom.models.checkout import CheckoutRequest
from greenroom.models.errors import ErrorCode, MetadataTooLargeError
from greenroom.models.metadata import (
    METADATA_MAX_KEYS,
    METADATA_VALUE_MAX_LENGTH,
    AfterDarkOrderPayload,
    GenericPayload,
    MembershipPayload,
    ReservationPayload,
    SocialEntryPayload,
    join_metadata_values,
    parse_metadata,
)
from greenroom.models.orders import parse_order
from greenroom.services.validation import validate

TODAY = date(2026, 10, 19)


def _payload(data):
    return validate(parse_order(data), today=TODAY).order.payload


class TestToMetadata:
    def test_values_are_strings_with_camel_case_keys(self, reservation_data):
        metadata = _payload(reservation_data).to_metadata()

        assert all(isinstance(value, str) for value in metadata.values())
        assert metadata["type"] == "reservation"
        assert metadata["partySize"] == "3"
        assert metadata["isMember"] == "false"
        assert metadata["contactEmail"] == "ada@example.com"

    def test_nested_fields_are_compact_json(self, reservation_data):
        metadata = _payload(reservation_data).to_metadata()

        guests = json.loads(metadata["guests"])
        assert guests[0] == {"fullName": "Ada Lovelace", "dob": "1990-12-10", "age": 35}
        assert json.loads(metadata["pricing"])["total"] == "240"
        assert ", " not in metadata["guests"]

    def test_none_values_are_omitted(self, social_non_member_data):
        metadata = _payload(social_non_member_data).to_metadata()

        assert "guestName" not in metadata
        assert "guestPhotoUrl" not in metadata
        assert metadata["hasGuest"] == "false"

    def test_long_values_continue_in_numbered_keys(self):
        metadata = GenericPayload(name="x" * 1200).to_metadata()

        assert [len(metadata[key]) for key in ("name", "name_1", "name_2")] == [500, 500, 200]
        assert parse_metadata(metadata).name == "x" * 1200

    def test_full_menu_order_keeps_every_item(self, menu_data):
        menu_data["items"] = [
            {"key": key, "quantity": 10, "enhance": key != "dessert"}
            for key in ("wings", "mozz", "truffle", "pretzel", "dessert")
        ]
        payload = _payload(menu_data)

        metadata = payload.to_metadata()

        assert "items_1" in metadata
        assert all(len(value) <= METADATA_VALUE_MAX_LENGTH for value in metadata.values())
        restored = parse_metadata(metadata)
        assert isinstance(restored, AfterDarkOrderPayload)
        assert restored == payload
        assert [item.quantity for item in restored.items] == [10] * 5

    def test_payload_over_key_limit_is_rejected(self):
        payload = GenericPayload(name="x" * (METADATA_VALUE_MAX_LENGTH * METADATA_MAX_KEYS))

        with pytest.raises(MetadataTooLargeError) as exc_info:
            payload.to_metadata()

        assert exc_info.value.code == ErrorCode.ORDER_TOO_LARGE


class TestParseMetadata:
    def test_round_trip_for_every_product(
        self, membership_data, reservation_data, social_member_data, menu_data
    ):
        for data in (membership_data, reservation_data, social_member_data, menu_data):
            payload = _payload(data)
            assert parse_metadata(payload.to_metadata()) == payload

    def test_reservation_types_are_restored(self, reservation_data):
        payload = parse_metadata(_payload(reservation_data).to_metadata())

        assert isinstance(payload, ReservationPayload)
        assert payload.party_size == 3
        assert payload.is_member is False
        assert payload.guests[2].full_name == "Mary Somerville"
        assert payload.pricing.total == Decimal("240")

    def test_menu_lines_are_restored(self, menu_data):
        payload = parse_metadata(_payload(menu_data).to_metadata())

        assert isinstance(payload, AfterDarkOrderPayload)
        assert payload.items[1].enhanced is True
        assert payload.items[1].line_total == Decimal("16")

    def test_missing_metadata_is_generic(self):
        payload = parse_metadata(None)

        assert isinstance(payload, GenericPayload)
        assert payload.product_type == "order"
        assert payload.contact_email is None

    def test_unknown_type_is_generic(self):
        payload = parse_metadata({"type": "gift-card", "contactEmail": "ada@example.com"})

        assert isinstance(payload, GenericPayload)
        assert payload.product_type == "gift-card"
        assert payload.contact_email == "ada@example.com"

    def test_bare_email_key_is_accepted(self):
        payload = parse_metadata({"type": "membership", "email": "ada@example.com"})

        assert isinstance(payload, MembershipPayload)
        assert payload.contact_email == "ada@example.com"

    def test_malformed_json_becomes_none(self, caplog):
        with caplog.at_level(logging.WARNING):
            payload = parse_metadata(
                {"type": "reservation", "guests": "[{not json", "partySize": "2"}
            )

        assert isinstance(payload, ReservationPayload)
        assert payload.guests is None
        assert payload.party_size == 2
        assert "Malformed JSON" in caplog.text

    def test_unreadable_scalar_is_dropped(self):
        payload = parse_metadata(
            {"type": "reservation", "partySize": "several", "name": "Ada Lovelace"}
        )

        assert isinstance(payload, ReservationPayload)
        assert payload.party_size is None
        assert payload.name == "Ada Lovelace"

    def test_empty_strings_are_missing(self):
        payload = parse_metadata({"type": "social-entry", "guestName": "", "isMember": "true"})

        assert isinstance(payload, SocialEntryPayload)
        assert payload.guest_name is None
        assert payload.is_member is True


class TestCheckoutRequestMetadata:
    def test_accepts_type_and_meta_aliases(self):
        request = CheckoutRequest.model_validate(
            {"type": "membership", "amount": 60, "meta": {"fullName": "Ada"}}
        )

        assert request.product_type == "membership"
        assert request.metadata == {"fullName": "Ada"}
        assert request.stripe_metadata["type"] == "membership"

    def test_non_string_values_are_stringified(self):
        request = CheckoutRequest.model_validate(
            {
                "productType": "reservation",
                "amount": "230",
                "metadata": {
                    "isMember": True,
                    "partySize": 3,
                    "guests": [{"fullName": "Ada"}],
                    "notes": None,
                },
            }
        )

        assert request.metadata == {
            "isMember": "true",
            "partySize": "3",
            "guests": '[{"fullName":"Ada"}]',
        }

    def test_amount_cents_rounds_half_up(self):
        request = CheckoutRequest(product_type="order", amount=Decimal("10.005"))
        assert request.amount_cents == 1001

    def test_stripe_metadata_type_wins(self):
        request = CheckoutRequest(
            product_type="membership", amount=Decimal("60"), metadata={"type": "other"}
        )
        assert request.stripe_metadata["type"] == "membership"

    def test_long_values_are_split_not_cut(self):
        request = CheckoutRequest.model_validate(
            {"type": "after-dark-order", "amount": 44, "metadata": {"notes": "n" * 600}}
        )

        assert request.metadata == {"notes": "n" * 500, "notes_1": "n" * 100}
        assert join_metadata_values(request.metadata) == {"notes": "n" * 600}

    def test_metadata_over_key_limit_is_rejected(self):
        with pytest.raises(ValidationError):
            CheckoutRequest.model_validate(
                {"type": "membership", "amount": 60, "metadata": {f"k{i}": "v" for i in range(50)}}
            )
