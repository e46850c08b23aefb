"""Confirmation templates for completed payments.

One renderer per product type plus a generic fallback. Every renderer takes
the typed payload parsed from metadata and the charged amount, and returns
the email subject, HTML body, plain-text body and SMS text. Optional blocks
(member discount note, policy, notes, items, system note) are rendered only
when the payload carries them.
"""

import json
from decimal import Decimal
from html import escape
from typing import Any, Callable, Mapping

from greenroom.models.metadata import (
    AfterDarkOrderPayload,
    MembershipPayload,
    NotificationPayload,
    ReservationPayload,
    SocialEntryPayload,
)
from greenroom.models.notifications import Notification
from greenroom.services.catalog import Catalog, get_catalog

ADMIN_SUBJECT_PREFIX = "[Admin] "

_PRE_STYLE = (
    "white-space: pre-wrap; background: #111; padding: 10px; "
    "border-radius: 6px; color: #eee;"
)


def format_amount(amount: Decimal) -> str:
    return f"${amount:.2f}"


def _wrap(subject: str, inner: str) -> str:
    return f"""
    <html>
    <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        <h2 style="color: #333;">{escape(subject)}</h2>
        {inner}
    </body>
    </html>
    """


def _pre(text: str | None) -> str:
    if not text:
        return ""
    return f'<pre style="{_PRE_STYLE}">{escape(text)}</pre>'


def _para(text: str | None) -> str:
    if not text:
        return ""
    return f"<p>{escape(text)}</p>"


def _lines(*parts: str | None) -> str:
    return "\n".join(part for part in parts if part)


def render_generic(payload: NotificationPayload, amount: Decimal, catalog: Catalog) -> Notification:
    subject = "Payment received"
    total = format_amount(amount)
    return Notification(
        subject=subject,
        html=_wrap(subject, f"<p>We received your payment of {total}.</p>"),
        text=_lines(subject, "", f"We received your payment of {total}."),
        sms=f"Thanks! Payment received: {total}.",
    )


def render_membership(payload: MembershipPayload, amount: Decimal, catalog: Catalog) -> Notification:
    subject = "Membership Payment Received"
    body = (
        "We received your membership details and payment. We'll review your "
        "photo/ID match and issue your unique QR code (save it to your phone)."
    )
    return Notification(
        subject=subject,
        html=_wrap(subject, _para(body) + _para(payload.perks)),
        text=_lines(subject, "", body, payload.perks),
        sms="Membership received. You'll get your QR code shortly.",
    )


def render_reservation(
    payload: ReservationPayload, amount: Decimal, catalog: Catalog
) -> Notification:
    subject = "Your Cafe Reservation is Confirmed"

    details: list[tuple[str, str]] = []
    if payload.date:
        details.append(("Date", payload.date))
    if payload.time:
        details.append(("Time", payload.time))
    party = ""
    if payload.party_size is not None:
        party = str(payload.party_size)
        if payload.is_member:
            party += " (member discount applied)"
        details.append(("Party", party))

    detail_html = "<br/>".join(
        f"<strong>{label}:</strong> {escape(value)}" for label, value in details
    )
    inner = (
        (f"<p>{detail_html}</p>" if detail_html else "")
        + _para(payload.policy)
        + _pre(payload.notes)
    )

    when = " ".join(part for part in (payload.date, payload.time) if part)
    sms = "Reservation confirmed"
    if when:
        sms += f": {when}"
    if payload.party_size is not None:
        sms += f", party {payload.party_size}"
    sms += ". Check email for details."

    return Notification(
        subject=subject,
        html=_wrap(subject, inner),
        text=_lines(
            subject,
            "",
            *(f"{label}: {value}" for label, value in details),
            payload.policy,
            payload.notes,
        ),
        sms=sms,
    )


def render_social_entry(
    payload: SocialEntryPayload, amount: Decimal, catalog: Catalog
) -> Notification:
    subject = "Social After Dark - Address & Codeword"
    inner = (
        f"<p><strong>Address:</strong> {escape(catalog.social_address)}<br/>"
        f"<strong>Codeword:</strong> {escape(catalog.social_codeword)}<br/>"
        f"<strong>Hours:</strong> {escape(catalog.social_hours)}</p>"
        + _para(catalog.social_rules)
        + _pre(payload.qr_system_note)
    )
    return Notification(
        subject=subject,
        html=_wrap(subject, inner),
        text=_lines(
            subject,
            "",
            f"Address: {catalog.social_address}",
            f"Codeword: {catalog.social_codeword}",
            f"Hours: {catalog.social_hours}",
            catalog.social_rules,
            payload.qr_system_note,
        ),
        sms=(
            f"Social Entry confirmed. Address: {catalog.social_address}. "
            f"Codeword: {catalog.social_codeword}. Hours {catalog.social_hours}. "
            "Have your QR ready."
        ),
    )


def _item_lines(payload: AfterDarkOrderPayload) -> list[str]:
    lines = []
    for item in payload.items or []:
        label = item.label or item.key
        line = f"{item.quantity} x {label}"
        if item.enhanced:
            line += " (enhanced)"
        if item.line_total is not None:
            line += f" - {format_amount(item.line_total)}"
        lines.append(line)
    return lines


def render_after_dark_order(
    payload: AfterDarkOrderPayload, amount: Decimal, catalog: Catalog
) -> Notification:
    subject = "Order Received - After Dark Menu"
    total = format_amount(amount)
    items = "\n".join(_item_lines(payload))
    inner = f"<p>Total: <strong>{total}</strong></p>" + _pre(items) + _para(payload.policy)
    return Notification(
        subject=subject,
        html=_wrap(subject, inner),
        text=_lines(subject, "", f"Total: {total}", items, payload.policy),
        sms=f"Thanks! Your order was received. Total {total}. Check email for details.",
    )


_RENDERERS: dict[type[NotificationPayload], Callable[..., Notification]] = {
    MembershipPayload: render_membership,
    ReservationPayload: render_reservation,
    SocialEntryPayload: render_social_entry,
    AfterDarkOrderPayload: render_after_dark_order,
}


def render(
    payload: NotificationPayload, amount: Decimal, catalog: Catalog | None = None
) -> Notification:
    """Render the customer confirmation for a completed payment.

    Unknown payload types fall back to the generic "Payment received" template.
    """
    renderer = _RENDERERS.get(type(payload), render_generic)
    return renderer(payload, amount, catalog or get_catalog())


def admin_copy(
    notification: Notification, amount: Decimal, metadata: Mapping[str, Any]
) -> Notification:
    """Build the admin copy: prefixed subject, amount and the raw metadata."""
    subject = f"{ADMIN_SUBJECT_PREFIX}{notification.subject}"
    total = format_amount(amount)
    dump = json.dumps(dict(metadata), indent=2, sort_keys=True, default=str)
    return Notification(
        subject=subject,
        html=_wrap(subject, f"<p>Amount: {total}</p>" + _pre(dump)),
        text=_lines(subject, "", f"Amount: {total}", dump),
        sms=f"{subject}: {total}",
    )
