# Overview: Typed input records validated at the service boundary.

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any

from ..models import MEASUREMENT_FIELDS, ORDER_STATUSES
from optistore.time_utils import parse_date
from .errors import ValidationError


PIN_PATTERN = re.compile(r"^\d{4,10}$")

# Largest value a NUMERIC(12,2) column holds
MAX_AMOUNT = Decimal("9999999999.99")


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text if text else None


def _require_text(data: dict, key: str, label: str) -> str:
    text = _to_text(data.get(key))
    if text is None:
        raise ValidationError(f"{label} is required", field=key)
    return text


def _to_date(data: dict, key: str, *, default: date | None = None) -> date | None:
    raw = data.get(key)
    try:
        value = parse_date(raw)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(f"{key} must be a date (YYYY-MM-DD or DD/MM/YYYY)", field=key)
    return value if value is not None else default


def _to_amount(data: dict, key: str) -> Decimal | None:
    raw = data.get(key)
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"{key} must be a number", field=key)
    try:
        amount = Decimal(str(raw).strip().replace(",", ""))
        if not amount.is_finite():
            raise ValidationError(f"{key} must be a number", field=key)
        if amount < 0:
            raise ValidationError(f"{key} cannot be negative", field=key)
        if amount > MAX_AMOUNT:
            raise ValidationError(f"{key} cannot exceed {MAX_AMOUNT}", field=key)
        return amount.quantize(Decimal("0.01"))
    except InvalidOperation:
        raise ValidationError(f"{key} must be a number", field=key)


def validate_pin(pin: Any) -> str:
    """PINs are 4 to 10 digits."""
    text = _to_text(pin)
    if text is None:
        raise ValidationError("PIN is required", field="pin")
    if not PIN_PATTERN.match(text):
        raise ValidationError("PIN must be 4 to 10 digits", field="pin")
    return text


@dataclass
class StoreInput:
    name: str
    pin: str | None
    address: str | None = None
    phone: str | None = None
    email: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None, *, require_pin: bool = True) -> "StoreInput":
        data = data or {}
        pin = data.get("pin")
        if require_pin or _to_text(pin) is not None:
            pin = validate_pin(pin)
        else:
            pin = None
        return cls(
            name=_require_text(data, "name", "Store name"),
            pin=pin,
            address=_to_text(data.get("address")),
            phone=_to_text(data.get("phone")),
            email=_to_text(data.get("email")),
        )


@dataclass
class CustomerInput:
    name: str
    phone: str
    address: str | None = None
    remarks: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None) -> "CustomerInput":
        data = data or {}
        return cls(
            name=_require_text(data, "name", "Customer name"),
            phone=_require_text(data, "phone", "Phone number"),
            address=_to_text(data.get("address")),
            remarks=_to_text(data.get("remarks")),
        )


@dataclass
class CheckupInput:
    customer_id: str
    date: date
    measurements: dict = field(default_factory=dict)
    ipd_bridge: str | None = None
    tested_by: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None, *, today: date) -> "CheckupInput":
        data = data or {}
        # Older records carried the IPD/bridge reading as bifocal_details
        ipd_bridge = _to_text(data.get("ipd_bridge")) or _to_text(data.get("bifocal_details"))
        return cls(
            customer_id=_require_text(data, "customer_id", "Customer"),
            date=_to_date(data, "date", default=today),
            measurements={name: _to_text(data.get(name)) for name in MEASUREMENT_FIELDS},
            ipd_bridge=ipd_bridge,
            tested_by=_to_text(data.get("tested_by")),
        )


@dataclass
class OrderInput:
    customer_id: str
    order_date: date
    checkup_id: str | None = None
    expected_delivery_date: date | None = None
    delivered_date: date | None = None
    frame: str | None = None
    lenses: str | None = None
    total_amount: Decimal = Decimal("0.00")
    advance_amount: Decimal = Decimal("0.00")
    balance_amount: Decimal = Decimal("0.00")
    status: str = "pending"
    notes: str | None = None

    @classmethod
    def from_dict(cls, data: dict | None, *, today: date) -> "OrderInput":
        data = data or {}
        status = _to_text(data.get("status")) or "pending"
        status = status.lower()
        if status not in ORDER_STATUSES:
            raise ValidationError(
                f"status must be one of: {', '.join(ORDER_STATUSES)}", field="status"
            )

        total = _to_amount(data, "total_amount") or Decimal("0.00")
        advance = _to_amount(data, "advance_amount") or Decimal("0.00")
        balance = _to_amount(data, "balance_amount")
        if balance is None:
            balance = total - advance

        return cls(
            customer_id=_require_text(data, "customer_id", "Customer"),
            order_date=_to_date(data, "order_date", default=today),
            checkup_id=_to_text(data.get("checkup_id")),
            expected_delivery_date=_to_date(data, "expected_delivery_date"),
            delivered_date=_to_date(data, "delivered_date"),
            frame=_to_text(data.get("frame")),
            lenses=_to_text(data.get("lenses")),
            total_amount=total,
            advance_amount=advance,
            balance_amount=balance,
            status=status,
            notes=_to_text(data.get("notes")),
        )
