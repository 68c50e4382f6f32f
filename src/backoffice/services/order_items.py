"""Normalisation of the heterogeneous ``orders.items`` column.

Rows written over the life of the system store their items in one of
several shapes:

* ``[{"name": ..., "price": ..., "quantity": ...}, ...]`` from the manual
  order form;
* ``{"formatted": {name: qty}, "original": [...]}`` written by
  ``POST /api/orders`` since both views are kept;
* ``{name: qty-or-description}`` captured by the phone agent, where the
  value may be a number, a numeric string, ``"3 slices x 1"``,
  ``"2 large"`` or free text;
* any of the above JSON-encoded into a string.

:func:`parse_order_items` runs one decoder per shape in priority order and
never raises: anything it cannot read becomes an empty list.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from backoffice.models.order import OrderItem

logger = logging.getLogger(__name__)

RESERVED_KEYS = frozenset({"original", "formatted"})

_INTEGER = re.compile(r"^\d+$")
_DECIMAL = re.compile(r"^\d+\.\d+$")
_LEADING_QUANTITY = re.compile(r"^(\d+)\s")


@dataclass(frozen=True)
class Decoded:
    shape: str
    items: list[OrderItem]


@dataclass(frozen=True)
class NotMatched:
    reason: str


DecodeOutcome = Decoded | NotMatched


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

def _as_quantity(value: Any) -> int | None:
    """Return ``value`` as an integer quantity, or None if it is not numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if _INTEGER.match(text):
            return int(text)
        if _DECIMAL.match(text):
            return int(float(text))
    return None


def _clamp(quantity: int | None) -> int:
    if quantity is None or quantity < 1:
        return 1
    return quantity


def _price(value: Any) -> str:
    if value is None or isinstance(value, bool):
        return ""
    return str(value).strip()


def _item(name: Any, quantity: int | None = None, price: Any = None) -> OrderItem | None:
    label = str(name).strip() if name is not None else ""
    if not label:
        return None
    return OrderItem(name=label, quantity=_clamp(quantity), price=_price(price))


def _entry(entry: Any) -> OrderItem | None:
    """Map one element of an item list."""
    if isinstance(entry, str):
        return _item(entry)
    if isinstance(entry, dict):
        return _item(entry.get("name"), _as_quantity(entry.get("quantity")), entry.get("price"))
    return None


def _entries(raw: list) -> list[OrderItem]:
    items = []
    for entry in raw:
        item = _entry(entry)
        if item is None:
            logger.debug("Skipping order item without a name: %r", entry)
            continue
        items.append(item)
    return items


def _described(name: str, value: Any) -> OrderItem | None:
    """Map one ``name -> value`` pair of the phone-agent shape."""
    if isinstance(value, dict):
        return _entry({**value, "name": name})

    quantity = _as_quantity(value)
    if quantity is not None:
        return _item(name, quantity)

    if isinstance(value, str):
        text = value.strip()
        if " x " in text:
            trailing = text.rsplit(" x ", 1)[1].split()
            return _item(name, _as_quantity(trailing[0]) if trailing else None)
        match = _LEADING_QUANTITY.match(text)
        if match:
            return _item(f"{name} ({text})", int(match.group(1)))
        if text:
            return _item(f"{name} ({text})")

    return _item(name)


# ---------------------------------------------------------------------------
# Decoders, tried in order
# ---------------------------------------------------------------------------

def _decode_original(raw: Any) -> DecodeOutcome:
    if isinstance(raw, dict) and isinstance(raw.get("original"), list):
        return Decoded("original", _entries(raw["original"]))
    return NotMatched("no 'original' list")


def _decode_list(raw: Any) -> DecodeOutcome:
    if isinstance(raw, list):
        return Decoded("list", _entries(raw))
    return NotMatched("not a list")


def _decode_formatted(raw: Any) -> DecodeOutcome:
    if not (isinstance(raw, dict) and isinstance(raw.get("formatted"), dict)):
        return NotMatched("no 'formatted' map")
    items = []
    for name, value in raw["formatted"].items():
        item = _item(name, _as_quantity(value))
        if item is not None:
            items.append(item)
    return Decoded("formatted", items)


def _decode_name_map(raw: Any) -> DecodeOutcome:
    if not isinstance(raw, dict):
        return NotMatched("not an object")
    items = []
    for name, value in raw.items():
        key = str(name)
        if key.startswith("_") or key in RESERVED_KEYS:
            continue
        item = _described(key, value)
        if item is not None:
            items.append(item)
    return Decoded("name_map", items)


_DECODERS: tuple[Callable[[Any], DecodeOutcome], ...] = (
    _decode_original,
    _decode_list,
    _decode_formatted,
    _decode_name_map,
)


def decode_items(value: Any) -> DecodeOutcome:
    """Run the shape decoders in priority order and return the first match."""
    reasons = []
    for decoder in _DECODERS:
        outcome = decoder(value)
        if isinstance(outcome, Decoded):
            return outcome
        reasons.append(outcome.reason)
    return NotMatched("; ".join(reasons))


def parse_order_items(raw: Any) -> list[OrderItem]:
    """Normalise an order's ``items`` value into a list of line items.

    JSON strings are decoded once and then dispatched like any other value.
    Never raises; unreadable input yields an empty list and a log line.
    """
    try:
        value = raw
        if isinstance(raw, (str, bytes)):
            try:
                value = json.loads(raw)
            except (TypeError, ValueError) as exc:
                logger.warning("Unparseable order items string: %s", exc)
                return []

        outcome = decode_items(value)
        if isinstance(outcome, NotMatched):
            logger.warning("Unrecognised order items shape (%s): %s", type(value).__name__, outcome.reason)
            return []
        return outcome.items
    except Exception:
        logger.exception("Failed to parse order items")
        return []
