"""Server-side pricing for line items.

Client-supplied prices are never read: unit price is always derived from the
variant and the paid modifiers using the tables below.
"""

from rest_framework import serializers

VARIANT_PRICES = {
    "normal": 110,
    "special": 135,
}

MODIFIER_PRICES = {
    "extra_ketchup": 10,
    "extra_felafil": 15,
}

# ketchup and spices are free and included unless switched off
FLAG_DEFAULTS = {
    "ketchup": True,
    "spices": True,
    "extra_ketchup": False,
    "extra_felafil": False,
}


def _quantity(raw) -> int:
    if raw is None or raw == "":
        return 1
    if isinstance(raw, int) and not isinstance(raw, bool):
        value = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        value = int(raw)
    else:
        value = 0
    if value < 1:
        raise serializers.ValidationError({"items": "Quantity must be a positive integer."})
    return value


def normalize_item(raw: dict) -> dict:
    """Variant, boolean flags (with defaults) and quantity of a raw item."""
    variant = raw.get("variant") or "normal"
    if variant not in VARIANT_PRICES:
        raise serializers.ValidationError(
            {"items": f"Unknown variant '{variant}'. Allowed: {', '.join(VARIANT_PRICES)}."}
        )
    item = {"variant": variant}
    for flag, default in FLAG_DEFAULTS.items():
        value = raw.get(flag)
        item[flag] = default if value is None else bool(value)
    item["quantity"] = _quantity(raw.get("quantity"))
    return item


def unit_price(item: dict) -> int:
    price = VARIANT_PRICES[item["variant"]]
    for modifier, surcharge in MODIFIER_PRICES.items():
        if item.get(modifier):
            price += surcharge
    return price


def build_line_items(raw_items):
    """Return (line items with unit_price/line_total, order total)."""
    built = []
    total = 0
    for raw in raw_items:
        item = normalize_item(raw)
        item["unit_price"] = unit_price(item)
        item["line_total"] = item["unit_price"] * item["quantity"]
        total += item["line_total"]
        built.append(item)
    return built, total
