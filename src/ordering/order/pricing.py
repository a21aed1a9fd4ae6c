"""Server-side pricing of requested order lines from the catalog."""

from protean.exceptions import ValidationError

from ordering.catalog import get_catalog


def price_lines(requested: list[dict]) -> list[dict]:
    """Turn ``[{product_id, quantity}, ...]`` into priced order lines.

    Any client-supplied price or total on the entries is ignored. A product
    requested more than once becomes a single line carrying the summed
    quantity, placed where the product first appeared, so each product id
    names exactly one line. All problems are collected and reported together
    under ``items``.
    """
    if not isinstance(requested, list) or not requested:
        raise ValidationError({"items": ["An order needs at least one item"]})

    catalog = get_catalog()
    errors = []
    lines: dict[str, dict] = {}
    for position, entry in enumerate(requested, start=1):
        product_id = entry.get("product_id") if isinstance(entry, dict) else None
        quantity = entry.get("quantity") if isinstance(entry, dict) else None

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            errors.append(f"Line {position}: quantity must be a positive whole number")
            continue

        product = catalog.get_product(str(product_id)) if product_id else None
        if product is None:
            errors.append(f"Line {position}: unknown product {product_id}")
            continue

        line = lines.get(product["product_id"])
        if line is not None:
            line["quantity"] += quantity
            continue
        lines[product["product_id"]] = {
            "product_id": product["product_id"],
            "name": product["name"],
            "category": product["category"],
            "unit_price": product["price"],
            "quantity": quantity,
        }

    if errors:
        raise ValidationError({"items": errors})
    return list(lines.values())
