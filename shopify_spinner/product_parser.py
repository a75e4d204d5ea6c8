"""
Product Parser — Load a product CSV and group its rows into products.

Expected columns (header matched case-insensitively, extra columns ignored):

    handle, title, description, vendor, type, tags, price, compare_at_price,
    sku, inventory_qty, weight, weight_unit, image_url,
    variant_option{1,2,3}_name, variant_option{1,2,3}_value

Each row is one variant. Rows sharing a handle become one Product, in the
order the handle first appears; the first row supplies the product fields.
Tags are ';'-separated inside their cell.

Bad rows never stop the parse. A row missing handle/title/price, or with a
non-numeric or non-positive price, adds one entry to `errors` and is
skipped. A row without image_url is kept and adds one entry to `warnings`.
A missing, unparsable or negative inventory_qty becomes 0. Bytes that are
not valid UTF-8 are replaced, not fatal. Row numbers are 1-based with the
header counted as row 1 (blank lines are not counted).
"""

import math
import os
from typing import Dict, List, Optional

from .products import Product, ProductParseResult, ProductVariant

REQUIRED_COLUMNS = ("handle", "title", "price")
MAX_VARIANT_OPTIONS = 3


def parse_csv_line(line: str) -> List[str]:
    """Split one CSV line on commas, honouring double-quoted fields.

    Inside quotes, "" is an escaped quote. Fields are whitespace-trimmed.
    Quoted fields may not span lines.
    """
    fields = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def _parse_float(value: str) -> Optional[float]:
    if not value:
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def _parse_int(value: str, default: int = 0) -> int:
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        number = _parse_float(value)
        return int(number) if number is not None else default


def _split_tags(value: str) -> List[str]:
    return [tag.strip() for tag in value.split(";") if tag.strip()]


def parse_products_csv(path: str) -> ProductParseResult:
    """Parse a product CSV file.

    Returns:
        ProductParseResult with grouped products plus collected warnings and
        errors. A missing or empty file yields no products and one error.
    """
    result = ProductParseResult()

    if not os.path.exists(path):
        result.errors.append(f"File not found: {path}")
        return result

    # utf-8-sig strips the BOM that spreadsheet exports often prepend;
    # undecodable bytes become U+FFFD instead of aborting the parse
    with open(path, "r", encoding="utf-8-sig", errors="replace") as f:
        lines = [line for line in f.read().splitlines() if line.strip()]

    if not lines:
        result.errors.append("CSV file is empty")
        return result

    headers = parse_csv_line(lines[0])
    col_index = {header.lower(): index for index, header in enumerate(headers)}

    products: Dict[str, Product] = {}

    for line_number, line in enumerate(lines[1:], start=2):
        fields = parse_csv_line(line)

        def get_value(column: str) -> str:
            index = col_index.get(column)
            if index is None or index >= len(fields):
                return ""
            return fields[index]

        missing = next((col for col in REQUIRED_COLUMNS if not get_value(col)), None)
        if missing:
            result.errors.append(f"Row {line_number}: Missing required field '{missing}'")
            continue

        handle = get_value("handle")
        raw_price = get_value("price")
        price = _parse_float(raw_price)
        if price is None or price <= 0:
            result.errors.append(f"Row {line_number}: Invalid price value '{raw_price}'")
            continue

        image_url = get_value("image_url")
        if not image_url:
            result.warnings.append(
                f"Row {line_number}: Missing image_url for product '{handle}'"
            )

        options = {}
        for option_number in range(1, MAX_VARIANT_OPTIONS + 1):
            name = get_value(f"variant_option{option_number}_name")
            value = get_value(f"variant_option{option_number}_value")
            if name and value:
                options[name] = value

        variant = ProductVariant(
            sku=get_value("sku"),
            price=price,
            compare_at_price=_parse_float(get_value("compare_at_price")),
            inventory_qty=max(_parse_int(get_value("inventory_qty")), 0),
            weight=_parse_float(get_value("weight")),
            weight_unit=get_value("weight_unit") or None,
            image_url=image_url or None,
            options=options,
        )

        product = products.get(handle)
        if product is None:
            product = Product(
                handle=handle,
                title=get_value("title"),
                description=get_value("description"),
                vendor=get_value("vendor"),
                type=get_value("type"),
                tags=_split_tags(get_value("tags")),
            )
            products[handle] = product
        product.variants.append(variant)

    result.products = list(products.values())
    return result
