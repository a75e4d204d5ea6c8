"""Product and variant records parsed from a product CSV."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class ProductVariant:
    sku: str
    price: float
    compare_at_price: Optional[float] = None
    inventory_qty: int = 0
    weight: Optional[float] = None
    weight_unit: Optional[str] = None
    image_url: Optional[str] = None
    # Option name -> value, in column order (e.g. {"Size": "Large"})
    options: Dict[str, str] = field(default_factory=dict)


@dataclass
class Product:
    handle: str
    title: str
    description: str = ""
    vendor: str = ""
    type: str = ""
    tags: List[str] = field(default_factory=list)
    variants: List[ProductVariant] = field(default_factory=list)


@dataclass
class ProductParseResult:
    products: List[Product] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
