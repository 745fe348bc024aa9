"""A navigation without its foreign key property."""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Supplier:
    SupplierID: str
    Name: str = ""


@dataclass
class Part:
    PartID: int
    Supplier: Optional["Supplier"] = None
