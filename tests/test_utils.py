#!/usr/bin/env python3
"""
Shared test utilities and resources.

Sample documents and small schema classes reused across the test modules.
"""

import os
import tempfile
from dataclasses import dataclass
from enum import Enum
from typing import Optional

CRLF = "\r\n"

INVENTORY_DOCUMENT = """
! Inventory sample
Properties,Shelf,Id,Name,Aisle
Values,Shelf,#,"Top",1
Values,Shelf,#,"Bottom",1

Properties,Item,Id,Name,Shelf,Price
Values,Item,#,"Bread","#Shelf(Top)",1.25
Values,Item,#,"Milk, semi-skimmed",#Shelf("Bottom"),0.99
Values,Item,#,"Eggs",#Shelf(Nowhere),2.10
"""

SEQUENCE_DOCUMENT = """
Properties,Foo,Id,Name
Values,Foo,#,"One"
Values,Foo,99,"Two"
Values,Foo,#,"Three"
"""


def write_temp_file(content: str, suffix: str = ".txt") -> str:
    """Write content to a named temporary file and return its path."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=suffix, delete=False,
                                     encoding="utf-8", newline="") as f:
        f.write(content)
        return f.name


def remove_file(path: str) -> None:
    if os.path.exists(path):
        os.unlink(path)


class Colour(Enum):
    RED = 1
    GREEN = 2
    BLUE = 3


@dataclass
class Product:
    Id: int
    Name: str
    Colour: Colour
    InStock: bool
    Price: Optional[float] = None


@dataclass
class Audit:
    Id: int
    Author: str
    Approved: bool


@dataclass
class Label:
    Text: str
    Priority: int
