"""
Upload file parsers.
"""

from parsers.product_file_parser import (
    parse_product_file,
    SUPPORTED_EXTENSIONS,
)

__all__ = [
    "parse_product_file",
    "SUPPORTED_EXTENSIONS",
]
