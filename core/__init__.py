"""
Core module for bill data extraction.

This module provides the main classes and interfaces for:
- Document models (DocumentText, ExtractedBillRecord)
- Field strategy cascades
- PDF-to-text reading strategies (contract)
- The two-stage extraction pipeline (``core.pipeline``)

The pipeline is not imported here: it depends on ``extractors``, which in
turn depends on the models below.
"""

from .exceptions import (
    BillExtractionException,
    ConversionError,
    ExtractionError,
    PdfParseError,
)
from .interfaces import TextExtractionStrategy
from .models import DocumentText, ExtractedBillRecord

__all__ = [
    # Models
    "DocumentText",
    "ExtractedBillRecord",
    # Interfaces
    "TextExtractionStrategy",
    # Exceptions
    "BillExtractionException",
    "ConversionError",
    "ExtractionError",
    "PdfParseError",
]
