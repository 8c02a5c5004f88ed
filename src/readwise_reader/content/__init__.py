"""
Plain-text content for documents (URL conversion and markup extraction).
"""

from .converter import ContentConversionError, JinaReaderConverter, extract_text_from_html

__all__ = [
    "ContentConversionError",
    "JinaReaderConverter",
    "extract_text_from_html",
]
