"""Document I/O layer for polyroute.

This module handles reading and writing JSON routing documents. It provides
a clean abstraction layer between the file format and the domain models.

Key responsibilities:
- Load and validate routing documents
- Convert JSON representations to domain models
- Write routed documents with proper naming convention

Key classes:
- PathReader: Load documents and extract connectors and obstacles
- PathWriter: Save routed documents
"""

from polyroute.io.converter import document_to_json, json_to_document
from polyroute.io.reader import PathReader
from polyroute.io.writer import PathWriter

__all__ = [
    "PathReader",
    "PathWriter",
    "document_to_json",
    "json_to_document",
]
