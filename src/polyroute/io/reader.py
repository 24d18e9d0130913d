"""Document reader for loading routing documents.

This module provides the PathReader class for loading JSON routing documents
and extracting connectors and obstacles as domain models.
"""

import json
from collections.abc import Iterator
from pathlib import Path

from polyroute.domain import Connector, Obstacle, RoutingDocument
from polyroute.exceptions import DocumentLoadError
from polyroute.io.converter import json_to_document


class PathReader:
    """Loads routing documents and exposes their contents.

    Example:
        reader = PathReader(Path("diagram.json"))
        reader.load()
        for connector in reader.iter_connectors():
            print(connector.id)
    """

    def __init__(self, document_path: Path) -> None:
        """Initialize the document reader.

        Args:
            document_path: Path to the JSON routing document
        """
        self._document_path = document_path
        self._document: RoutingDocument | None = None

    def load(self) -> None:
        """Load and validate the document.

        Raises:
            FileNotFoundError: If the document does not exist
            DocumentLoadError: If the file is not readable JSON
            DocumentFormatError: If the JSON does not match the document schema
        """
        if not self._document_path.exists():
            raise FileNotFoundError(f"Document not found: {self._document_path}")

        try:
            with self._document_path.open(encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DocumentLoadError(str(self._document_path), str(e)) from e

        self._document = json_to_document(data, str(self._document_path))

    @property
    def document(self) -> RoutingDocument:
        """The loaded document.

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        if self._document is None:
            raise RuntimeError("Document not loaded. Call load() first.")
        return self._document

    @property
    def connectors(self) -> list[Connector]:
        """Connectors in document order."""
        return self.document.connectors

    @property
    def obstacles(self) -> list[Obstacle]:
        """Obstacles in document order."""
        return self.document.obstacles

    def iter_connectors(self) -> Iterator[Connector]:
        """Iterate over all connectors.

        Yields:
            Connector domain models

        Raises:
            RuntimeError: If the document has not been loaded yet
        """
        yield from self.document.connectors

    def close(self) -> None:
        """Drop the loaded document."""
        self._document = None

    def __enter__(self) -> "PathReader":
        """Context manager entry."""
        self.load()
        return self

    def __exit__(self, _exc_type: object, _exc_val: object, _exc_tb: object) -> None:
        """Context manager exit."""
        self.close()
