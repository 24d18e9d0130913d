"""Document writer for saving routed documents.

This module provides the PathWriter class for writing routing documents with
the routed naming convention.
"""

import json
from pathlib import Path

from polyroute.domain import Connector, RoutingDocument
from polyroute.exceptions import DocumentSaveError
from polyroute.io.converter import document_to_json


class PathWriter:
    """Writes routing documents after their connectors have been routed.

    Example:
        writer = PathWriter(document, Path("diagram-routed.json"))
        writer.update_connector(routed_connector)
        writer.save()
    """

    def __init__(self, document: RoutingDocument, output_path: Path) -> None:
        """Initialize the document writer.

        Args:
            document: The document to write
            output_path: Path where the document will be saved
        """
        self._document = document
        self._output_path = output_path

    def update_connector(self, connector: Connector) -> None:
        """Replace a connector in the document by identifier.

        Args:
            connector: Connector with the new path

        Raises:
            ValueError: If no connector with that identifier exists
        """
        for index, existing in enumerate(self._document.connectors):
            if existing.id == connector.id:
                self._document.connectors[index] = connector
                return
        raise ValueError(f"Connector '{connector.id}' not found in document")

    def save(self) -> None:
        """Save the document to the output path.

        Raises:
            DocumentSaveError: If the file cannot be written
        """
        try:
            with self._output_path.open("w", encoding="utf-8") as f:
                json.dump(document_to_json(self._document), f, indent=2)
                f.write("\n")
        except OSError as e:
            raise DocumentSaveError(str(self._output_path), str(e)) from e

    @staticmethod
    def get_routed_path(input_path: Path) -> Path:
        """Generate output path with the routed naming convention.

        Converts: diagram.json -> diagram-routed.json

        Args:
            input_path: Original document path

        Returns:
            Path with -routed suffix before extension
        """
        return input_path.parent / f"{input_path.stem}-routed{input_path.suffix}"
