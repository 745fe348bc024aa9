"""JSON exporter."""
import json
from pathlib import Path

from pocometa.schema.models import Metadata


class MetadataExporter:
    """Export metadata documents to JSON."""

    def __init__(self, indent: int = 2, encoding: str = "utf-8"):
        """Initialize exporter."""
        self.indent = indent
        self.encoding = encoding

    def to_json(self, metadata: Metadata) -> str:
        """Render the document as JSON text."""
        return json.dumps(
            metadata.to_dict(),
            indent=self.indent or None,
            ensure_ascii=False,
            default=str,
        )

    def export(self, metadata: Metadata, output_file: Path) -> Path:
        """Export to JSON file."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding=self.encoding) as f:
            f.write(self.to_json(metadata))

        return output_file
