"""
Unit tests for the JSON Exporter
"""

import json

import pytest

from pocometa.exporter import MetadataExporter
from pocometa.schema import Metadata


@pytest.fixture
def metadata():
    """Small metadata document"""
    return Metadata(
        structural_types=[
            {
                "name": "cafe.Produto",
                "shortName": "Produto",
                "namespace": "cafe",
                "isComplexType": False,
                "autoGeneratedKeyType": "None",
                "resourceName": "Produtos",
                "dataProperties": [
                    {
                        "name": "Descrição",
                        "dataType": "String",
                        "isNullable": True,
                        "isPartOfKey": False,
                        "isVersionProperty": False,
                        "validators": [],
                    }
                ],
                "navigationProperties": [],
            }
        ],
        resource_entity_type_map={"Produtos": "cafe.Produto"},
    )


class TestMetadataExporter:
    """Test JSON rendering and file export"""

    def test_to_json(self, metadata):
        """Test rendering keeps key order and non-ASCII names"""
        text = MetadataExporter().to_json(metadata)

        assert text.startswith('{\n  "metadataVersion": "1.0.5"')
        assert "Descrição" in text
        assert json.loads(text) == metadata.to_dict()

    def test_compact_output(self, metadata):
        """Test indent 0 renders a single line"""
        text = MetadataExporter(indent=0).to_json(metadata)
        assert "\n" not in text

    def test_export_creates_folders(self, metadata, tmp_path):
        """Test exporting into a folder that does not exist yet"""
        output_file = tmp_path / "out" / "metadata.json"

        result = MetadataExporter().export(metadata, output_file)

        assert result == output_file
        document = json.loads(output_file.read_text(encoding="utf-8"))
        assert document["resourceEntityTypeMap"] == {"Produtos": "cafe.Produto"}

    def test_export_encoding(self, metadata, tmp_path):
        """Test the configured encoding is used for the file"""
        output_file = tmp_path / "metadata.json"

        MetadataExporter(encoding="latin-1").export(metadata, output_file)

        assert "Descrição" in output_file.read_text(encoding="latin-1")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
