"""Serialization of metadata documents."""

from .json_exporter import MetadataExporter

__all__ = ["MetadataExporter"]
