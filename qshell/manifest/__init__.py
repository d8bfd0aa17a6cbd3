"""Manifest module - Datastore and connector definitions"""

from .model import (
    ManifestType, Behavior, Operation, PropertyType, FunctionType,
    DataStoreManifest, ConnectorManifest,
)
from .parser import (
    ManifestError, ManifestFileNotFoundError,
    parse_manifest, parse_manifest_file, load_schema, schema_path,
)

__all__ = [
    'ManifestType', 'Behavior', 'Operation', 'PropertyType', 'FunctionType',
    'DataStoreManifest', 'ConnectorManifest',
    'ManifestError', 'ManifestFileNotFoundError',
    'parse_manifest', 'parse_manifest_file', 'load_schema', 'schema_path',
]
