"""
Manifest Parser - Validates and loads manifest XML documents

Each manifest kind has its own XSD shipped with the package. The
document is validated while it is parsed, then converted into the
typed model. Nothing is returned unless the whole document is valid.
"""

import logging
import os
from typing import BinaryIO, List, Optional, Union

from lxml import etree

from .model import (
    Behavior, ConnectorManifest, DataStoreManifest, FunctionType, Manifest,
    ManifestType, Operation, PropertyType,
)

_log = logging.getLogger(__name__)

SCHEMA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'schemas')

SCHEMA_FILES = {
    ManifestType.DATASTORE: 'DataStoreDefinition.xsd',
    ManifestType.CONNECTOR: 'ConnectorDefinition.xsd',
}


class ManifestError(Exception):
    """Manifest document is malformed or doesn't match its schema"""
    def __init__(self, message: str, errors: Optional[List[str]] = None):
        self.errors = errors or []
        details = "; ".join(self.errors)
        super().__init__(f"{message}: {details}" if details else message)


class ManifestFileNotFoundError(ManifestError, FileNotFoundError):
    """Manifest path doesn't exist"""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Manifest file not found: {path}")


def schema_path(manifest_type: Union[ManifestType, str]) -> str:
    """Location of the XSD for a manifest kind"""
    return os.path.join(SCHEMA_DIR, SCHEMA_FILES[ManifestType.parse(manifest_type)])


def load_schema(manifest_type: Union[ManifestType, str]) -> etree.XMLSchema:
    """Compile the XSD for a manifest kind"""
    return etree.XMLSchema(etree.parse(schema_path(manifest_type)))


def parse_manifest(
    manifest_type: Union[ManifestType, str],
    source: Union[BinaryIO, bytes],
    logger: Optional[logging.Logger] = None,
) -> Manifest:
    """
    Parse a manifest document.

    Args:
        manifest_type: ManifestType, or "datastore" / "connector"
        source: Binary stream or raw bytes of the XML document
        logger: Logger to report to (defaults to this module's logger)

    Returns:
        DataStoreManifest or ConnectorManifest

    Raises:
        ManifestError: If the document is malformed or invalid
    """
    log = logger or _log
    manifest_type = ManifestType.parse(manifest_type)

    log.debug("Validating %s manifest against %s",
              manifest_type.name.lower(), SCHEMA_FILES[manifest_type])
    parser = etree.XMLParser(
        schema=load_schema(manifest_type),
        resolve_entities=False,
        remove_comments=True,
        remove_pis=True,
        no_network=True,
    )

    try:
        if isinstance(source, (bytes, bytearray)):
            root = etree.fromstring(bytes(source), parser)
        else:
            root = etree.parse(source, parser).getroot()
    except (etree.XMLSyntaxError, etree.DocumentInvalid) as e:
        errors = [str(entry) for entry in e.error_log] or [str(e)]
        log.error("Invalid %s manifest: %s", manifest_type.name.lower(), errors[0])
        raise ManifestError(f"Invalid {manifest_type.name.lower()} manifest", errors) from e

    try:
        if manifest_type == ManifestType.DATASTORE:
            return _to_datastore(root)
        return _to_connector(root)
    except KeyError as e:
        log.error("Unknown value in %s manifest: %s", manifest_type.name.lower(), e)
        raise ManifestError(f"Invalid {manifest_type.name.lower()} manifest",
                            [f"unknown value {e}"]) from e


def parse_manifest_file(
    manifest_type: Union[ManifestType, str],
    path: str,
    logger: Optional[logging.Logger] = None,
) -> Manifest:
    """
    Parse a manifest document stored on disk.

    Raises:
        ManifestFileNotFoundError: If the path doesn't exist
        ManifestError: If the document is malformed or invalid
    """
    if not os.path.isfile(path):
        raise ManifestFileNotFoundError(path)

    with open(path, 'rb') as f:
        return parse_manifest(manifest_type, f, logger)


# ============================================================================
# Tree conversion
# ============================================================================

def _to_datastore(root) -> DataStoreManifest:
    return DataStoreManifest(
        name=_text(root, 'Name'),
        version=_text(root, 'Version'),
        required_properties=_properties(root.find('RequiredProperties')),
        optional_properties=_properties(root.find('OptionalProperties')),
        behaviors=tuple(Behavior[_element_text(b)] for b in root.iterfind('Behaviors/Behavior')),
        functions=_functions(root.find('Functions')),
    )


def _to_connector(root) -> ConnectorManifest:
    native = root.find('Native')
    return ConnectorManifest(
        name=_text(root, 'ConnectorName'),
        data_stores=tuple(_element_text(ds) for ds in root.iterfind('DataStores/DataStoreName')),
        version=_text(root, 'Version'),
        supported_operations=tuple(
            Operation[_element_text(op)] for op in root.iterfind('SupportedOperations/operation')
        ),
        native=native is not None and _element_text(native) in ('true', '1'),
        required_properties=_properties(root.find('RequiredProperties')),
        optional_properties=_properties(root.find('OptionalProperties')),
        functions=_functions(root.find('Functions')),
    )


def _text(element, path: str, default: str = "") -> str:
    """Stripped text of a child element"""
    child = element.find(path)
    if child is None:
        return default
    return _element_text(child)


def _element_text(element) -> str:
    """Stripped text of an element, skipping any comments or processing instructions"""
    parts = [element.text or ""]
    for child in element:
        if not isinstance(child.tag, str):
            parts.append(child.tail or "")
    return "".join(parts).strip()


def _properties(element) -> tuple:
    if element is None:
        return ()
    return tuple(
        PropertyType(_text(prop, 'PropertyName'), _text(prop, 'Description'))
        for prop in element.iterfind('Property')
    )


def _functions(element) -> tuple:
    if element is None:
        return ()
    return tuple(
        FunctionType(
            name=_text(func, 'FunctionName'),
            signature=_text(func, 'Signature'),
            kind=_text(func, 'FunctionType'),
            description=_text(func, 'Description') if func.find('Description') is not None else None,
        )
        for func in element.iterfind('Function')
    )
