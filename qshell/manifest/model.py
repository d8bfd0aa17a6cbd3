"""
Manifest Model - Typed datastore and connector definitions

Mirrors the two manifest documents:
- DataStoreManifest: name, version, properties, behaviors, functions
- ConnectorManifest: name, datastores served, version, properties,
  supported operations, functions
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union


class ManifestType(Enum):
    """Kinds of manifest documents"""
    DATASTORE = auto()
    CONNECTOR = auto()

    @classmethod
    def parse(cls, value: Union['ManifestType', str]) -> 'ManifestType':
        """Accept a member or its name in any case ("datastore", "CONNECTOR")"""
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).upper()]
        except KeyError:
            raise ValueError(f"Unknown manifest type: {value}") from None


class Behavior(Enum):
    """Special behaviors a datastore may declare"""
    UPSERT_ON_INSERT = auto()
    FAKE_CATALOGS = auto()


class Operation(Enum):
    """Operations a connector may support"""
    CREATE_CATALOG = auto()
    ALTER_CATALOG = auto()
    DROP_CATALOG = auto()
    CREATE_TABLE = auto()
    ALTER_TABLE = auto()
    DROP_TABLE = auto()
    CREATE_INDEX = auto()
    DROP_INDEX = auto()
    INSERT = auto()
    INSERT_IF_NOT_EXISTS = auto()
    DELETE_PK_EQ = auto()
    UPDATE_PK_EQ = auto()
    TRUNCATE_TABLE = auto()
    PROJECT = auto()
    SELECT_OPERATOR = auto()
    SELECT_LIMIT = auto()
    SELECT_GROUP_BY = auto()
    SELECT_ORDER_BY = auto()
    SELECT_INNER_JOIN = auto()
    SELECT_FUNCTIONS = auto()
    FILTER_PK_EQ = auto()
    FILTER_NON_INDEXED_EQ = auto()
    FILTER_NON_INDEXED_GT = auto()
    FILTER_NON_INDEXED_LT = auto()
    FILTER_INDEXED_EQ = auto()
    FILTER_INDEXED_MATCH = auto()


@dataclass(frozen=True)
class PropertyType:
    """A configuration property and what it is for"""
    name: str
    description: str = ""


@dataclass(frozen=True)
class FunctionType:
    """A function provided by a datastore or connector"""
    name: str
    signature: str
    kind: str = "simple"
    description: Optional[str] = None


@dataclass(frozen=True)
class DataStoreManifest:
    """Definition of a datastore"""
    name: str
    version: str
    required_properties: Tuple[PropertyType, ...] = ()
    optional_properties: Tuple[PropertyType, ...] = ()
    behaviors: Tuple[Behavior, ...] = ()
    functions: Tuple[FunctionType, ...] = ()
    manifest_type: ManifestType = field(default=ManifestType.DATASTORE, init=False)

    def property_names(self) -> List[str]:
        return [p.name for p in self.required_properties + self.optional_properties]

    def __str__(self) -> str:
        lines = [f"DATASTORE {self.name} (version {self.version})"]
        lines.extend(_describe_properties(self.required_properties, self.optional_properties))
        if self.behaviors:
            lines.append("  Behaviors: " + ", ".join(b.name for b in self.behaviors))
        lines.extend(_describe_functions(self.functions))
        return "\n".join(lines)


@dataclass(frozen=True)
class ConnectorManifest:
    """Definition of a connector and the datastores it can reach"""
    name: str
    data_stores: Tuple[str, ...]
    version: str
    supported_operations: Tuple[Operation, ...]
    native: bool = False
    required_properties: Tuple[PropertyType, ...] = ()
    optional_properties: Tuple[PropertyType, ...] = ()
    functions: Tuple[FunctionType, ...] = ()
    manifest_type: ManifestType = field(default=ManifestType.CONNECTOR, init=False)

    def supports(self, operation: Operation) -> bool:
        return operation in self.supported_operations

    def __str__(self) -> str:
        native = " native" if self.native else ""
        lines = [f"CONNECTOR {self.name} (version {self.version}{native})",
                 "  DataStores: " + ", ".join(self.data_stores)]
        lines.extend(_describe_properties(self.required_properties, self.optional_properties))
        lines.append("  Operations: " + ", ".join(op.name for op in self.supported_operations))
        lines.extend(_describe_functions(self.functions))
        return "\n".join(lines)


Manifest = Union[DataStoreManifest, ConnectorManifest]


def _describe_properties(required, optional) -> List[str]:
    lines = []
    if required:
        lines.append("  Required properties: " + ", ".join(p.name for p in required))
    if optional:
        lines.append("  Optional properties: " + ", ".join(p.name for p in optional))
    return lines


def _describe_functions(functions) -> List[str]:
    if not functions:
        return []
    return ["  Functions: " + ", ".join(f"{f.name} {f.signature}" for f in functions)]
