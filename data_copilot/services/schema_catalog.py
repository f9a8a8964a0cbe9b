"""Schema Catalog — runtime discovery of the business data model from the SQLAlchemy registry.

Invariants:
    - Discovery runs at most once per catalog (double-checked lock); result is immutable
    - Only classes under the configured module namespace are considered
    - Excluded infrastructure types and abstract classes never appear
    - Primary keys and bookkeeping columns are never surfaced as properties
    - A foreign-key column backing a modeled singular relationship is suppressed:
      each logical reference appears exactly once, as the relationship
    - Relationships to classes that are not themselves modeled are ignored

Design Decisions:
    - Catalog is constructed and injected by the composition root (main.py lifespan),
      not a module-level singleton: tests build their own catalogs freely
    - threading.Lock over asyncio.Lock: discovery is pure CPU work on mapper metadata
      and `schema` is a synchronous property readable from any context
    - Mapper introspection (sqlalchemy.inspect API) instead of hand-written
      per-entity bindings: new models appear in the tools without code changes
"""

import inspect
import logging
import threading

from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import ColumnProperty, Mapper, RelationshipProperty, registry

from data_copilot.core.coerce import friendly_type_name
from data_copilot.core.schema_types import (
    EntityInfo, PropertyInfo, RelationshipInfo, SchemaInfo,
)

logger = logging.getLogger(__name__)

DEFAULT_NAMESPACE = "data_copilot.models"

# Infrastructure types that must never be exposed to the assistant
EXCLUDED_TYPE_NAMES = frozenset({"BaseObject", "ToolCall"})

BOOKKEEPING_FIELDS = frozenset({"id", "optimistic_lock_field"})


class SchemaCatalog:
    """Discovers entity metadata once and serves it read-only afterwards."""

    def __init__(
        self,
        mapper_registry: registry,
        namespace: str = DEFAULT_NAMESPACE,
        excluded: frozenset[str] = EXCLUDED_TYPE_NAMES,
    ):
        self._registry = mapper_registry
        self._namespace = namespace
        self._excluded = excluded
        self._lock = threading.Lock()
        self._cached: SchemaInfo | None = None

    @property
    def schema(self) -> SchemaInfo:
        """Cached schema, discovered on first access."""
        cached = self._cached
        if cached is not None:
            return cached
        with self._lock:
            if self._cached is None:
                self._cached = self.discover()
            return self._cached

    def find_entity(self, name: str | None) -> EntityInfo | None:
        """Case-insensitive entity lookup. None when absent."""
        return self.schema.find_entity(name)

    def discover(self) -> SchemaInfo:
        """Build a fresh SchemaInfo from the registry. Prefer `schema`."""
        mappers = [m for m in self._registry.mappers if self._is_eligible(m)]
        modeled = {m.class_ for m in mappers}
        entities = sorted(
            (self._describe(m, modeled) for m in mappers),
            key=lambda e: e.name,
        )
        logger.info(
            "Schema discovered: %d entities", len(entities),
            extra={"entity": ",".join(e.name for e in entities)},
        )
        return SchemaInfo(entities=tuple(entities))

    # -- Classification ------------------------------------------------------

    def _is_eligible(self, mapper: Mapper) -> bool:
        cls = mapper.class_
        if not cls.__module__.startswith(self._namespace):
            return False
        if cls.__name__ in self._excluded:
            return False
        if cls.__dict__.get("__abstract__", False) or inspect.isabstract(cls):
            return False
        return True

    def _describe(self, mapper: Mapper, modeled: set[type]) -> EntityInfo:
        shadow = _shadow_foreign_keys(mapper, modeled)
        properties: list[PropertyInfo] = []
        relationships: list[RelationshipInfo] = []

        for attr in mapper.attrs:
            if isinstance(attr, RelationshipProperty):
                target = attr.mapper.class_
                if target in modeled:
                    relationships.append(RelationshipInfo(
                        property_name=attr.key,
                        target_entity=target.__name__,
                        target_type=target,
                        is_collection=bool(attr.uselist),
                    ))
                continue
            if not isinstance(attr, ColumnProperty):
                continue
            if attr.key in BOOKKEEPING_FIELDS or attr.key in shadow:
                continue
            column = attr.columns[0]
            if getattr(column, "primary_key", False):
                continue
            properties.append(_describe_column(attr.key, column))

        return EntityInfo(
            name=mapper.class_.__name__,
            python_type=mapper.class_,
            properties=tuple(properties),
            relationships=tuple(relationships),
        )


def _shadow_foreign_keys(mapper: Mapper, modeled: set[type]) -> set[str]:
    """Attribute keys of FK columns that back a modeled singular relationship."""
    keys: set[str] = set()
    for rel in mapper.relationships:
        if rel.uselist or rel.mapper.class_ not in modeled:
            continue
        for column in rel.local_columns:
            if not column.foreign_keys:
                continue
            prop = mapper.get_property_by_column(column)
            keys.add(prop.key)
    return keys


def _describe_column(key: str, column) -> PropertyInfo:
    python_type = _python_type(column)
    optional = bool(column.nullable)
    enum_values: tuple[str, ...] = ()
    if isinstance(column.type, SAEnum):
        enum_class = column.type.enum_class
        if enum_class is not None:
            enum_values = tuple(m.name for m in enum_class)
        else:
            enum_values = tuple(column.type.enums)
    return PropertyInfo(
        name=key,
        type_name=friendly_type_name(python_type, optional),
        python_type=python_type,
        is_required=not optional,
        enum_values=enum_values,
    )


def _python_type(column) -> type:
    try:
        return column.type.python_type
    except NotImplementedError:
        return str
