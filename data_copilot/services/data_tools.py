"""Data Tools — list_entities, query_entity, create_entity over any catalog entity.

Invariants:
    - Text in, text out: every outcome (success or failure) is returned as text,
      because the calling model can only self-correct by reading it
    - Each call opens its own short-lived session scope; nothing is shared between
      calls except the read-only catalog
    - Filters are ANDed in the order given; validation (unknown keys, conversions)
      runs before any row is read, so a bad filter never yields partial results
    - create_entity builds the record detached from the session and adds it only
      after every assignment succeeded: one commit or nothing
    - Relationship values resolve to the FIRST record (store order) whose display
      label contains the value, case-insensitive

Design Decisions:
    - Filtering happens in memory over the fetched rows, not in SQL: text matching
      against computed display labels (e.g. Employee.full_name) has no column to
      push down to
    - Singular relationships eager-loaded (selectinload): async sessions cannot
      lazy-load while records are formatted
    - Expected failures are typed errors rendered by message; anything else is
      logged with traceback and rendered as "Error <operation> <entity>: ..."
"""

import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from data_copilot.core.assistant_protocols import ToolSpec
from data_copilot.core.coerce import coerce_value
from data_copilot.core.display_label import display_label, label_contains
from data_copilot.core.errors import ArgumentError, ConversionError, NotFoundError
from data_copilot.core.filter_pairs import parse_pairs
from data_copilot.core.format_records import format_record, format_value
from data_copilot.core.schema_types import EntityInfo, PropertyInfo, RelationshipInfo
from data_copilot.services.define_data_tools import (
    CREATE_ENTITY, LIST_ENTITIES, QUERY_ENTITY, TOOLS_DATA,
)
from data_copilot.services.schema_catalog import SchemaCatalog

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]
RecordMatcher = Callable[[object], bool]

DEFAULT_TOP = 25
MAX_CANDIDATES = 10

_EXPECTED_ERRORS = (ArgumentError, NotFoundError, ConversionError)


class DataTools:
    """Generic data tools driven by the schema catalog."""

    def __init__(self, catalog: SchemaCatalog, session_scope: SessionScope):
        self._catalog = catalog
        self._session_scope = session_scope
        self._tools: tuple[ToolSpec, ...] | None = None

    @property
    def tools(self) -> tuple[ToolSpec, ...]:
        """Tool specs (schema + handler), built once."""
        if self._tools is None:
            handlers = {
                LIST_ENTITIES: self.list_entities,
                QUERY_ENTITY: self.query_entity,
                CREATE_ENTITY: self.create_entity,
            }
            self._tools = tuple(
                ToolSpec(
                    name=d["name"],
                    description=d["description"],
                    input_schema=d["input_schema"],
                    handler=handlers[d["name"]],
                )
                for d in TOOLS_DATA
            )
        return self._tools

    # -- list_entities -------------------------------------------------------

    async def list_entities(self, input_data: dict | None = None) -> str:
        """Describe every entity: properties, relationships, enum values."""
        logger.info("Tool called", extra={"tool_name": LIST_ENTITIES})
        try:
            lines = ["Available entities:"]
            for entity in self._catalog.schema.entities:
                lines.extend(_describe_entity(entity))
            result = "\n".join(lines)
        except Exception as e:
            logger.error(
                "list_entities failed: %s", e, exc_info=True,
                extra={"tool_name": LIST_ENTITIES},
            )
            return f"Error listing entities: {e}"
        logger.info(
            "Tool returned %d chars", len(result),
            extra={"tool_name": LIST_ENTITIES},
        )
        return result

    # -- query_entity --------------------------------------------------------

    async def query_entity(self, input_data: dict) -> str:
        """Fetch records of one entity, filtered and truncated to `top`."""
        entity_name = _text(input_data.get("entity_name"))
        logger.info(
            "Tool called", extra={"tool_name": QUERY_ENTITY, "entity": entity_name},
        )
        try:
            entity = self._resolve_entity(entity_name)
            top = _parse_top(input_data.get("top"))
            matchers = [
                _build_matcher(entity, key, value)
                for key, value in parse_pairs(_text(input_data.get("filter")))
            ]
            async with self._session_scope() as db:
                rows = await _fetch_all(db, entity)
                matched = [r for r in rows if all(m(r) for m in matchers)][:top]
                lines = [format_record(r, entity) for r in matched]
        except _EXPECTED_ERRORS as e:
            return e.message
        except Exception as e:
            logger.error(
                "query_entity failed: %s", e, exc_info=True,
                extra={"tool_name": QUERY_ENTITY, "entity": entity_name},
            )
            return f"Error querying {entity_name}: {e}"

        if not lines:
            return f"No {entity.name} records found matching the given criteria."
        result = "\n".join([f"Found {len(lines)} {entity.name} record(s):", *lines])
        logger.info(
            "Tool returned %d records", len(lines),
            extra={"tool_name": QUERY_ENTITY, "entity": entity.name},
        )
        return result

    # -- create_entity -------------------------------------------------------

    async def create_entity(self, input_data: dict) -> str:
        """Create one record from `Key=Value` assignments. All or nothing."""
        entity_name = _text(input_data.get("entity_name"))
        logger.info(
            "Tool called", extra={"tool_name": CREATE_ENTITY, "entity": entity_name},
        )
        try:
            entity = self._resolve_entity(entity_name)
            raw = _text(input_data.get("properties"))
            if not raw.strip():
                raise ArgumentError(_properties_usage(entity), "properties")
            pairs = parse_pairs(raw)
            async with self._session_scope() as db:
                record, summary = await _build_record(db, entity, pairs)
                db.add(record)
                await db.commit()
        except _EXPECTED_ERRORS as e:
            return e.message
        except Exception as e:
            logger.error(
                "create_entity failed: %s", e, exc_info=True,
                extra={"tool_name": CREATE_ENTITY, "entity": entity_name},
            )
            return f"Error creating {entity_name}: {e}"

        result = f"{entity.name} created successfully! {' | '.join(summary)}"
        logger.info(result, extra={"tool_name": CREATE_ENTITY, "entity": entity.name})
        return result

    # -- Helpers -------------------------------------------------------------

    def _resolve_entity(self, entity_name: str) -> EntityInfo:
        names = ", ".join(self._catalog.schema.entity_names())
        if not entity_name.strip():
            raise ArgumentError(
                f"Entity name is required. Available entities: {names}",
                "entity_name",
            )
        entity = self._catalog.find_entity(entity_name)
        if entity is None:
            raise NotFoundError(
                f"Entity '{entity_name}' not found. Available entities: {names}",
            )
        return entity


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _parse_top(value: object) -> int:
    if value is None or value == "":
        return DEFAULT_TOP
    try:
        top = int(value)
    except (TypeError, ValueError):
        raise ArgumentError(
            f"Parameter 'top' must be an integer, got '{value}'.", "top",
        )
    return top if top > 0 else DEFAULT_TOP


def _describe_entity(entity: EntityInfo) -> list[str]:
    line = f"- {entity.name} ({', '.join(p.name for p in entity.properties)})"
    if entity.relationships:
        line += " -> " + ", ".join(r.describe() for r in entity.relationships)
    lines = [line]
    for prop in entity.enum_properties():
        lines.append(f"  - {prop.name} values: {', '.join(prop.enum_values)}")
    return lines


def _unknown_key(entity: EntityInfo, key: str) -> NotFoundError:
    available = ", ".join(entity.assignable_keys())
    return NotFoundError(
        f"Property '{key}' not found on {entity.name}. Available: {available}",
    )


def _properties_usage(entity: EntityInfo) -> str:
    props = ", ".join(p.name for p in entity.properties)
    rels = ", ".join(r.property_name for r in entity.singular_relationships())
    message = f"Properties are required. {entity.name} properties: {props}"
    if rels:
        message += f". Relationships: {rels}"
    return message


def _coerce(prop: PropertyInfo, value: str) -> object:
    return coerce_value(
        value, prop.python_type,
        optional=not prop.is_required, property_name=prop.name,
    )


def _build_matcher(entity: EntityInfo, key: str, value: str) -> RecordMatcher:
    """Compile one filter pair into a predicate. Raises on bad key or value."""
    prop = entity.find_property(key)
    if prop is not None:
        if prop.is_text:
            needle = value.lower()

            def match_text(obj: object) -> bool:
                current = prop.read(obj)
                return current is not None and needle in str(current).lower()
            return match_text

        expected = _coerce(prop, value)
        return lambda obj: prop.read(obj) == expected

    rel = entity.find_reference(key)
    if rel is not None:
        return lambda obj: label_contains(rel.read(obj), value)

    raise _unknown_key(entity, key)


async def _fetch_all(db: AsyncSession, entity: EntityInfo) -> list:
    cls = entity.python_type
    stmt = select(cls).options(*[
        selectinload(getattr(cls, r.property_name))
        for r in entity.singular_relationships()
    ])
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def _resolve_reference(
    db: AsyncSession, rel: RelationshipInfo, value: str,
) -> object:
    result = await db.execute(select(rel.target_type))
    candidates = list(result.scalars().all())
    for candidate in candidates:
        if label_contains(candidate, value):
            return candidate
    available = ", ".join(display_label(c) for c in candidates[:MAX_CANDIDATES])
    raise NotFoundError(
        f"{rel.property_name} '{value}' not found. "
        f"Available {rel.target_entity} records: {available}",
    )


async def _build_record(
    db: AsyncSession, entity: EntityInfo, pairs: list[tuple[str, str]],
) -> tuple[object, list[str]]:
    """Instantiate and populate a detached record. Raises on the first bad pair."""
    record = entity.python_type()
    summary: list[str] = []
    with db.no_autoflush:
        for key, value in pairs:
            prop = entity.find_property(key)
            if prop is not None:
                converted = _coerce(prop, value)
                prop.write(record, converted)
                summary.append(f"{prop.name}: {format_value(converted)}")
                continue

            rel = entity.find_reference(key)
            if rel is not None:
                target = await _resolve_reference(db, rel, value)
                rel.write(record, target)
                summary.append(f"{rel.property_name}: {display_label(target)}")
                continue

            raise _unknown_key(entity, key)
    return record, summary
