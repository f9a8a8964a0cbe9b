"""Schema Types — immutable descriptors of the discovered data model.

Invariants:
    - All descriptors are frozen; collections are tuples (read-only after discovery)
    - SchemaInfo.entities ordered by name; find_entity is case-insensitive
    - Descriptor accessors (read/write) are the only way tools touch instance attributes

Design Decisions:
    - Descriptors carry accessors instead of callers doing getattr by name:
      one place decides how an attribute is reached
    - Plain dataclasses (no ORM imports): core stays persistence-agnostic
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class PropertyInfo:
    """Scalar attribute of an entity."""
    name: str
    type_name: str
    python_type: type
    is_required: bool
    enum_values: tuple[str, ...] = ()

    @property
    def is_text(self) -> bool:
        return self.python_type is str

    def read(self, obj: object) -> object:
        return getattr(obj, self.name)

    def write(self, obj: object, value: object) -> None:
        setattr(obj, self.name, value)


@dataclass(frozen=True)
class RelationshipInfo:
    """Reference (singular) or collection (has many) between entities."""
    property_name: str
    target_entity: str
    target_type: type
    is_collection: bool

    def read(self, obj: object) -> object:
        return getattr(obj, self.property_name)

    def write(self, obj: object, value: object) -> None:
        setattr(obj, self.property_name, value)

    def describe(self) -> str:
        verb = "has many" if self.is_collection else "belongs to"
        return f"{verb} {self.target_entity}"


@dataclass(frozen=True)
class EntityInfo:
    """One persistent record kind."""
    name: str
    python_type: type
    properties: tuple[PropertyInfo, ...] = ()
    relationships: tuple[RelationshipInfo, ...] = ()

    def find_property(self, name: str) -> PropertyInfo | None:
        wanted = name.lower()
        return next(
            (p for p in self.properties if p.name.lower() == wanted), None,
        )

    def singular_relationships(self) -> tuple[RelationshipInfo, ...]:
        return tuple(r for r in self.relationships if not r.is_collection)

    def find_reference(self, name: str) -> RelationshipInfo | None:
        """Case-insensitive lookup among singular relationships only."""
        wanted = name.lower()
        return next(
            (r for r in self.singular_relationships()
             if r.property_name.lower() == wanted),
            None,
        )

    def assignable_keys(self) -> list[str]:
        """Scalar property names followed by singular relationship names."""
        return [p.name for p in self.properties] + [
            r.property_name for r in self.singular_relationships()
        ]

    def enum_properties(self) -> tuple[PropertyInfo, ...]:
        return tuple(p for p in self.properties if p.enum_values)


@dataclass(frozen=True)
class SchemaInfo:
    """The whole discovered model. Built once, never invalidated."""
    entities: tuple[EntityInfo, ...] = field(default_factory=tuple)

    def find_entity(self, name: str | None) -> EntityInfo | None:
        if not name:
            return None
        wanted = name.strip().lower()
        return next(
            (e for e in self.entities if e.name.lower() == wanted), None,
        )

    def entity_names(self) -> list[str]:
        return [e.name for e in self.entities]
