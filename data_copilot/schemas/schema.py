"""Schema Inspection Schemas — JSON view of the discovered data model.

Invariants:
    - Mirrors core/schema_types.py field for field, minus Python type handles
"""

from pydantic import BaseModel

from data_copilot.core.schema_types import EntityInfo, SchemaInfo


class PropertyOut(BaseModel):
    name: str
    type_name: str
    is_required: bool
    enum_values: list[str] = []


class RelationshipOut(BaseModel):
    property_name: str
    target_entity: str
    is_collection: bool


class EntityOut(BaseModel):
    name: str
    properties: list[PropertyOut]
    relationships: list[RelationshipOut]

    @classmethod
    def from_info(cls, entity: EntityInfo) -> "EntityOut":
        return cls(
            name=entity.name,
            properties=[
                PropertyOut(
                    name=p.name,
                    type_name=p.type_name,
                    is_required=p.is_required,
                    enum_values=list(p.enum_values),
                )
                for p in entity.properties
            ],
            relationships=[
                RelationshipOut(
                    property_name=r.property_name,
                    target_entity=r.target_entity,
                    is_collection=r.is_collection,
                )
                for r in entity.relationships
            ],
        )


class SchemaOut(BaseModel):
    entities: list[EntityOut]

    @classmethod
    def from_info(cls, schema: SchemaInfo) -> "SchemaOut":
        return cls(entities=[EntityOut.from_info(e) for e in schema.entities])
