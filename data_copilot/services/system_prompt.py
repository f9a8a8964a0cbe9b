"""Assistant System Prompt — Markdown data-model briefing generated from the schema catalog.

Invariants:
    - One line per entity listing its scalar properties, in catalog order
    - One sub-line per enum-valued property listing its member names
    - One sub-line per relationship: "has many X" / "belongs to Y" (via attribute)
    - Fixed behavioral directives close the prompt (Markdown, tools, confirm before create)
    - Pure function of SchemaInfo: same schema, same prompt

Design Decisions:
    - Generated instead of hand-written: the prompt never drifts from the model
    - Directives kept as a module constant so tests and routes can reference them
"""

from data_copilot.core.schema_types import EntityInfo, SchemaInfo

IDENTITY = (
    "You are a helpful business assistant for an order management application."
)

DIRECTIVES = (
    "- Use Markdown formatting for readability (tables, bold, lists).",
    "- When asked about data, use the available tools to query real data.",
    "- When asked to create records, describe the steps and confirm before proceeding.",
    "- Use `list_entities` to discover available entities and `query_entity` to fetch data.",
    "- Be concise but thorough.",
)


def generate_system_prompt(schema: SchemaInfo) -> str:
    """Render the system instruction for an assistant session."""
    lines = [IDENTITY, "The database contains these entities:", ""]
    for entity in schema.entities:
        lines.extend(_entity_lines(entity))
    lines.append("")
    lines.append("When answering:")
    lines.extend(DIRECTIVES)
    return "\n".join(lines) + "\n"


def _entity_lines(entity: EntityInfo) -> list[str]:
    props = ", ".join(p.name for p in entity.properties)
    lines = [f"- **{entity.name}** ({props})"]
    for prop in entity.enum_properties():
        lines.append(f"  - {prop.name} values: {', '.join(prop.enum_values)}")
    for rel in entity.relationships:
        lines.append(f"  - {rel.describe()} (via {rel.property_name})")
    return lines
