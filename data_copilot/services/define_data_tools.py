"""Data Tool Schemas — Anthropic Tool Use format for the three generic data tools.

Invariants:
    - list_entities takes no arguments and never touches the database
    - query_entity / create_entity take the entity name plus a `Key=Value;...` string
    - Every tool returns plain text, success or failure

Design Decisions:
    - Filters and assignments as one free-text string instead of a typed object:
      the model writes them naturally, the tool engine validates against the catalog
    - top as integer with a documented default: the handler clamps non-positive values
"""

LIST_ENTITIES = "list_entities"
QUERY_ENTITY = "query_entity"
CREATE_ENTITY = "create_entity"

TOOLS_DATA = [
    {
        "name": LIST_ENTITIES,
        "description": (
            "Lists all available business entities with their properties, "
            "relationships and enum values."
        ),
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
    {
        "name": QUERY_ENTITY,
        "description": (
            "Queries records of any business entity. Use list_entities first "
            "to see what is available. Filter with 'Property=Value' pairs "
            "separated by ';' (e.g. 'Country=Germany;Status=Shipped'). Text "
            "properties match by substring; relationships match by the "
            "related record's name."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "entity_name": {
                    "type": "string",
                    "description": "Entity name, e.g. 'Order', 'Customer', 'Product'.",
                },
                "filter": {
                    "type": "string",
                    "description": "Optional 'Key=Value;Key2=Value2' filter.",
                },
                "top": {
                    "type": "integer",
                    "description": "Maximum number of records to return (default 25).",
                    "default": 25,
                },
            },
            "required": ["entity_name"],
        },
    },
    {
        "name": CREATE_ENTITY,
        "description": (
            "Creates a new record of any business entity. Properties are "
            "'Key=Value' pairs separated by ';'. For references, use the "
            "related record's name (e.g. 'Customer=Alfreds;Status=New')."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "entity_name": {
                    "type": "string",
                    "description": "Entity name, e.g. 'Order'.",
                },
                "properties": {
                    "type": "string",
                    "description": "'Key=Value;Key2=Value2' assignments.",
                },
            },
            "required": ["entity_name", "properties"],
        },
    },
]
