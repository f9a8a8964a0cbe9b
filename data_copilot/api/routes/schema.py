"""Schema Routes — read-only view of the discovered data model.

Invariants:
    - GET /schema/entities mirrors the catalog (same entities, same order)
    - GET /schema/prompt returns exactly the system instruction sessions receive
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from data_copilot.api.dependencies import get_catalog
from data_copilot.schemas.schema import SchemaOut
from data_copilot.services.schema_catalog import SchemaCatalog
from data_copilot.services.system_prompt import generate_system_prompt

router = APIRouter(prefix="/api/v1/schema", tags=["schema"])


@router.get("/entities", response_model=SchemaOut)
async def list_entities(catalog: SchemaCatalog = Depends(get_catalog)):
    return SchemaOut.from_info(catalog.schema)


@router.get("/prompt", response_class=PlainTextResponse)
async def system_prompt(catalog: SchemaCatalog = Depends(get_catalog)):
    return generate_system_prompt(catalog.schema)
