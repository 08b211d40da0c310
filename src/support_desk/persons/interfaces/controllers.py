"""
Support Person Controllers (API Routes)
=======================================

FastAPI routes for support staff management.

Controllers delegate to ``SupportPersonService``; failures surface as
application exceptions and are rendered by the shared error handlers.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from support_desk.config import PersonSortField, SortOrder
from support_desk.core import ResourceNotFoundException
from support_desk.infrastructure.store import EntityStore
from support_desk.persons.application import (
    SupportPersonEnvelope,
    SupportPersonListEnvelope,
    SupportPersonRequest,
    SupportPersonResponse,
    SupportPersonService,
)
from support_desk.persons.domain import PersonFilter
from support_desk.persons.infrastructure import StoreSupportPersonRepository
from support_desk.shared.api import (
    RESOURCE_PREFIX,
    ResourceScope,
    get_entity_store,
    get_observer,
    get_resource_scope,
)
from support_desk.shared.infrastructure.logging import get_logger
from support_desk.shared.infrastructure.telemetry import ServiceObserver

logger = get_logger(__name__)
router = APIRouter(
    prefix=f"{RESOURCE_PREFIX}/supportpersons",
    tags=["Support Persons"],
    dependencies=[Depends(get_resource_scope)]
)


# ========== Example payloads for Swagger ==========

PERSON_REQUEST_EXAMPLE = {
    "alias": "jdoe",
    "name": "Jane Doe",
    "email": "jane.doe@example.com",
    "specializations": ["Authentication", "Database"],
    "seniority": "Senior"
}


# ========== Dependencies ==========

def get_support_person_service(
    store: EntityStore = Depends(get_entity_store),
    observer: ServiceObserver = Depends(get_observer)
) -> SupportPersonService:
    """Support person service bound to the request's entity store."""
    return SupportPersonService(StoreSupportPersonRepository(store), observer=observer)


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=SupportPersonListEnvelope,
    summary="List active support persons",
    description="""
    Filter by `specialization`, `seniority` or `available` (workload below 10),
    sort by `name`, `seniority`, `workload` or `rating`. `limit` is capped at 100.
    """
)
async def list_support_persons(
    specialization: Optional[str] = Query(None, description="Required specialization"),
    seniority: Optional[str] = Query(None, description="Exact seniority level"),
    available: Optional[bool] = Query(None, description="Only persons with spare capacity"),
    limit: Optional[int] = Query(None, description="Page size (default 50, max 100)"),
    offset: int = Query(0, description="Number of persons to skip"),
    sort_by: str = Query(PersonSortField.NAME, description="name, seniority, workload or rating"),
    sort_order: str = Query(SortOrder.ASC, description="asc or desc"),
    service: SupportPersonService = Depends(get_support_person_service)
) -> SupportPersonListEnvelope:
    page = await service.list_persons(PersonFilter(
        specialization=specialization,
        seniority=seniority,
        available=available,
        limit=limit,
        offset=offset,
        sort_by=sort_by,
        sort_order=sort_order,
    ))
    return SupportPersonListEnvelope.from_page(page)


@router.get(
    "/{alias}",
    response_model=SupportPersonEnvelope,
    summary="Get an active support person"
)
async def get_support_person(
    alias: str,
    service: SupportPersonService = Depends(get_support_person_service)
) -> SupportPersonEnvelope:
    person = await service.get_person(alias)
    if person is None:
        raise ResourceNotFoundException(
            "SupportPerson",
            alias,
            code="SUPPORT_PERSON_NOT_FOUND",
            message=f"Support person with alias '{alias}' was not found"
        )
    return SupportPersonEnvelope(data=SupportPersonResponse.from_domain(person))


@router.post(
    "",
    response_model=SupportPersonEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create a support person",
    responses={
        201: {"description": "Support person created"},
        400: {"description": "Validation failed or email already in use"},
        409: {"description": "Alias already exists"}
    },
    openapi_extra={"requestBody": {"content": {"application/json": {"example": PERSON_REQUEST_EXAMPLE}}}}
)
async def create_support_person(
    payload: SupportPersonRequest,
    response: Response,
    scope: ResourceScope = Depends(get_resource_scope),
    service: SupportPersonService = Depends(get_support_person_service)
) -> SupportPersonEnvelope:
    person = await service.create_person(payload.to_domain())
    response.headers["Location"] = f"{scope.base_path}/supportpersons/{person.alias}"
    return SupportPersonEnvelope(data=SupportPersonResponse.from_domain(person))


@router.put(
    "/{alias}",
    response_model=SupportPersonEnvelope,
    summary="Replace a support person",
    responses={
        400: {"description": "Validation failed or email already in use"},
        404: {"description": "No active support person with this alias"}
    }
)
async def update_support_person(
    alias: str,
    payload: SupportPersonRequest,
    service: SupportPersonService = Depends(get_support_person_service)
) -> SupportPersonEnvelope:
    person = await service.update_person(alias, payload.to_domain())
    return SupportPersonEnvelope(data=SupportPersonResponse.from_domain(person))


@router.delete(
    "/{alias}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Deactivate a support person",
    responses={
        404: {"description": "No active support person with this alias"},
        409: {"description": "Cases still reference this support person"}
    }
)
async def delete_support_person(
    alias: str,
    scope: ResourceScope = Depends(get_resource_scope),
    service: SupportPersonService = Depends(get_support_person_service)
) -> Response:
    await service.delete_person(alias)
    logger.info(
        "Support person removed",
        extra={"alias": alias, "resource": scope.resource_path}
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
