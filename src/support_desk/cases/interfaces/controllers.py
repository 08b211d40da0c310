"""
Support Case Controllers (API Routes)
=====================================

FastAPI routes for support cases.

The case listing serves two request shapes. When any of ``assigned_to``,
``unassigned``, ``limit`` or ``offset`` appears in the query string the
filtered listing is used; otherwise the legacy ``page_number`` paging.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status

from support_desk.cases.application import (
    SupportCaseEnvelope,
    SupportCaseListEnvelope,
    SupportCaseRequest,
    SupportCaseResponse,
    SupportCaseService,
)
from support_desk.cases.domain import CaseFilter
from support_desk.cases.infrastructure import StorePersonDirectory, StoreSupportCaseRepository
from support_desk.core import ResourceNotFoundException
from support_desk.infrastructure.store import EntityStore
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
    prefix=f"{RESOURCE_PREFIX}/cases",
    tags=["Support Cases"],
    dependencies=[Depends(get_resource_scope)]
)

# Query parameters that switch the listing to filtered mode
FILTER_PARAMS = ("assigned_to", "unassigned", "limit", "offset")


# ========== Example payloads for Swagger ==========

CASE_REQUEST_EXAMPLE = {
    "title": "VPN drops on guest network",
    "owner": "Anne Hamilton",
    "description": "Clients disconnect every few minutes.",
    "is_complete": False,
    "assigned_support_person": "jdoe",
    "support_person_assignment_reasoning": "Network Security specialist with spare capacity"
}


# ========== Dependencies ==========

def get_support_case_service(
    store: EntityStore = Depends(get_entity_store),
    observer: ServiceObserver = Depends(get_observer)
) -> SupportCaseService:
    """Support case service bound to the request's entity store."""
    return SupportCaseService(
        StoreSupportCaseRepository(store),
        StorePersonDirectory(store),
        observer=observer
    )


def _case_not_found(case_id: str) -> ResourceNotFoundException:
    return ResourceNotFoundException(
        "SupportCase",
        case_id,
        code="CASE_NOT_FOUND",
        message=f"Support case with ID '{case_id}' was not found"
    )


async def _require_case(service: SupportCaseService, case_id: str) -> None:
    if await service.get_case(case_id) is None:
        raise _case_not_found(case_id)


# ========== Route Handlers ==========

@router.get(
    "",
    response_model=SupportCaseListEnvelope,
    summary="List support cases",
    description="""
    Without filters, returns page `page_number` (pages of 10, insertion order).

    With any of `assigned_to`, `unassigned`, `limit` or `offset`, returns the
    filtered listing (default limit 50, capped at 100).
    """
)
async def list_support_cases(
    request: Request,
    page_number: Optional[int] = Query(1, description="Legacy 1-based page number"),
    assigned_to: Optional[str] = Query(None, description="Alias the cases are assigned to"),
    unassigned: Optional[bool] = Query(None, description="true: unassigned only, false: assigned only"),
    limit: Optional[int] = Query(None, description="Page size (default 50, max 100)"),
    offset: Optional[int] = Query(None, description="Number of cases to skip"),
    service: SupportCaseService = Depends(get_support_case_service)
) -> SupportCaseListEnvelope:
    if any(name in request.query_params for name in FILTER_PARAMS):
        cases = await service.list_cases_filtered(CaseFilter(
            assigned_to=assigned_to,
            unassigned=unassigned,
            limit=limit,
            offset=offset or 0,
        ))
    else:
        cases = await service.list_cases_paged(page_number)
    return SupportCaseListEnvelope.from_cases(cases)


@router.get(
    "/{case_id}",
    response_model=SupportCaseEnvelope,
    summary="Get a support case"
)
async def get_support_case(
    case_id: str,
    service: SupportCaseService = Depends(get_support_case_service)
) -> SupportCaseEnvelope:
    case = await service.get_case(case_id)
    if case is None:
        raise _case_not_found(case_id)
    return SupportCaseEnvelope(data=SupportCaseResponse.from_domain(case))


@router.post(
    "",
    response_model=SupportCaseEnvelope,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Create a support case",
    responses={
        400: {"description": "Invalid assignment or reasoning"},
        409: {"description": "Case id already in use"}
    },
    openapi_extra={"requestBody": {"content": {"application/json": {"example": CASE_REQUEST_EXAMPLE}}}}
)
async def create_support_case(
    payload: SupportCaseRequest,
    service: SupportCaseService = Depends(get_support_case_service)
) -> SupportCaseEnvelope:
    case = await service.create_case(payload.to_domain())
    return SupportCaseEnvelope(data=SupportCaseResponse.from_domain(case))


@router.put(
    "/{case_id}",
    response_model=SupportCaseEnvelope,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Replace a support case",
    responses={
        400: {"description": "Invalid assignment or reasoning"},
        404: {"description": "Support case not found"}
    }
)
async def update_support_case(
    case_id: str,
    payload: SupportCaseRequest,
    service: SupportCaseService = Depends(get_support_case_service)
) -> SupportCaseEnvelope:
    await _require_case(service, case_id)
    case = await service.update_case(case_id, payload.to_domain())
    return SupportCaseEnvelope(data=SupportCaseResponse.from_domain(case))


@router.delete(
    "/{case_id}",
    summary="Delete a support case",
    responses={404: {"description": "Support case not found"}}
)
async def delete_support_case(
    case_id: str,
    scope: ResourceScope = Depends(get_resource_scope),
    service: SupportCaseService = Depends(get_support_case_service)
) -> dict:
    await _require_case(service, case_id)
    await service.delete_case(case_id)
    logger.info("Support case removed", extra={"case_id": case_id, "resource": scope.resource_path})
    return {"success": True}
