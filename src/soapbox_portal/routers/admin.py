"""Admin router for organisers: review, status changes, check-in and exports"""

import math
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import BaseModel, Field
from sqlmodel import Session

from soapbox_portal.auth.dependencies import require_admin
from soapbox_portal.config import config
from soapbox_portal.models.database import get_db
from soapbox_portal.models.registration import RegistrationStatus
from soapbox_portal.routers.responses import RegistrationResponse, http_error_for
from soapbox_portal.services import export_service
from soapbox_portal.services.errors import RegistrationError, RegistrationNotFound
from soapbox_portal.services.providers import get_blob_store
from soapbox_portal.services.registration_repository import (
    SORTABLE_FIELDS,
    RegistrationFilter,
    RegistrationRepository,
    RegistrationSort,
)

router = APIRouter(
    prefix="/admin/registrations",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)


class StatusUpdateRequest(BaseModel):
    status: RegistrationStatus = Field(..., description="New review status")


class RegistrationPage(BaseModel):
    items: List[RegistrationResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class RegistrationStats(BaseModel):
    total: int
    checked_in: int
    by_status: Dict[str, int]


def _with_members(
    repository: RegistrationRepository, registrations
) -> List[RegistrationResponse]:
    return [
        RegistrationResponse.build(reg, repository.list_members(reg.id))
        for reg in registrations
    ]


def _members_map(repository: RegistrationRepository, registrations) -> Dict:
    return {reg.id: repository.list_members(reg.id) for reg in registrations}


def _sort(sort: str, direction: str) -> RegistrationSort:
    try:
        return RegistrationSort(field=sort, direction=direction)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=RegistrationPage)
async def list_registrations(
    search: Optional[str] = None,
    status: Optional[RegistrationStatus] = None,
    sort: str = Query("created_at", description=f"One of {list(SORTABLE_FIELDS)}"),
    direction: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    """Search, filter, sort and paginate registrations"""
    repository = RegistrationRepository(db)
    registration_sort = _sort(sort, direction)
    registration_filter = RegistrationFilter(
        search=search,
        status=status,
        limit=page_size,
        offset=(page - 1) * page_size,
    )

    try:
        total = repository.count(registration_filter)
        registrations = repository.list_all(registration_filter, registration_sort)
        items = _with_members(repository, registrations)
    except RegistrationError as e:
        raise http_error_for(e)

    return RegistrationPage(
        items=items,
        total=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size),
    )


@router.get("/stats", response_model=RegistrationStats)
async def registration_stats(db: Session = Depends(get_db)):
    """Counts for the organiser dashboard"""
    repository = RegistrationRepository(db)
    try:
        counts = repository.status_counts()
        checked_in = repository.count(RegistrationFilter(checked_in=True))
    except RegistrationError as e:
        raise http_error_for(e)

    return RegistrationStats(
        total=sum(counts.values()),
        checked_in=checked_in,
        by_status={status.value: total for status, total in counts.items()},
    )


@router.get("/export.csv")
async def export_csv(
    status: Optional[RegistrationStatus] = None,
    db: Session = Depends(get_db),
):
    repository = RegistrationRepository(db)
    try:
        registrations = repository.list_all(RegistrationFilter(status=status))
        content = export_service.to_csv(
            registrations, _members_map(repository, registrations)
        )
    except RegistrationError as e:
        raise http_error_for(e)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="registrations.csv"'},
    )


@router.get("/export.json")
async def export_json(
    status: Optional[RegistrationStatus] = None,
    db: Session = Depends(get_db),
):
    repository = RegistrationRepository(db)
    try:
        registrations = repository.list_all(RegistrationFilter(status=status))
        content = export_service.to_json(
            registrations, _members_map(repository, registrations)
        )
    except RegistrationError as e:
        raise http_error_for(e)

    return Response(
        content=content,
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="registrations.json"'},
    )


@router.get("/export.pdf")
async def export_team_list_pdf(
    status: Optional[RegistrationStatus] = None,
    db: Session = Depends(get_db),
):
    """Printable team list for event-day check-in"""
    repository = RegistrationRepository(db)
    try:
        registrations = repository.list_all(
            RegistrationFilter(status=status),
            RegistrationSort(field="team_name", direction="asc"),
        )
    except RegistrationError as e:
        raise http_error_for(e)

    title = f"{status.value.title()} Teams" if status else "Team List"
    content = export_service.to_team_list_pdf(registrations, config["event_name"], title)
    filename = f"teams-{datetime.now(timezone.utc):%Y-%m-%d}.pdf"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    registration_id: uuid.UUID,
    db: Session = Depends(get_db),
    blob_store=Depends(get_blob_store),
):
    repository = RegistrationRepository(db)
    try:
        registration = repository.get(registration_id)
        if registration is None:
            raise RegistrationNotFound(registration_id)
        members = repository.list_members(registration_id)
    except RegistrationError as e:
        raise http_error_for(e)

    file_url = None
    if registration.file_ref and blob_store is not None:
        file_url = blob_store.presigned_url(registration.file_ref)

    return RegistrationResponse.build(registration, members, file_url=file_url)


@router.patch("/{registration_id}/status", response_model=RegistrationResponse)
async def update_status(
    registration_id: uuid.UUID,
    request: StatusUpdateRequest,
    db: Session = Depends(get_db),
):
    """Approve, reject or revert a registration"""
    repository = RegistrationRepository(db)
    try:
        registration = repository.set_status(registration_id, request.status)
        members = repository.list_members(registration_id)
    except RegistrationError as e:
        raise http_error_for(e)

    return RegistrationResponse.build(registration, members)


@router.post("/{registration_id}/check-in", response_model=RegistrationResponse)
async def check_in(
    registration_id: uuid.UUID,
    db: Session = Depends(get_db),
):
    """Record a team's arrival on event day"""
    repository = RegistrationRepository(db)
    try:
        registration = repository.check_in(registration_id)
        members = repository.list_members(registration_id)
    except RegistrationError as e:
        raise http_error_for(e)

    return RegistrationResponse.build(registration, members)
