from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.activity_schemas import ActivityCreate, ActivityUpdate, ActivityResponse
from api.models.common_schemas import DeletedResponse, ErrorResponse
from services.activity_service import ActivityService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/activities",
    tags=["Activities"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> ActivityService:
    return ActivityService(db, tenant.organization_id)


@router.post("/", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(
    request: ActivityCreate,
    tenant: TenantContext = Depends(get_tenant),
    service: ActivityService = Depends(get_service),
):
    return service.create(created_by=tenant.user_id, **request.model_dump())


@router.get("/", response_model=List[ActivityResponse])
def list_activities(
    entity_type: str = Query(...),
    entity_id: str = Query(...),
    service: ActivityService = Depends(get_service),
):
    """Activities of an entity, newest scheduled first."""
    return service.list_for_entity(entity_type, entity_id)


@router.patch("/{activity_id}", response_model=ActivityResponse)
def update_activity(activity_id: str, request: ActivityUpdate, service: ActivityService = Depends(get_service)):
    return service.update(activity_id, **request.model_dump(exclude_unset=True))


@router.delete("/{activity_id}", response_model=DeletedResponse)
def delete_activity(activity_id: str, service: ActivityService = Depends(get_service)):
    service.delete(activity_id)
    return DeletedResponse(id=activity_id)
