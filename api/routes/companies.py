from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from api.auth import get_tenant
from api.models.common_schemas import DeletedResponse, ErrorResponse
from api.models.company_schemas import (
    CompanyCreate,
    CompanyUpdate,
    CompanyResponse,
    ContactCreate,
    ContactUpdate,
    ContactResponse,
)
from services.company_service import CompanyService
from services.tenancy import TenantContext
from utils.database import get_db

router = APIRouter(
    prefix="/companies",
    tags=["Companies"],
    responses={404: {"model": ErrorResponse}},
)


def get_service(tenant: TenantContext = Depends(get_tenant), db: Session = Depends(get_db)) -> CompanyService:
    return CompanyService(db, tenant.organization_id)


# ============ COMPANY ENDPOINTS ============

@router.post("/", response_model=CompanyResponse, status_code=status.HTTP_201_CREATED)
def create_company(request: CompanyCreate, service: CompanyService = Depends(get_service)):
    return service.create(**request.model_dump())


@router.get("/", response_model=List[CompanyResponse])
def list_companies(service: CompanyService = Depends(get_service)):
    """Companies sorted by name."""
    return service.list()


@router.get("/{company_id}", response_model=CompanyResponse)
def get_company(company_id: str, service: CompanyService = Depends(get_service)):
    return service.get(company_id)


@router.patch("/{company_id}", response_model=CompanyResponse)
def update_company(company_id: str, request: CompanyUpdate, service: CompanyService = Depends(get_service)):
    return service.update(company_id, **request.model_dump(exclude_unset=True))


@router.delete("/{company_id}", response_model=DeletedResponse)
def delete_company(company_id: str, service: CompanyService = Depends(get_service)):
    """Delete a company together with its jobs, contacts and documents."""
    service.delete(company_id)
    return DeletedResponse(id=company_id)


# ============ CONTACT ENDPOINTS ============

@router.get("/{company_id}/contacts", response_model=List[ContactResponse])
def list_contacts(company_id: str, service: CompanyService = Depends(get_service)):
    """Primary contact first, then by name."""
    return service.list_contacts(company_id)


@router.post(
    "/{company_id}/contacts",
    response_model=ContactResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}},
)
def create_contact(company_id: str, request: ContactCreate, service: CompanyService = Depends(get_service)):
    return service.create_contact(company_id, **request.model_dump())


@router.patch("/contacts/{contact_id}", response_model=ContactResponse, responses={409: {"model": ErrorResponse}})
def update_contact(contact_id: str, request: ContactUpdate, service: CompanyService = Depends(get_service)):
    return service.update_contact(contact_id, **request.model_dump(exclude_unset=True))


@router.post("/contacts/{contact_id}/primary", response_model=ContactResponse, responses={409: {"model": ErrorResponse}})
def set_primary_contact(contact_id: str, service: CompanyService = Depends(get_service)):
    return service.set_primary_contact(contact_id)


@router.delete("/contacts/{contact_id}", response_model=DeletedResponse)
def delete_contact(contact_id: str, service: CompanyService = Depends(get_service)):
    service.delete_contact(contact_id)
    return DeletedResponse(id=contact_id)
