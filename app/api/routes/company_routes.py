"""
Company Routes

GET /companies - List companies
GET /companies/{id} - Get company
POST /companies - Create company (admin)
PUT /companies/{id} - Update company, renames propagate to drives (admin)
DELETE /companies/{id} - Delete company without drives (admin)
"""

from fastapi import APIRouter, Depends
from typing import List

from app.core.auth import get_current_user, get_current_admin
from app.schemas.schemas import CompanyCreate, CompanyUpdate, CompanyResponse, MessageResponse
from app.services.company_service import CompanyService, get_company_service

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("", response_model=List[CompanyResponse])
async def list_companies(
    user: dict = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service)
):
    return companies.list()


@router.get("/{company_id}", response_model=CompanyResponse)
async def get_company(
    company_id: int,
    user: dict = Depends(get_current_user),
    companies: CompanyService = Depends(get_company_service)
):
    return companies.get(company_id)


@router.post("", response_model=CompanyResponse, status_code=201)
async def create_company(
    data: CompanyCreate,
    admin: dict = Depends(get_current_admin),
    companies: CompanyService = Depends(get_company_service)
):
    return companies.create(data)


@router.put("/{company_id}", response_model=CompanyResponse)
async def update_company(
    company_id: int,
    data: CompanyUpdate,
    admin: dict = Depends(get_current_admin),
    companies: CompanyService = Depends(get_company_service)
):
    """Update company. A new name is copied onto every drive and drive event."""
    return companies.update(company_id, data)


@router.delete("/{company_id}", response_model=MessageResponse)
async def delete_company(
    company_id: int,
    admin: dict = Depends(get_current_admin),
    companies: CompanyService = Depends(get_company_service)
):
    companies.delete(company_id)
    return MessageResponse(message="Company deleted successfully")
