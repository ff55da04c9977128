"""
Administrator endpoints - municipality staff accounts, roles, external
companies and external maintainers.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import Dict, List, Optional
import logging

from participium.models.external import (
    ExternalCompanyCreate,
    ExternalCompanyResponse,
    ExternalMaintainerCreate,
    ExternalMaintainerResponse,
)
from participium.models.user import MunicipalityUserCreate, MunicipalityUserUpdate, Role, UserResponse
from participium.routes.deps import require_roles
from participium.services.external_company_service import get_external_company_service
from participium.services.municipality_user_service import get_municipality_user_service
from participium.services.presenters import user_profile
from participium.services.role_matrix import MUNICIPALITY_ROLES

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_roles(Role.ADMINISTRATOR))],
)


# ------------------------------------------------------------------
# Municipality users
# ------------------------------------------------------------------

@router.get("/municipality-users", response_model=List[UserResponse])
async def list_municipality_users():
    return [user_profile(u) for u in get_municipality_user_service().list_users()]


@router.post("/municipality-users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_municipality_user(request: MunicipalityUserCreate):
    """
    Create a staff account.

    Roles: a single municipality role, or several technical office roles.
    """
    user = get_municipality_user_service().create_user(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
        roles=request.role,
    )
    return user_profile(user)


@router.get("/municipality-users/{user_id}", response_model=UserResponse)
async def get_municipality_user(user_id: str):
    return user_profile(get_municipality_user_service().get_user(user_id))


@router.patch("/municipality-users/{user_id}", response_model=UserResponse)
async def update_municipality_user(user_id: str, request: MunicipalityUserUpdate):
    user = get_municipality_user_service().update_user(user_id, request.model_dump(exclude_unset=True))
    return user_profile(user)


@router.delete("/municipality-users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_municipality_user(user_id: str):
    get_municipality_user_service().delete_user(user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/roles", response_model=List[str])
async def list_roles():
    return [role.value for role in MUNICIPALITY_ROLES]


# ------------------------------------------------------------------
# External companies and maintainers
# ------------------------------------------------------------------

@router.get("/external-companies", response_model=List[ExternalCompanyResponse])
async def list_external_companies(platform_access: Optional[bool] = Query(None, alias="platformAccess")):
    service = get_external_company_service()
    if platform_access:
        return service.list_with_access()
    return service.list_companies()


@router.post("/external-companies", response_model=ExternalCompanyResponse, status_code=status.HTTP_201_CREATED)
async def create_external_company(request: ExternalCompanyCreate):
    return get_external_company_service().create_company(
        name=request.name,
        categories=request.categories,
        platform_access=request.platform_access,
    )


@router.delete("/external-companies/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_external_company(company_id: str):
    get_external_company_service().delete_company(company_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/external-maintainers", response_model=List[ExternalMaintainerResponse])
async def list_external_maintainers():
    return [
        {**user_profile(m), "company": m["company"]}
        for m in get_external_company_service().list_maintainers()
    ]


@router.post("/external-maintainers", response_model=ExternalMaintainerResponse, status_code=status.HTTP_201_CREATED)
async def create_external_maintainer(request: ExternalMaintainerCreate):
    maintainer = get_external_company_service().create_maintainer(
        first_name=request.first_name,
        last_name=request.last_name,
        email=request.email,
        password=request.password,
        company_id=request.external_company_id,
    )
    return {**user_profile(maintainer), "company": maintainer["company"]}
