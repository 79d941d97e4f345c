from fastapi import APIRouter, Depends

from ....application.use_cases.organization import OrganizationService
from ..deps import get_organization_service
from ..schemas import OrganizationOut

router = APIRouter(prefix="/free", tags=["free"])


@router.get("/organization-structures")
def list_organization_structures(svc: OrganizationService = Depends(get_organization_service)):
    rows = svc.list()
    return {
        "message": "Organization structures retrieved successfully",
        "data": [OrganizationOut.model_validate(r).dump() for r in rows],
        "count": len(rows),
    }
