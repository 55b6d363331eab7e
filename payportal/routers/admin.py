"""Admin API routes for employee account management."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import status

from payportal.abstract import EnvelopeDTO
from payportal.domains.staff.schemas import CreateEmployeeRequest
from payportal.domains.staff.schemas import EmployeeDetailDTO
from payportal.domains.staff.schemas import EmployeeDTO
from payportal.domains.staff.schemas import EmployeeListResponse
from payportal.domains.staff.schemas import EmployeeResponse
from payportal.domains.staff.services import EmployeeService
from payportal.security import AdminClaims
from payportal.security.rate_limit import api_limiter


router = APIRouter(
    prefix="/employee/admin",
    tags=["Admin"],
    dependencies=[Depends(api_limiter)],
    responses={
        401: {"description": "Missing or invalidated token"},
        403: {"description": "Admin privileges required"},
    },
)


@router.get("/employees", summary="List employees")
async def list_employees(
        _: AdminClaims,
        employee_service: Annotated[EmployeeService, Depends()],
) -> EmployeeListResponse:
    employees = await employee_service.list_employees()
    return EmployeeListResponse(
        count=len(employees),
        employees=[EmployeeDetailDTO.model_validate(employee) for employee in employees],
    )


@router.post(
    "/employees",
    status_code=status.HTTP_201_CREATED,
    summary="Create an employee or admin",
    responses={400: {"description": "Validation error or username already exists"}},
)
async def create_employee(
        data: CreateEmployeeRequest,
        claims: AdminClaims,
        employee_service: Annotated[EmployeeService, Depends()],
) -> EmployeeResponse:
    """Create an account; only the super admin may create admins."""
    employee = await employee_service.create_employee(data, claims.sub)
    return EmployeeResponse(message="Employee created successfully", employee=EmployeeDTO.model_validate(employee))


@router.delete(
    "/employees/{employee_id}",
    summary="Delete an employee",
    responses={
        400: {"description": "Attempt to delete own account"},
        404: {"description": "Employee not found"},
    },
)
async def delete_employee(
        employee_id: UUID,
        claims: AdminClaims,
        employee_service: Annotated[EmployeeService, Depends()],
) -> EnvelopeDTO:
    await employee_service.delete_employee(employee_id, claims.sub)
    return EnvelopeDTO(message="Employee deleted successfully")
