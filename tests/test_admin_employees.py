"""Tests for admin employee management and the super admin rules."""

from uuid import uuid4

import pytest
from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from payportal.domains.staff.entities import Employee
from payportal.domains.staff.repositories import EmployeeRepository
from payportal.domains.staff.services import EmployeeService
from payportal.exceptions import ConflictException
from payportal.utilities.enums import StaffRole


URL = "/api/v1/employee/admin/employees"


async def test_employee_cannot_manage_accounts(client, employee_headers):
    response = await client.get(URL, headers=employee_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Access denied. Admin privileges required."


async def test_list_employees_with_creator(client, super_admin, employee, super_admin_headers):
    response = await client.get(URL, headers=super_admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 2
    by_name = {item["username"]: item for item in body["employees"]}
    assert by_name["root_admin"]["createdBy"] is None
    assert by_name["clerk_1"]["createdBy"] == {"id": str(super_admin.pk), "username": "root_admin"}
    assert "passwordHash" not in by_name["clerk_1"]


async def test_admin_creates_employee(client, db_session, admin, admin_headers):
    response = await client.post(URL, headers=admin_headers, json={"username": "clerk_2", "password": "Str0ngPass"})

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Employee created successfully"
    assert body["employee"]["role"] == "employee"

    created = (await db_session.execute(select(Employee).where(Employee.username == "clerk_2"))).scalar_one()
    assert created.created_by == admin.pk
    assert created.password_hash != "Str0ngPass"


async def test_only_super_admin_creates_admins(client, admin_headers, super_admin_headers):
    payload = {"username": "boss_2", "password": "Str0ngPass", "role": "admin"}

    response = await client.post(URL, headers=admin_headers, json=payload)
    assert response.status_code == 403
    assert response.json()["message"] == "Only super admin can create admin accounts"

    response = await client.post(URL, headers=super_admin_headers, json=payload)
    assert response.status_code == 201
    assert response.json()["employee"]["role"] == "admin"


async def test_duplicate_username(client, employee, super_admin_headers):
    response = await client.post(URL, headers=super_admin_headers, json={"username": "clerk_1", "password": "Str0ngPass"})

    assert response.status_code == 400
    assert response.json()["message"] == "Username already exists"


async def test_weak_password_rejected(client, super_admin_headers):
    response = await client.post(URL, headers=super_admin_headers, json={"username": "clerk_3", "password": "weakpass"})

    assert response.status_code == 400
    assert response.json()["errors"][0]["message"] == (
        "Password must contain at least one uppercase letter, one lowercase letter, and one number"
    )


async def test_password_over_72_bytes_rejected(client, db_session, super_admin_headers):
    response = await client.post(
        URL,
        headers=super_admin_headers,
        json={"username": "clerk_3", "password": "Aa1" + "é" * 40},
    )

    assert response.status_code == 400
    assert response.json()["errors"] == [{"field": "password", "message": "Password must not exceed 72 bytes"}]
    assert await db_session.scalar(select(func.count()).select_from(Employee).where(Employee.username == "clerk_3")) == 0


async def test_cannot_delete_own_account(client, admin, admin_headers):
    response = await client.delete(f"{URL}/{admin.pk}", headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Cannot delete your own account"


async def test_super_admin_cannot_be_deleted(client, super_admin, admin_headers):
    response = await client.delete(f"{URL}/{super_admin.pk}", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Cannot delete super admin account"


async def test_only_super_admin_deletes_admins(client, db_session, admin, super_admin_headers):
    other_admin = Employee(username="third_admin", password_hash="x", role=StaffRole.ADMIN, created_by=admin.pk)
    db_session.add(other_admin)
    await db_session.flush()

    response = await client.delete(f"{URL}/{other_admin.pk}", headers=super_admin_headers)

    assert response.status_code == 200
    assert response.json()["message"] == "Employee deleted successfully"


async def test_admin_cannot_delete_other_admin(client, db_session, admin, admin_headers):
    other_admin = Employee(username="third_admin", password_hash="x", role=StaffRole.ADMIN, created_by=admin.pk)
    db_session.add(other_admin)
    await db_session.flush()

    response = await client.delete(f"{URL}/{other_admin.pk}", headers=admin_headers)

    assert response.status_code == 403
    assert response.json()["message"] == "Only super admin can delete admin accounts"


async def test_admin_deletes_employee(client, db_session, employee, admin_headers):
    response = await client.delete(f"{URL}/{employee.pk}", headers=admin_headers)

    assert response.status_code == 200
    assert await db_session.get(Employee, employee.pk) is None


async def test_delete_missing_employee(client, admin, admin_headers):
    response = await client.delete(f"{URL}/{uuid4()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Employee not found"


async def test_create_super_admin_only_once(db_session):
    service = EmployeeService(EmployeeRepository(db_session))

    created = await service.create_super_admin("root_admin", "Passw0rd")
    assert created.is_super_admin

    with pytest.raises(ConflictException):
        await service.create_super_admin("another_root", "Passw0rd")


async def test_ensure_super_admin_is_idempotent(db_session):
    service = EmployeeService(EmployeeRepository(db_session))

    first = await service.ensure_super_admin("root_admin", "Passw0rd")
    second = await service.ensure_super_admin("other_name", "Passw0rd")

    assert first.pk == second.pk
    count = (await db_session.execute(select(func.count()).select_from(Employee).where(Employee.created_by.is_(None)))).scalar_one()
    assert count == 1


async def test_store_refuses_second_super_admin(db_session, super_admin):
    db_session.add(Employee(username="rogue_root", password_hash="x", role=StaffRole.ADMIN, created_by=None))

    with pytest.raises(IntegrityError):
        await db_session.flush()
