"""Employee and employee payment endpoints."""

from datetime import date as date_type
from decimal import Decimal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from dailyledger.api.auth import get_current_user
from dailyledger.core.db import get_db
from dailyledger.core.errors import NotFoundError
from dailyledger.core.logging import get_logger
from dailyledger.core.validators import to_cents
from dailyledger.models.employee import Employee, EmployeePayment
from dailyledger.models.employee_schemas import (
    EmployeeCreate,
    EmployeePaymentCreate,
    EmployeePaymentList,
    EmployeePaymentRead,
    EmployeeRead,
    EmployeeTotals,
)
from dailyledger.models.enums import PaymentType
from dailyledger.models.user import User

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/employees",
    tags=["employees"],
    dependencies=[Depends(get_current_user)],
)


def _payment_read(payment: EmployeePayment, employee_name: str) -> EmployeePaymentRead:
    return EmployeePaymentRead(
        id=payment.id,
        employee_id=payment.employee_id,
        employee_name=employee_name,
        date=payment.date,
        payment_type=PaymentType(payment.payment_type),
        amount=payment.amount,
        created_at=payment.created_at,
    )


@router.get("", response_model=list[EmployeeRead])
async def list_employees(
    include_inactive: bool = Query(False),
    db: AsyncSession = Depends(get_db),
):
    query = select(Employee)
    if not include_inactive:
        query = query.where(Employee.is_active)
    result = await db.execute(query.order_by(Employee.name))
    return result.scalars().all()


@router.post("", response_model=EmployeeRead, status_code=status.HTTP_201_CREATED)
async def create_employee(
    payload: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    employee = Employee(name=payload.name)
    db.add(employee)
    await db.commit()
    await db.refresh(employee)

    logger.info(
        "employee.created",
        employee_id=str(employee.id),
        name=employee.name,
        actor=current_user.actor_name,
    )
    return employee


# ─────── PAYMENTS ────────


@router.get("/payments", response_model=EmployeePaymentList)
async def list_payments(
    start: date_type | None = Query(None),
    end: date_type | None = Query(None),
    employee_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Payments matching the filters, newest first, with their total."""
    query = select(EmployeePayment, Employee.name).join(
        Employee, EmployeePayment.employee_id == Employee.id
    )
    if start is not None:
        query = query.where(EmployeePayment.date >= start)
    if end is not None:
        query = query.where(EmployeePayment.date <= end)
    if employee_id is not None:
        query = query.where(EmployeePayment.employee_id == employee_id)

    result = await db.execute(
        query.order_by(EmployeePayment.date.desc(), EmployeePayment.created_at.desc())
    )
    rows = result.all()
    total = sum((payment.amount for payment, _ in rows), Decimal("0"))

    return EmployeePaymentList(
        payments=[_payment_read(payment, name) for payment, name in rows],
        total=to_cents(total),
    )


@router.post("/payments", response_model=EmployeePaymentRead, status_code=status.HTTP_201_CREATED)
async def create_payment(
    payload: EmployeePaymentCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    employee = await db.get(Employee, payload.employee_id)
    if employee is None:
        raise NotFoundError("Employee", str(payload.employee_id))

    payment = EmployeePayment(
        employee_id=employee.id,
        date=payload.date,
        payment_type=payload.payment_type.value,
        amount=to_cents(payload.amount),
    )
    db.add(payment)
    await db.commit()
    await db.refresh(payment)

    logger.info(
        "employee_payment.created",
        payment_id=str(payment.id),
        employee_id=str(employee.id),
        payment_type=payment.payment_type,
        amount=str(payment.amount),
        actor=current_user.actor_name,
    )
    return _payment_read(payment, employee.name)


@router.delete("/payments/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    payment = await db.get(EmployeePayment, payment_id)
    if payment is None:
        raise NotFoundError("EmployeePayment", str(payment_id))

    await db.delete(payment)
    await db.commit()

    logger.info(
        "employee_payment.deleted",
        payment_id=str(payment_id),
        actor=current_user.actor_name,
    )


@router.get("/payments/totals", response_model=list[EmployeeTotals])
async def payment_totals(
    start: date_type | None = Query(None),
    end: date_type | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Sum paid per employee, split into cash and bank transfer."""
    cash = func.sum(
        case((EmployeePayment.payment_type == PaymentType.CASH.value, EmployeePayment.amount), else_=0)
    )
    transfer = func.sum(
        case(
            (EmployeePayment.payment_type == PaymentType.BANK_TRANSFER.value, EmployeePayment.amount),
            else_=0,
        )
    )
    query = (
        select(Employee.id, Employee.name, cash, transfer)
        .join(EmployeePayment, EmployeePayment.employee_id == Employee.id)
        .group_by(Employee.id, Employee.name)
        .order_by(Employee.name)
    )
    if start is not None:
        query = query.where(EmployeePayment.date >= start)
    if end is not None:
        query = query.where(EmployeePayment.date <= end)

    result = await db.execute(query)
    totals = []
    for employee_id, name, cash_total, transfer_total in result.all():
        cash_amount = to_cents(Decimal(str(cash_total or 0)))
        transfer_amount = to_cents(Decimal(str(transfer_total or 0)))
        totals.append(
            EmployeeTotals(
                employee_id=employee_id,
                employee_name=name,
                cash=cash_amount,
                bank_transfer=transfer_amount,
                total=cash_amount + transfer_amount,
            )
        )
    return totals
