import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from portal.core.errors import ConflictError, NotFoundError
from portal.models import (
    PaymentTransaction,
    Student,
    TransactionStatus,
    TransactionType,
    User,
    UserRole,
)
from portal.schemas import TransactionCreate, TransactionDecision
from portal.services.students import get_student_for_user, mark_fee_paid

logger = logging.getLogger(__name__)


async def submit_transaction(
    session: AsyncSession,
    payload: TransactionCreate,
    user: User | None = None,
) -> PaymentTransaction:
    txn = PaymentTransaction(**payload.model_dump())
    if user is not None:
        txn.user_id = user.id
        if user.role == UserRole.STUDENT:
            student = await get_student_for_user(session, user.id)
            if student:
                txn.student_id = student.id
    session.add(txn)
    await session.commit()
    await session.refresh(txn)
    logger.info(
        "Recorded %s transaction %s for %s", txn.type.value, txn.transaction_id, txn.amount
    )
    return txn


async def list_transactions_for_user(
    session: AsyncSession, user_id: str
) -> list[PaymentTransaction]:
    stmt = (
        select(PaymentTransaction)
        .where(PaymentTransaction.user_id == user_id)
        .order_by(PaymentTransaction.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def list_transactions(
    session: AsyncSession,
    status: TransactionStatus | None = None,
    type_: TransactionType | None = None,
) -> list[PaymentTransaction]:
    stmt = select(PaymentTransaction).order_by(PaymentTransaction.created_at.desc())
    if status is not None:
        stmt = stmt.where(PaymentTransaction.status == status)
    if type_ is not None:
        stmt = stmt.where(PaymentTransaction.type == type_)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def decide_transaction(
    session: AsyncSession,
    transaction_id: str,
    decision: TransactionDecision,
    admin: User,
) -> PaymentTransaction:
    txn = await session.get(PaymentTransaction, transaction_id)
    if not txn:
        raise NotFoundError("Transaction not found")
    if txn.status != TransactionStatus.PENDING:
        raise ConflictError(f"Transaction already {txn.status.value}")

    now = datetime.now(timezone.utc)
    txn.status = TransactionStatus(decision.status)
    txn.admin_notes = decision.admin_notes
    if txn.status == TransactionStatus.APPROVED:
        txn.approved_by = admin.id
        txn.approved_at = now
        if txn.type == TransactionType.FEE and txn.student_id:
            student = await session.get(Student, txn.student_id)
            if student:
                mark_fee_paid(student, txn.created_at)

    await session.commit()
    await session.refresh(txn)
    logger.info("Transaction %s %s by %s", txn.id, txn.status.value, admin.email)
    return txn
