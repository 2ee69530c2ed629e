from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.deps import get_current_user, get_db, get_optional_user, require_admin
from portal.models import TransactionStatus, TransactionType, User
from portal.schemas import TransactionCreate, TransactionDecision, TransactionRead
from portal.services import transactions as transaction_service

router = APIRouter(prefix="/api", tags=["transactions"])


@router.post(
    "/transactions",
    response_model=TransactionRead,
    status_code=status.HTTP_201_CREATED,
)
async def submit_transaction(
    payload: TransactionCreate,
    session: AsyncSession = Depends(get_db),
    user: User | None = Depends(get_optional_user),
) -> TransactionRead:
    txn = await transaction_service.submit_transaction(session, payload, user)
    return TransactionRead.model_validate(txn)


@router.get("/my-transactions", response_model=list[TransactionRead])
async def list_my_transactions(
    session: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[TransactionRead]:
    txns = await transaction_service.list_transactions_for_user(session, user.id)
    return [TransactionRead.model_validate(txn) for txn in txns]


@router.get(
    "/admin/transactions",
    response_model=list[TransactionRead],
    dependencies=[Depends(require_admin)],
)
async def list_transactions(
    status_filter: TransactionStatus | None = Query(default=None, alias="status"),
    type_filter: TransactionType | None = Query(default=None, alias="type"),
    session: AsyncSession = Depends(get_db),
) -> list[TransactionRead]:
    txns = await transaction_service.list_transactions(session, status_filter, type_filter)
    return [TransactionRead.model_validate(txn) for txn in txns]


@router.patch("/admin/transactions/{transaction_id}", response_model=TransactionRead)
async def decide_transaction(
    transaction_id: str,
    payload: TransactionDecision,
    session: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> TransactionRead:
    txn = await transaction_service.decide_transaction(session, transaction_id, payload, admin)
    return TransactionRead.model_validate(txn)
