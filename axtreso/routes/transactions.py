# AXTRESO/backend/axtreso/routes/transactions.py

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from axtreso import auth
from axtreso.errors import NotFound
from axtreso.models import models as db_models
from axtreso.schemas import schemas
from axtreso.schemas.schemas import to_utc_naive
from axtreso.services.store import Store, get_store

router = APIRouter(prefix="/api/transaction", tags=["transaction"])


def _owned_transaction(store: Store, transaction_id: int, salon_id: int) -> db_models.Transaction:
    transaction = store.get_transaction_by_id(transaction_id)
    if not transaction or transaction.salon_id != salon_id:
        raise NotFound("Transaction introuvable")
    return transaction


@router.post("/create", response_model=schemas.TransactionOut)
def create_transaction(
    payload: schemas.TransactionCreate,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Enregistre un encaissement ou un décaissement pour le salon du gérant"""
    auth.authorize_salon(store, current_user, payload.salon_id, allow_admin=False)

    transaction = store.create_transaction(**payload.model_dump())
    store.create_audit_log(
        current_user.id,
        f"transaction_created_{payload.type}",
        salon_id=payload.salon_id,
        details={"amount": str(payload.amount), "designation": payload.designation},
    )
    return transaction


@router.get("/getBySalon", response_model=List[schemas.TransactionOut])
def get_transactions_by_salon(
    salon_id: int = Query(...),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    type: Optional[schemas.TransactionType] = Query(None),
    designation: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    """Transactions d'un salon avec filtres optionnels, les plus récentes d'abord"""
    auth.authorize_salon(store, current_user, salon_id)
    return store.get_transactions_by_salon(
        salon_id,
        start_date=to_utc_naive(start_date),
        end_date=to_utc_naive(end_date),
        type=type,
        designation=designation,
        search=search,
    )


@router.get("/getById", response_model=schemas.TransactionOut)
def get_transaction_by_id(
    transaction_id: int = Query(...),
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    transaction = store.get_transaction_by_id(transaction_id)
    if not transaction:
        raise NotFound("Transaction introuvable")
    auth.authorize_salon(store, current_user, transaction.salon_id)
    return transaction


@router.post("/update", response_model=schemas.TransactionOut)
def update_transaction(
    payload: schemas.TransactionUpdate,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    auth.authorize_salon(store, current_user, payload.salon_id, allow_admin=False)
    _owned_transaction(store, payload.transaction_id, payload.salon_id)

    # Un champ absent reste inchangé, un commentaire à null est effacé
    transaction = store.update_transaction(
        payload.transaction_id,
        **payload.model_dump(exclude={"transaction_id", "salon_id"}, exclude_unset=True)
    )
    store.create_audit_log(
        current_user.id,
        "transaction_updated",
        salon_id=payload.salon_id,
        details={"transaction_id": payload.transaction_id},
    )
    return transaction


@router.post("/delete", response_model=schemas.SuccessOut)
def delete_transaction(
    payload: schemas.TransactionDelete,
    store: Store = Depends(get_store),
    current_user: db_models.User = Depends(auth.get_current_user)
):
    auth.authorize_salon(store, current_user, payload.salon_id, allow_admin=False)
    _owned_transaction(store, payload.transaction_id, payload.salon_id)

    store.delete_transaction(payload.transaction_id)
    store.create_audit_log(
        current_user.id,
        "transaction_deleted",
        salon_id=payload.salon_id,
        details={"transaction_id": payload.transaction_id},
    )
    return {"success": True}
