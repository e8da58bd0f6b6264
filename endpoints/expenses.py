from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session
from typing import List, Optional
from database import get_db
from security import get_current_user
from models.user import User as UserModel
from realtime.hub import RealtimeHub, get_hub
from schemas.expense import ExpenseCreate, ExpenseOut, ExpenseSplit, ExpenseStatusUpdate, ExpenseUpdate
from services import expenses as expense_service
from services.errors import DomainError
from endpoints.logs import log_action, log_error, log_request

router = APIRouter()


@router.post("", response_model=ExpenseOut, status_code=201)
async def add_expense(
    request: Request,
    body: ExpenseCreate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    hub: RealtimeHub = Depends(get_hub),
):
    correlation_id = await log_request(request, "create_expense", current_user, {"type": body.type, "group_id": body.group_id, "amount": body.amount})
    try:
        expense = expense_service.create_expense(db, hub.fanout, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    except Exception as e:
        log_error("create_expense_failed", e, current_user, correlation_id, {"type": body.type, "group_id": body.group_id})
        raise HTTPException(status_code=500, detail="Failed to create expense")
    log_action("expense_created", current_user, correlation_id, {"expense_id": expense.id, "type": expense.type})
    return expense


@router.get("", response_model=List[ExpenseOut])
async def get_expenses(
    groupId: Optional[str] = None,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return expense_service.list_expenses(db, current_user.id, groupId)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/group/{group_id}", response_model=List[ExpenseOut])
async def get_group_expenses(group_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return expense_service.list_group_expenses(db, group_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.get("/{expense_id}", response_model=ExpenseOut)
async def get_expense(expense_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return expense_service.get_expense(db, expense_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.put("/{expense_id}", response_model=ExpenseOut)
async def update_expense(
    expense_id: str,
    body: ExpenseUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        expense = expense_service.update_expense(db, expense_id, current_user.id, body)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("expense_updated", current_user, context={"expense_id": expense_id})
    return expense


@router.put("/{expense_id}/split", response_model=ExpenseOut)
async def split_expense(
    expense_id: str,
    body: ExpenseSplit,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Replace the expense's shares; their total may not exceed the amount"""
    try:
        expense = expense_service.split_expense(db, expense_id, current_user.id, body.shared_with)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("expense_split", current_user, context={"expense_id": expense_id, "shares": len(body.shared_with)})
    return expense


@router.put("/{expense_id}/status", response_model=ExpenseOut)
async def update_expense_status(
    expense_id: str,
    body: ExpenseStatusUpdate,
    current_user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return expense_service.update_expense_status(db, expense_id, current_user.id, body.status)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)


@router.delete("/{expense_id}")
async def delete_expense(expense_id: str, current_user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        expense_service.delete_expense(db, expense_id, current_user.id)
    except DomainError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    log_action("expense_deleted", current_user, context={"expense_id": expense_id})
    return {"message": "Expense deleted successfully"}
