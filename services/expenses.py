"""Expenses: creation with group side effects, splitting, status and removal.

Only the owner (``user_id``) may change or delete an expense. A split
never assigns more than the expense amount, and a group expense can
only be split between members of its group.
"""
from __future__ import annotations
from decimal import Decimal
from typing import Iterable, List, Optional
from sqlalchemy import or_
from database import commit_or_rollback
from sqlalchemy.orm import Session
from models.expense import Expense, ExpenseShare
from models.group import Group
from models.trip import Trip
from models.user import User
from realtime.fanout import FanoutEngine
from schemas.expense import ExpenseCreate, ExpenseShareIn, ExpenseUpdate
from schemas.notification import NotificationType
from services.errors import DomainError, NotFoundError, PermissionDeniedError
from services.messages import get_member_group, post_group_message
from services.notifications import notify


def _money(value) -> Decimal:
    return Decimal(str(value or 0))


def create_expense(db: Session, fanout: FanoutEngine, user_id: str, data: ExpenseCreate) -> Expense:
    group: Optional[Group] = None
    if data.type == "group":
        group = get_member_group(db, data.group_id, user_id)
    if data.trip_id and not db.get(Trip, data.trip_id):
        raise NotFoundError("Trip not found")

    amount = _money(data.amount)
    expense = Expense(
        title=data.title,
        amount=amount,
        category=data.category,
        description=data.description,
        date=data.date,
        type=data.type,
        is_group_expense=data.is_group_expense or group is not None,
        status="pending",
        group_id=group.id if group else None,
        trip_id=data.trip_id,
        user_id=user_id,
        created_by=user_id,
    )
    db.add(expense)
    if group is not None:
        group.total_expenses = _money(group.total_expenses) + amount
    commit_or_rollback(db)
    db.refresh(expense)

    if group is not None:
        notify(
            db,
            fanout,
            [m for m in group.member_ids if m != user_id],
            NotificationType.EXPENSE,
            "New Group Expense",
            f'A new expense "{expense.title}" was added to group "{group.name}".',
        )
        post_group_message(
            db,
            fanout,
            group,
            user_id,
            f"New expense added: {expense.title} - ${amount:.2f}",
            message_type="expense",
            meta={"expenseId": expense.id, "amount": float(amount), "category": expense.category},
        )
    else:
        notify(
            db,
            fanout,
            [user_id],
            NotificationType.EXPENSE,
            "Expense Added",
            f'You added a new expense "{expense.title}".',
        )
    return expense


def list_expenses(db: Session, user_id: str, group_id: Optional[str] = None) -> List[Expense]:
    """Own expenses and expenses shared with the user, or every expense of a group."""
    if group_id:
        get_member_group(db, group_id, user_id)
        query = db.query(Expense).filter(Expense.group_id == group_id)
    else:
        query = db.query(Expense).filter(
            or_(Expense.user_id == user_id, Expense.shared_with.any(ExpenseShare.user_id == user_id))
        )
    return query.order_by(Expense.date.desc()).all()


def list_group_expenses(db: Session, group_id: str, user_id: str) -> List[Expense]:
    get_member_group(db, group_id, user_id)
    return (
        db.query(Expense)
        .filter(Expense.group_id == group_id, Expense.type == "group")
        .order_by(Expense.created_at.desc())
        .all()
    )


def _get_expense(db: Session, expense_id: str) -> Expense:
    expense = db.get(Expense, expense_id)
    if not expense:
        raise NotFoundError("Expense not found")
    return expense


def _owned_expense(db: Session, expense_id: str, user_id: str, action: str) -> Expense:
    expense = _get_expense(db, expense_id)
    if expense.user_id != user_id:
        raise PermissionDeniedError(f"Not authorized to {action} this expense")
    return expense


def can_view_expense(db: Session, expense: Expense, user_id: str) -> bool:
    if user_id in (expense.user_id, expense.created_by):
        return True
    if any(s.user_id == user_id for s in expense.shared_with):
        return True
    if expense.group_id:
        group = db.get(Group, expense.group_id)
        return group is not None and group.has_member(user_id)
    return False


def get_expense(db: Session, expense_id: str, user_id: str) -> Expense:
    expense = _get_expense(db, expense_id)
    if not can_view_expense(db, expense, user_id):
        raise PermissionDeniedError("Not authorized to view this expense")
    return expense


def _replace_shares(db: Session, expense: Expense, shares: Iterable[ExpenseShareIn], amount: Decimal) -> None:
    shares = list(shares)
    if sum((_money(s.amount) for s in shares), Decimal("0")) > amount:
        raise DomainError("Total shared amount cannot exceed the expense amount")
    user_ids = {s.user_id for s in shares}
    known = {u.id for u in db.query(User).filter(User.id.in_(user_ids)).all()} if user_ids else set()
    if user_ids - known:
        raise NotFoundError("User not found")
    if expense.group_id:
        group = db.get(Group, expense.group_id)
        members = set(group.member_ids) if group else set()
        if user_ids - members:
            raise DomainError("All shares must belong to group members")
    expense.shared_with = [
        ExpenseShare(user_id=s.user_id, amount=_money(s.amount), status=s.status) for s in shares
    ]


def update_expense(db: Session, expense_id: str, user_id: str, data: ExpenseUpdate) -> Expense:
    expense = _owned_expense(db, expense_id, user_id, "update")
    changes = data.model_dump(exclude_unset=True, exclude={"shared_with"})
    old_amount = _money(expense.amount)
    new_amount = _money(changes.pop("amount")) if changes.get("amount") is not None else old_amount

    if data.shared_with is not None:
        _replace_shares(db, expense, data.shared_with, new_amount)
    elif _money(expense.shared_total) > new_amount:
        raise DomainError("Total shared amount cannot exceed the expense amount")

    for field, value in changes.items():
        if value is not None or field == "description":
            setattr(expense, field, value)
    expense.amount = new_amount
    if expense.group_id and new_amount != old_amount:
        group = db.get(Group, expense.group_id)
        if group is not None:
            group.total_expenses = _money(group.total_expenses) - old_amount + new_amount
    commit_or_rollback(db)
    db.refresh(expense)
    return expense


def split_expense(db: Session, expense_id: str, user_id: str, shares: Iterable[ExpenseShareIn]) -> Expense:
    expense = _owned_expense(db, expense_id, user_id, "split")
    _replace_shares(db, expense, shares, _money(expense.amount))
    commit_or_rollback(db)
    db.refresh(expense)
    return expense


def update_expense_status(db: Session, expense_id: str, user_id: str, status: str) -> Expense:
    expense = _owned_expense(db, expense_id, user_id, "update the status of")
    expense.status = status
    commit_or_rollback(db)
    db.refresh(expense)
    return expense


def delete_expense(db: Session, expense_id: str, user_id: str) -> None:
    expense = _owned_expense(db, expense_id, user_id, "delete")
    if expense.group_id:
        group = db.get(Group, expense.group_id)
        if group is not None:
            group.total_expenses = max(_money(group.total_expenses) - _money(expense.amount), Decimal("0"))
    db.delete(expense)
    commit_or_rollback(db)
