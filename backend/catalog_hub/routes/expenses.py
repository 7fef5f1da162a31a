"""
Expense routes — hierarchical expense records per type.
Version: 1.0.0
"""
from typing import List

from fastapi import APIRouter, Body, Depends, Query

from catalog_hub.container import get_expense_store
from catalog_hub.db.expense_store import ExpenseStore
from catalog_hub.schemas.expenses import (
    ExpenseEdit,
    ExpenseRecord,
    ExpenseSaveRequest,
    ExpenseTreeNode,
    ExpenseType,
)
from catalog_hub.utils.expense_tree import ExpenseTree

router = APIRouter(prefix="/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseTreeNode])
async def get_expenses(
    type: ExpenseType = Query(...),
    store: ExpenseStore = Depends(get_expense_store),
):
    tree = await store.load_tree(type)
    return tree.to_nodes()


@router.post("")
async def save_expenses(
    payload: ExpenseSaveRequest = Body(...),
    store: ExpenseStore = Depends(get_expense_store),
):
    tree = ExpenseTree.from_nested(payload.expenses, payload.type)
    saved = await store.save_tree(payload.type, tree)
    return {"success": True, "saved": saved}


@router.patch("/cell", response_model=ExpenseRecord)
async def edit_expense_cell(
    type: ExpenseType = Query(...),
    payload: ExpenseEdit = Body(...),
    store: ExpenseStore = Depends(get_expense_store),
):
    return await store.apply_edit(type, payload)
