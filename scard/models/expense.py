from enum import Enum
from typing import Optional
from sqlmodel import Field
from .base import StoredModel


class ExpenseType(str, Enum):
    EXPENSE = "expense"  # gastos
    INCOME = "income"    # entradas extras


class ExpenseRecord(StoredModel):
    """Lançamento manual do fluxo de caixa."""
    description: str
    amount: float
    date: str  # YYYY-MM-DD
    type: ExpenseType = Field(default=ExpenseType.EXPENSE)
    category: Optional[str] = Field(default=None)
