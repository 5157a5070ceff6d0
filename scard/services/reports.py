"""
Relatórios derivados (somente leitura, nunca persistidos):
fluxo de caixa e resumo financeiro do dashboard.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from scard.models.expense import ExpenseRecord, ExpenseType
from scard.models.service_record import PaymentMethod, ServiceBase, has_payment, is_completed
from scard.models.settings import CardRates


@dataclass
class Transaction:
    id: str
    description: str
    amount: float
    date: str
    type: ExpenseType
    # True quando vem do módulo de atendimentos (não pode ser excluída no caixa)
    is_service: bool = False


@dataclass
class CashFlowReport:
    transactions: List[Transaction]
    income: float
    expense: float
    balance: float


@dataclass
class MonthlyStats:
    month: str  # YYYY-MM
    total: float
    count: int


@dataclass
class DashboardStats:
    total: float
    by_method: Dict[str, float]
    monthly: List[MonthlyStats]
    card_fees: float = 0.0
    net_total: float = 0.0
    pie_data: List[Dict] = field(default_factory=list)


def build_ledger(records: List[ServiceBase], expenses: List[ExpenseRecord]) -> List[Transaction]:
    """Atendimentos concluídos viram entradas; lançamentos manuais entram como estão."""
    ledger = [
        Transaction(
            id=r.id,
            description=f"Serviço: {r.client_name} - {r.description}",
            amount=r.amount,
            date=r.service_date,
            type=ExpenseType.INCOME,
            is_service=True,
        )
        for r in records
        if is_completed(r) and r.amount
    ]
    ledger.extend(
        Transaction(
            id=e.id,
            description=e.description,
            amount=e.amount,
            date=e.date,
            type=ExpenseType(e.type),
        )
        for e in expenses
    )
    return ledger


def cash_flow(
    records: List[ServiceBase],
    expenses: List[ExpenseRecord],
    month: Optional[str] = None,
    day: Optional[str] = None,
) -> CashFlowReport:
    """
    Filtra por mês (YYYY-MM) ou por dia (YYYY-MM-DD); sem filtro usa tudo.
    Transações ordenadas da mais recente para a mais antiga.
    """
    ledger = build_ledger(records, expenses)

    if day:
        ledger = [t for t in ledger if t.date == day]
    elif month:
        ledger = [t for t in ledger if t.date.startswith(month)]

    ledger.sort(key=lambda t: t.date, reverse=True)

    income = sum(t.amount for t in ledger if t.type == ExpenseType.INCOME)
    expense = sum(t.amount for t in ledger if t.type == ExpenseType.EXPENSE)
    return CashFlowReport(
        transactions=ledger,
        income=income,
        expense=expense,
        balance=income - expense,
    )


def dashboard_stats(records: List[ServiceBase], card_rates: Optional[CardRates] = None) -> DashboardStats:
    total = 0.0
    by_method = {method.value: 0.0 for method in PaymentMethod}
    monthly_total: Dict[str, float] = {}
    monthly_count: Dict[str, int] = {}

    for record in records:
        # Só entram atendimentos concluídos com pagamento e valor
        if not has_payment(record):
            continue

        total += record.amount
        method = PaymentMethod(record.payment_method).value
        by_method[method] += record.amount

        month_key = record.service_date[:7]
        monthly_total[month_key] = monthly_total.get(month_key, 0.0) + record.amount
        monthly_count[month_key] = monthly_count.get(month_key, 0) + 1

    card_fees = 0.0
    if card_rates:
        card_fees = (
            by_method[PaymentMethod.DEBITO.value] * card_rates.debit / 100
            + by_method[PaymentMethod.CREDITO.value] * card_rates.credit / 100
        )

    monthly = [
        MonthlyStats(month=key, total=monthly_total[key], count=monthly_count[key])
        for key in sorted(monthly_total)
    ]
    pie_data = [{"name": name, "value": value} for name, value in by_method.items() if value > 0]

    return DashboardStats(
        total=total,
        by_method=by_method,
        monthly=monthly,
        card_fees=round(card_fees, 2),
        net_total=round(total - card_fees, 2),
        pie_data=pie_data,
    )
