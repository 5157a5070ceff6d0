import flet as ft
from datetime import date
from scard.data.local_storage import StorageQuotaExceededError
from scard.models.expense import ExpenseType
from scard.services.app_controller import AppController
from scard.services.formatters import format_currency, format_date
from scard.services.reports import Transaction, cash_flow
from scard.ui.feedback import show_alert, show_snack


class CashFlowView(ft.Column):
    """Entradas, saídas e saldo do período (mensal ou diário)."""

    def __init__(self, page: ft.Page, controller: AppController):
        super().__init__()
        self.page_ref = page
        self.controller = controller
        self.scroll = ft.ScrollMode.AUTO
        self.expand = True

        today = date.today()
        self.filter_mode = "month"

        # --- Filtros ---
        self.seg_mode = ft.SegmentedButton(
            segments=[
                ft.Segment(value="day", label=ft.Text("Diário")),
                ft.Segment(value="month", label=ft.Text("Mensal")),
            ],
            selected={"month"},
            on_change=self.on_mode_change,
        )
        self.txt_filter = ft.TextField(
            label="Mês (AAAA-MM)",
            value=today.isoformat()[:7],
            width=180,
            on_change=lambda e: self.load_data(),
        )
        self.today_iso = today.isoformat()

        # --- Totais ---
        self.lbl_income = ft.Text("", size=18, weight="bold", color=ft.Colors.GREEN_700)
        self.lbl_expense = ft.Text("", size=18, weight="bold", color=ft.Colors.RED_700)
        self.lbl_balance = ft.Text("", size=18, weight="bold")

        # --- Novo lançamento ---
        self.txt_description = ft.TextField(label="Descrição *", expand=True)
        self.txt_amount = ft.TextField(label="Valor *", width=140, keyboard_type=ft.KeyboardType.NUMBER)
        self.txt_date = ft.TextField(label="Data *", value=today.isoformat(), width=160)
        self.dd_type = ft.Dropdown(
            label="Tipo",
            width=150,
            options=[
                ft.dropdown.Option(ExpenseType.EXPENSE.value, "Saída"),
                ft.dropdown.Option(ExpenseType.INCOME.value, "Entrada"),
            ],
            value=ExpenseType.EXPENSE.value,
        )

        self.list_view = ft.Column(spacing=5)

        self.controls = [
            ft.Row([self.seg_mode, self.txt_filter]),
            ft.Row([
                self.summary_card("Entradas", self.lbl_income, ft.Icons.TRENDING_UP),
                self.summary_card("Saídas", self.lbl_expense, ft.Icons.TRENDING_DOWN),
                self.summary_card("Saldo", self.lbl_balance, ft.Icons.ACCOUNT_BALANCE_WALLET),
            ], wrap=True),
            ft.Divider(),
            ft.Text("Novo Lançamento", weight="bold", color=ft.Colors.GREY_700),
            ft.Row([
                self.txt_description, self.txt_amount, self.txt_date, self.dd_type,
                ft.IconButton(ft.Icons.ADD_CIRCLE, icon_color=ft.Colors.INDIGO_600, icon_size=36,
                              tooltip="Adicionar", on_click=self.add_expense),
            ], wrap=True),
            ft.Divider(),
            self.list_view,
        ]

    def summary_card(self, title: str, value: ft.Text, icon) -> ft.Card:
        return ft.Card(
            content=ft.Container(
                padding=15,
                width=220,
                content=ft.Column([
                    ft.Row([ft.Icon(icon, color=ft.Colors.GREY_600), ft.Text(title, color=ft.Colors.GREY_600)]),
                    value,
                ]),
            )
        )

    def did_mount(self):
        self.load_data()

    def on_mode_change(self, e):
        self.filter_mode = list(self.seg_mode.selected)[0]
        if self.filter_mode == "month":
            self.txt_filter.label = "Mês (AAAA-MM)"
            self.txt_filter.value = self.today_iso[:7]
        else:
            self.txt_filter.label = "Dia (AAAA-MM-DD)"
            self.txt_filter.value = self.today_iso
        self.load_data()

    def load_data(self):
        value = self.txt_filter.value or ""
        if self.filter_mode == "month":
            report = cash_flow(self.controller.state.records, self.controller.state.expenses, month=value)
        else:
            report = cash_flow(self.controller.state.records, self.controller.state.expenses, day=value)

        self.lbl_income.value = format_currency(report.income)
        self.lbl_expense.value = format_currency(report.expense)
        self.lbl_balance.value = format_currency(report.balance)
        self.lbl_balance.color = ft.Colors.GREEN_700 if report.balance >= 0 else ft.Colors.RED_700

        self.list_view.controls = [self.build_row(t) for t in report.transactions]
        if not report.transactions:
            self.list_view.controls.append(
                ft.Text("Nenhuma movimentação no período.", italic=True, color=ft.Colors.GREY_500)
            )
        self.update()

    def build_row(self, transaction: Transaction) -> ft.ListTile:
        is_income = transaction.type == ExpenseType.INCOME
        trailing = None
        # Entradas de atendimentos são removidas pelo histórico, não aqui
        if not transaction.is_service:
            trailing = ft.IconButton(
                ft.Icons.DELETE_OUTLINE,
                icon_color=ft.Colors.RED_400,
                on_click=lambda _, t=transaction: self.delete_expense(t),
            )
        return ft.ListTile(
            leading=ft.Icon(
                ft.Icons.ARROW_CIRCLE_UP if is_income else ft.Icons.ARROW_CIRCLE_DOWN,
                color=ft.Colors.GREEN_600 if is_income else ft.Colors.RED_600,
            ),
            title=ft.Text(transaction.description),
            subtitle=ft.Text(format_date(transaction.date), size=12),
            trailing=ft.Row([
                ft.Text(
                    ("+ " if is_income else "- ") + format_currency(transaction.amount),
                    color=ft.Colors.GREEN_700 if is_income else ft.Colors.RED_700,
                    weight="bold",
                ),
                trailing or ft.Container(width=40),
            ], tight=True),
        )

    def add_expense(self, e):
        self.txt_description.error_text = None
        self.txt_amount.error_text = None
        try:
            amount = float((self.txt_amount.value or "").replace(",", "."))
        except ValueError:
            self.txt_amount.error_text = "Valor inválido"
            self.update()
            return
        if not self.txt_description.value or not self.txt_date.value:
            self.txt_description.error_text = "Obrigatório"
            self.update()
            return

        try:
            self.controller.add_expense({
                "description": self.txt_description.value,
                "amount": amount,
                "date": self.txt_date.value,
                "type": self.dd_type.value,
            })
        except StorageQuotaExceededError:
            show_alert(self.page_ref, "Erro ao salvar", "Espaço de armazenamento esgotado.")
            return
        # Limpar form (volta para saída por padrão)
        self.txt_description.value = ""
        self.txt_amount.value = ""
        self.dd_type.value = ExpenseType.EXPENSE.value
        show_snack(self.page_ref, "Lançamento adicionado!")
        self.load_data()

    def delete_expense(self, transaction: Transaction):
        self.controller.delete_expense(transaction.id)
        self.load_data()
