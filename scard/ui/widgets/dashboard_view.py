import flet as ft
from scard.models.service_record import PaymentMethod
from scard.services.app_controller import AppController
from scard.services.formatters import format_currency, month_name
from scard.services.reports import dashboard_stats

METHOD_COLORS = {
    PaymentMethod.PIX.value: ft.Colors.PURPLE_400,
    PaymentMethod.DINHEIRO.value: ft.Colors.GREEN_400,
    PaymentMethod.DEBITO.value: ft.Colors.AMBER_400,
    PaymentMethod.CREDITO.value: ft.Colors.RED_400,
}


class DashboardView(ft.Column):
    def __init__(self, page: ft.Page, controller: AppController):
        super().__init__()
        self.page_ref = page
        self.controller = controller
        self.scroll = ft.ScrollMode.AUTO
        self.expand = True

        self.cards_row = ft.Row(wrap=True)
        self.methods_column = ft.Column(spacing=8)
        self.monthly_column = ft.Column(spacing=8)

        self.controls = [
            self.cards_row,
            ft.Divider(),
            ft.Text("Faturamento por Forma de Pagamento", size=16, weight="bold"),
            self.methods_column,
            ft.Divider(),
            ft.Text("Faturamento Mensal", size=16, weight="bold"),
            self.monthly_column,
        ]

    def did_mount(self):
        self.load_data()

    def stat_card(self, title: str, value: str, icon, color) -> ft.Card:
        return ft.Card(
            content=ft.Container(
                padding=15,
                width=230,
                content=ft.Row([
                    ft.Icon(icon, color=color, size=32),
                    ft.Column([
                        ft.Text(title, size=12, color=ft.Colors.GREY_600),
                        ft.Text(value, size=18, weight="bold"),
                    ], spacing=2),
                ]),
            )
        )

    def load_data(self):
        state = self.controller.state
        stats = dashboard_stats(state.records, state.settings.card_rates)
        by_method = stats.by_method

        self.cards_row.controls = [
            self.stat_card("Faturamento Total", format_currency(stats.total), ft.Icons.TRENDING_UP, ft.Colors.INDIGO_600),
            self.stat_card("Pix", format_currency(by_method[PaymentMethod.PIX.value]), ft.Icons.QR_CODE, ft.Colors.PURPLE_400),
            self.stat_card("Dinheiro", format_currency(by_method[PaymentMethod.DINHEIRO.value]), ft.Icons.PAYMENTS, ft.Colors.GREEN_600),
            self.stat_card(
                "Cartões",
                format_currency(by_method[PaymentMethod.DEBITO.value] + by_method[PaymentMethod.CREDITO.value]),
                ft.Icons.CREDIT_CARD,
                ft.Colors.AMBER_700,
            ),
        ]
        if state.settings.card_rates:
            self.cards_row.controls.append(
                self.stat_card("Líquido (após taxas)", format_currency(stats.net_total),
                               ft.Icons.ACCOUNT_BALANCE, ft.Colors.TEAL_600)
            )

        self.methods_column.controls = [
            self.bar_row(item["name"], item["value"], stats.total, METHOD_COLORS.get(item["name"]))
            for item in stats.pie_data
        ]

        top = max((m.total for m in stats.monthly), default=0)
        self.monthly_column.controls = [
            self.bar_row(f"{month_name(m.month)} ({m.count})", m.total, top, ft.Colors.INDIGO_400)
            for m in stats.monthly
        ]
        if not stats.monthly:
            self.monthly_column.controls.append(
                ft.Text("Sem atendimentos concluídos.", italic=True, color=ft.Colors.GREY_500)
            )
        self.update()

    def bar_row(self, label: str, value: float, reference: float, color) -> ft.Row:
        ratio = value / reference if reference else 0
        return ft.Row([
            ft.Text(label, width=200),
            ft.ProgressBar(value=ratio, color=color, bgcolor=ft.Colors.GREY_200, expand=True),
            ft.Text(format_currency(value), width=120),
        ])
