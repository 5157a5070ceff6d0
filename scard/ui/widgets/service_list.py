import flet as ft
from scard.models.service_record import ServiceBase
from scard.services.app_controller import AppController
from scard.services.formatters import format_currency, format_date
from scard.ui.feedback import confirm, show_snack


class ServiceList(ft.Column):
    """Histórico de atendimentos concluídos, com busca e filtro por mês."""

    def __init__(self, page: ft.Page, controller: AppController, on_edit_click=None):
        super().__init__()
        self.page_ref = page
        self.controller = controller
        self.on_edit_click = on_edit_click
        self.expand = True

        self.txt_search = ft.TextField(
            label="Buscar",
            hint_text="Cliente ou serviço",
            prefix_icon=ft.Icons.SEARCH,
            on_change=lambda e: self.load_data(),
            border_radius=10,
            expand=True,
        )
        self.txt_month = ft.TextField(
            label="Mês",
            hint_text="AAAA-MM",
            prefix_icon=ft.Icons.FILTER_LIST,
            on_change=lambda e: self.load_data(),
            width=180,
        )

        self.list_view = ft.ListView(expand=True, spacing=10, padding=10)
        self.lbl_status = ft.Text("Carregando...", italic=True, color=ft.Colors.GREY_500)
        self.lbl_count = ft.Text("", size=12, color=ft.Colors.GREY_600)

        self.controls = [
            ft.Container(content=ft.Row([self.txt_search, self.txt_month]), padding=ft.padding.only(bottom=10)),
            self.lbl_status,
            self.list_view,
            self.lbl_count,
        ]

    def did_mount(self):
        self.load_data()

    def load_data(self):
        records = self.controller.history(self.txt_search.value or "", self.txt_month.value or "")
        self.list_view.controls.clear()

        if not records:
            self.lbl_status.value = "Nenhum resultado."
            self.lbl_status.visible = True
        else:
            self.lbl_status.visible = False
            for record in records:
                self.list_view.controls.append(self.build_card(record))

        self.lbl_count.value = f"Mostrando {len(records)} registros"
        self.update()

    def build_card(self, record: ServiceBase) -> ft.Card:
        return ft.Card(
            elevation=2,
            content=ft.Container(
                padding=10,
                content=ft.ListTile(
                    leading=ft.Icon(ft.Icons.SPA, color=ft.Colors.INDIGO_400, size=40),
                    title=ft.Text(record.client_name, weight="bold"),
                    subtitle=ft.Column([
                        ft.Text(record.description or "-", size=12),
                        ft.Row([
                            ft.Text(format_date(record.service_date), size=12, color=ft.Colors.GREY_700),
                            ft.Text(f"Retorno: {format_date(record.return_date) or '-'}", size=12,
                                    color=ft.Colors.GREY_600),
                        ]),
                        ft.Text(
                            f"{format_currency(record.amount) if record.amount else '-'} · "
                            f"{record.payment_method.value if record.payment_method else '-'}",
                            size=12, weight="bold", color=ft.Colors.GREEN_700,
                        ),
                    ], spacing=2),
                    trailing=ft.PopupMenuButton(
                        icon=ft.Icons.MORE_VERT,
                        items=[
                            ft.PopupMenuItem(
                                text="Editar",
                                icon=ft.Icons.EDIT,
                                on_click=lambda _, r=record: self.on_edit_click and self.on_edit_click(r)
                            ),
                            ft.PopupMenuItem(
                                text="Excluir",
                                icon=ft.Icons.DELETE,
                                on_click=lambda _, r=record: self.confirm_delete_request(r)
                            ),
                        ]
                    ),
                )
            )
        )

    def confirm_delete_request(self, record: ServiceBase):
        def do_delete():
            self.controller.delete_record(record.id)
            show_snack(self.page_ref, "Atendimento excluído com sucesso!")
            self.load_data()

        confirm(
            self.page_ref,
            "Excluir Atendimento",
            f"Tem certeza que deseja excluir o atendimento de {record.client_name}?",
            do_delete,
        )
