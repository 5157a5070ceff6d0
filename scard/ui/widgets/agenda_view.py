import flet as ft
from datetime import date
from scard.models.service_record import ServiceBase
from scard.services.app_controller import AppController
from scard.services.formatters import format_date
from scard.services.whatsapp import build_whatsapp_link
from scard.ui.feedback import confirm


class AgendaView(ft.Column):
    """Próximos agendamentos, do mais próximo para o mais distante."""

    def __init__(self, page: ft.Page, controller: AppController, on_new=None, on_finish=None, on_edit=None):
        super().__init__()
        self.page_ref = page
        self.controller = controller
        self.on_new = on_new
        self.on_finish = on_finish
        self.on_edit = on_edit
        self.expand = True

        self.list_view = ft.ListView(expand=True, spacing=10, padding=10)
        self.lbl_status = ft.Text("Nenhum agendamento.", italic=True, color=ft.Colors.GREY_500, visible=False)

        self.controls = [
            ft.Row([
                ft.Text("Próximos Agendamentos", size=20, weight="bold", color=ft.Colors.INDIGO_900),
                ft.Container(expand=True),
                ft.ElevatedButton(
                    "Novo Agendamento",
                    icon=ft.Icons.ADD,
                    on_click=lambda e: self.on_new and self.on_new(),
                ),
            ]),
            ft.Divider(),
            self.lbl_status,
            self.list_view,
        ]

    def did_mount(self):
        self.load_data()

    def load_data(self):
        self.list_view.controls.clear()
        records = self.controller.agenda()
        self.lbl_status.visible = not records

        today = date.today().isoformat()
        for record in records:
            self.list_view.controls.append(self.build_card(record, record.service_date == today))
        self.update()

    def build_card(self, record: ServiceBase, is_today: bool) -> ft.Card:
        when = format_date(record.service_date)
        if record.service_time:
            when += f" às {record.service_time}"

        actions = [
            ft.PopupMenuItem(text="Editar", icon=ft.Icons.EDIT,
                             on_click=lambda _, r=record: self.on_edit and self.on_edit(r)),
            ft.PopupMenuItem(text="Excluir", icon=ft.Icons.DELETE,
                             on_click=lambda _, r=record: self.confirm_delete(r)),
        ]
        if record.client_phone:
            actions.insert(0, ft.PopupMenuItem(
                text="Confirmar via WhatsApp",
                icon=ft.Icons.CHAT,
                on_click=lambda _, r=record: self.open_whatsapp(r),
            ))

        badge = ft.Container(
            content=ft.Text("Hoje" if is_today else "Agendado", size=10, color=ft.Colors.WHITE, weight="bold"),
            bgcolor=ft.Colors.GREEN_600 if is_today else ft.Colors.AMBER_700,
            padding=ft.padding.symmetric(horizontal=8, vertical=2),
            border_radius=10,
        )

        return ft.Card(
            elevation=2,
            content=ft.Container(
                padding=10,
                content=ft.Column([
                    ft.ListTile(
                        leading=ft.Icon(ft.Icons.CALENDAR_MONTH, color=ft.Colors.INDIGO_400, size=40),
                        title=ft.Row([ft.Text(record.client_name, weight="bold"), badge]),
                        subtitle=ft.Column([
                            ft.Text(record.description or "-", size=12),
                            ft.Text(when, size=12, color=ft.Colors.GREY_700),
                            ft.Text(record.client_phone or "", size=12, color=ft.Colors.GREY_600),
                        ], spacing=2),
                        trailing=ft.PopupMenuButton(icon=ft.Icons.MORE_VERT, items=actions),
                    ),
                    ft.ElevatedButton(
                        "Finalizar Atendimento",
                        icon=ft.Icons.CHECK_CIRCLE,
                        on_click=lambda _, r=record: self.on_finish and self.on_finish(r),
                    ),
                ]),
            ),
        )

    def open_whatsapp(self, record: ServiceBase):
        link = build_whatsapp_link(
            record.client_phone,
            self.controller.state.settings.whatsapp_message_template,
            record.client_name,
            record.service_time,
        )
        self.page_ref.launch_url(link)

    def confirm_delete(self, record: ServiceBase):
        def do_delete():
            self.controller.delete_record(record.id)
            self.load_data()

        confirm(
            self.page_ref,
            "Excluir Agendamento",
            f"Tem certeza que deseja excluir o agendamento de {record.client_name}?",
            do_delete,
        )
