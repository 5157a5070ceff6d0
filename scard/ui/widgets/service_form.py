import flet as ft
import logging
from datetime import date, datetime
from pydantic import ValidationError
from scard.data.local_storage import StorageQuotaExceededError
from scard.models.service_record import PaymentMethod, is_completed
from scard.services.app_controller import AppController
from scard.services.exceptions import IncompleteServiceError
from scard.services.formatters import calculate_return_date, format_phone, shift_date, weekday_name
from scard.ui.feedback import show_alert, show_snack

logger = logging.getLogger("ServiceForm")


class ServiceForm(ft.Column):
    """
    Formulário único para novo atendimento, novo agendamento, finalizar
    agendamento e editar. O modo vem do estado do controller.
    """

    def __init__(self, page: ft.Page, controller: AppController, on_done=None):
        super().__init__()
        self.page_ref = page
        self.controller = controller
        self.on_done = on_done

        self.scroll = ft.ScrollMode.AUTO
        self.expand = True

        self.lbl_title = ft.Text("Novo Atendimento", size=24, weight="bold", color=ft.Colors.INDIGO_900)

        self.txt_client_name = ft.TextField(label="Nome da Cliente *")
        self.txt_client_phone = ft.TextField(
            label="Telefone / WhatsApp",
            keyboard_type=ft.KeyboardType.PHONE,
            on_change=self.on_phone_change,
        )
        self.txt_service_date = ft.TextField(
            label="Data do Serviço *",
            hint_text="AAAA-MM-DD",
            icon=ft.Icons.CALENDAR_TODAY,
            on_change=self.on_service_date_change,
        )
        self.txt_service_time = ft.TextField(label="Horário", hint_text="HH:MM")
        self.txt_return_date = ft.TextField(label="Data de Retorno", hint_text="AAAA-MM-DD", on_change=self.refresh_weekday)
        self.lbl_return_weekday = ft.Text("", size=12, color=ft.Colors.GREY_600)
        self.txt_description = ft.TextField(label="Descrição do Serviço", multiline=True, min_lines=2)

        self.dd_payment = ft.Dropdown(
            label="Forma de Pagamento *",
            options=[ft.dropdown.Option(m.value) for m in PaymentMethod],
            value=PaymentMethod.PIX.value,
        )
        self.txt_amount = ft.TextField(label="Valor (R$) *", keyboard_type=ft.KeyboardType.NUMBER)
        self.payment_section = ft.ResponsiveRow([
            ft.Column(col={"xs": 12, "md": 6}, controls=[self.dd_payment]),
            ft.Column(col={"xs": 12, "md": 6}, controls=[self.txt_amount]),
        ])

        self.btn_save = ft.ElevatedButton(
            text="Salvar Atendimento",
            icon=ft.Icons.SAVE,
            style=ft.ButtonStyle(
                color=ft.Colors.WHITE,
                bgcolor=ft.Colors.INDIGO_600,
                padding=15,
                shape=ft.RoundedRectangleBorder(radius=8),
            ),
            on_click=self.save_record,
            expand=True
        )
        self.btn_cancel = ft.OutlinedButton(text="Cancelar", icon=ft.Icons.CLOSE, on_click=self.cancel)

        self.controls = [
            self.lbl_title,
            ft.Divider(),
            ft.ResponsiveRow([
                ft.Column(col={"xs": 12, "md": 7}, controls=[self.txt_client_name]),
                ft.Column(col={"xs": 12, "md": 5}, controls=[self.txt_client_phone]),
            ]),
            ft.ResponsiveRow([
                ft.Column(col={"xs": 12, "md": 4}, controls=[self.txt_service_date]),
                ft.Column(col={"xs": 12, "md": 4}, controls=[self.txt_service_time]),
                ft.Column(col={"xs": 12, "md": 4}, controls=[
                    ft.Row([
                        ft.IconButton(ft.Icons.REMOVE, on_click=lambda e: self.adjust_return_date(-1)),
                        ft.Container(content=self.txt_return_date, expand=True),
                        ft.IconButton(ft.Icons.ADD, on_click=lambda e: self.adjust_return_date(1)),
                    ]),
                    self.lbl_return_weekday,
                ]),
            ]),
            self.txt_description,
            self.payment_section,
            ft.Divider(height=30),
            ft.Row([self.btn_cancel, self.btn_save], alignment=ft.MainAxisAlignment.CENTER),
        ]

    def load_from_state(self):
        """Preenche o formulário a partir do registro em edição (ou limpa)."""
        state = self.controller.state
        record = state.editing_record
        scheduling = state.scheduling_mode

        self.lbl_title.value = self.controller.form_title()
        self.payment_section.visible = not scheduling
        self.btn_save.text = "Salvar Agendamento" if scheduling else "Salvar Atendimento"
        self.btn_save.style.bgcolor = ft.Colors.AMBER_700 if scheduling else ft.Colors.INDIGO_600

        if record:
            self.txt_client_name.value = record.client_name
            self.txt_client_phone.value = record.client_phone
            self.txt_service_date.value = record.service_date
            self.txt_service_time.value = record.service_time or ""
            self.txt_return_date.value = record.return_date
            self.txt_description.value = record.description
            if is_completed(record):
                method = record.payment_method or PaymentMethod.PIX
                self.dd_payment.value = method.value
                self.txt_amount.value = "" if record.amount is None else str(record.amount)
            else:
                self.dd_payment.value = PaymentMethod.PIX.value
                self.txt_amount.value = ""
        else:
            today = date.today().isoformat()
            self.txt_client_name.value = ""
            self.txt_client_phone.value = ""
            self.txt_service_date.value = today
            self.txt_service_time.value = ""
            self.txt_return_date.value = calculate_return_date(today)
            self.txt_description.value = ""
            self.dd_payment.value = PaymentMethod.PIX.value
            self.txt_amount.value = ""

        self.refresh_weekday(None, update_view=False)
        self.update()

    def on_phone_change(self, e):
        self.txt_client_phone.value = format_phone(self.txt_client_phone.value)
        self.txt_client_phone.update()

    def on_service_date_change(self, e):
        value = self.txt_service_date.value or ""
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except ValueError:
            return
        # Data mudou: recalcula a sugestão de retorno
        self.txt_return_date.value = calculate_return_date(value)
        self.refresh_weekday(None)

    def adjust_return_date(self, days: int):
        try:
            self.txt_return_date.value = shift_date(self.txt_return_date.value, days)
        except ValueError:
            return
        self.refresh_weekday(None)

    def refresh_weekday(self, e, update_view=True):
        try:
            self.lbl_return_weekday.value = weekday_name(self.txt_return_date.value)
        except ValueError:
            self.lbl_return_weekday.value = ""
        if update_view:
            self.update()

    def validate(self) -> bool:
        is_valid = True
        self.txt_client_name.error_text = None
        self.txt_service_date.error_text = None
        self.txt_amount.error_text = None

        if not self.txt_client_name.value:
            self.txt_client_name.error_text = "Nome é obrigatório"
            is_valid = False
        try:
            datetime.strptime(self.txt_service_date.value or "", "%Y-%m-%d")
        except ValueError:
            self.txt_service_date.error_text = "Data inválida (AAAA-MM-DD)"
            is_valid = False

        # Se NÃO for agendamento, precisa do valor
        if not self.controller.state.scheduling_mode:
            try:
                if float((self.txt_amount.value or "").replace(",", ".")) <= 0:
                    raise ValueError
            except ValueError:
                self.txt_amount.error_text = "Informe o valor"
                is_valid = False
        self.update()
        return is_valid

    def save_record(self, e):
        if not self.validate():
            return

        data = {
            "client_name": self.txt_client_name.value,
            "client_phone": self.txt_client_phone.value or "",
            "service_date": self.txt_service_date.value,
            "service_time": self.txt_service_time.value or None,
            "return_date": self.txt_return_date.value or "",
            "description": self.txt_description.value or "",
        }
        if not self.controller.state.scheduling_mode:
            data["payment_method"] = self.dd_payment.value
            data["amount"] = float(self.txt_amount.value.replace(",", "."))

        try:
            record = self.controller.submit_service_form(data)
        except ValidationError as ex:
            logger.error(f"Erro ao salvar atendimento: {ex}")
            show_snack(self.page_ref, "Dados inválidos. Verifique o formulário.", is_error=True)
            return
        except IncompleteServiceError as ex:
            show_snack(self.page_ref, ex.message, is_error=True)
            return
        except StorageQuotaExceededError as ex:
            logger.error(ex.message)
            show_alert(
                self.page_ref,
                "Erro ao salvar",
                "Espaço de armazenamento esgotado. Reduza a descrição ou libere espaço e tente de novo.",
            )
            return

        show_snack(self.page_ref, f"Registro de {record.client_name} salvo com sucesso!")
        if self.on_done:
            self.on_done()

    def cancel(self, e):
        self.controller.cancel_form()
        if self.on_done:
            self.on_done()
