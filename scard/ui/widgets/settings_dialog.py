import base64
import logging
import mimetypes
from pathlib import Path

import flet as ft
from scard.data.local_storage import StorageQuotaExceededError
from scard.models.settings import AppSettings, CardRates, Theme
from scard.services.app_controller import AppController
from scard.services.backup_service import import_backup, read_backup, write_backup
from scard.services.exceptions import InvalidBackupError
from scard.ui.feedback import confirm, show_alert, show_snack

logger = logging.getLogger("SettingsDialog")


class SettingsDialog:
    """Configurações do estabelecimento + backup manual."""

    def __init__(self, page: ft.Page, controller: AppController, on_saved=None):
        self.page_ref = page
        self.controller = controller
        self.on_saved = on_saved
        self.logo = None

        self.txt_company = ft.TextField(label="Nome do Estabelecimento", hint_text="Ex: Espaço Fran")
        self.txt_template = ft.TextField(
            label="Mensagem de confirmação (WhatsApp)",
            helper_text="Use {nome} e {horario}",
            multiline=True,
            min_lines=2,
        )
        self.sw_dark = ft.Switch(label="Tema escuro")
        self.txt_debit = ft.TextField(label="Taxa Débito (%)", width=150, keyboard_type=ft.KeyboardType.NUMBER)
        self.txt_credit = ft.TextField(label="Taxa Crédito (%)", width=150, keyboard_type=ft.KeyboardType.NUMBER)

        self.img_logo = ft.Image(width=64, height=64, fit=ft.ImageFit.COVER, visible=False)
        self.btn_remove_logo = ft.TextButton("Remover", on_click=self.remove_logo, visible=False)

        # Seletores de arquivo precisam estar no overlay da página
        self.logo_picker = ft.FilePicker(on_result=self.on_logo_picked)
        self.export_picker = ft.FilePicker(on_result=self.on_export_dir_picked)
        self.import_picker = ft.FilePicker(on_result=self.on_import_file_picked)
        page.overlay.extend([self.logo_picker, self.export_picker, self.import_picker])

        self.dialog = None

    def open(self):
        settings = self.controller.state.settings
        self.logo = settings.logo
        self.txt_company.value = settings.company_name
        self.txt_template.value = settings.whatsapp_message_template or ""
        self.sw_dark.value = settings.theme == Theme.DARK
        rates = settings.card_rates
        self.txt_debit.value = str(rates.debit) if rates else ""
        self.txt_credit.value = str(rates.credit) if rates else ""
        self.refresh_logo(update_view=False)

        self.dialog = ft.AlertDialog(
            title=ft.Text("Configurações"),
            content=ft.Column([
                ft.Row([
                    self.img_logo,
                    ft.ElevatedButton(
                        "Carregar Imagem",
                        icon=ft.Icons.UPLOAD,
                        on_click=lambda e: self.logo_picker.pick_files(
                            allow_multiple=False, file_type=ft.FilePickerFileType.IMAGE
                        ),
                    ),
                    self.btn_remove_logo,
                ]),
                self.txt_company,
                self.txt_template,
                self.sw_dark,
                ft.Row([self.txt_debit, self.txt_credit]),
                ft.Divider(),
                ft.Text("Backup", weight="bold"),
                ft.Row([
                    ft.OutlinedButton("Exportar", icon=ft.Icons.DOWNLOAD,
                                      on_click=lambda e: self.export_picker.get_directory_path()),
                    ft.OutlinedButton("Importar", icon=ft.Icons.RESTORE,
                                      on_click=lambda e: self.import_picker.pick_files(allowed_extensions=["json"])),
                ]),
            ], tight=True, width=450, scroll=ft.ScrollMode.AUTO),
            actions=[
                ft.TextButton("Cancelar", on_click=self.close),
                ft.ElevatedButton("Salvar Alterações", on_click=self.save),
            ],
        )
        self.page_ref.open(self.dialog)

    def close(self, e=None):
        if self.dialog:
            self.page_ref.close(self.dialog)

    # --- Logo ---

    def refresh_logo(self, update_view=True):
        self.img_logo.visible = bool(self.logo)
        self.btn_remove_logo.visible = bool(self.logo)
        if self.logo:
            self.img_logo.src_base64 = self.logo.split(",", 1)[-1]
        if update_view and self.dialog:
            self.page_ref.update()

    def on_logo_picked(self, e: ft.FilePickerResultEvent):
        if not e.files:
            return
        path = Path(e.files[0].path)
        mime = mimetypes.guess_type(path.name)[0] or "image/png"
        encoded = base64.b64encode(path.read_bytes()).decode("ascii")
        self.logo = f"data:{mime};base64,{encoded}"
        self.refresh_logo()

    def remove_logo(self, e):
        self.logo = None
        self.refresh_logo()

    # --- Salvar ---

    def parse_rate(self, field: ft.TextField) -> float:
        raw = (field.value or "").replace(",", ".").strip()
        return float(raw) if raw else 0.0

    def save(self, e):
        try:
            debit = self.parse_rate(self.txt_debit)
            credit = self.parse_rate(self.txt_credit)
        except ValueError:
            show_snack(self.page_ref, "Taxas inválidas.", is_error=True)
            return

        has_rates = bool(self.txt_debit.value or self.txt_credit.value)
        settings = AppSettings(
            company_name=self.txt_company.value or "",
            logo=self.logo,
            whatsapp_message_template=self.txt_template.value or None,
            theme=Theme.DARK if self.sw_dark.value else Theme.LIGHT,
            card_rates=CardRates(debit=debit, credit=credit) if has_rates else None,
        )
        try:
            self.controller.save_settings(settings)
        except StorageQuotaExceededError as ex:
            logger.error(ex.message)
            show_alert(
                self.page_ref,
                "Erro ao salvar",
                "A imagem pode ser muito grande. Tente uma imagem menor.",
            )
            return

        self.close()
        if self.on_saved:
            self.on_saved()

    # --- Backup ---

    def on_export_dir_picked(self, e: ft.FilePickerResultEvent):
        if not e.path:
            return
        path = write_backup(self.controller, e.path)
        show_snack(self.page_ref, f"Backup salvo em {path.name}")

    def on_import_file_picked(self, e: ft.FilePickerResultEvent):
        if not e.files:
            return
        path = e.files[0].path

        def do_import():
            try:
                import_backup(self.controller, read_backup(path))
            except InvalidBackupError as ex:
                show_alert(self.page_ref, "Backup inválido", ex.message)
                return
            except StorageQuotaExceededError as ex:
                show_alert(self.page_ref, "Erro ao importar", ex.message)
                return
            self.close()
            show_snack(self.page_ref, "Backup restaurado com sucesso!")
            if self.on_saved:
                self.on_saved()

        confirm(
            self.page_ref,
            "Restaurar Backup",
            "Isso substituirá TODOS os atendimentos, lançamentos e configurações atuais. Continuar?",
            do_import,
            confirm_text="Restaurar",
        )
