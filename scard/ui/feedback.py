import flet as ft


def show_snack(page: ft.Page, message: str, is_error: bool = False):
    snack = ft.SnackBar(
        content=ft.Text(message, color=ft.Colors.WHITE),
        bgcolor=ft.Colors.RED_600 if is_error else ft.Colors.GREEN_700,
    )
    page.open(snack)


def show_alert(page: ft.Page, title: str, message: str):
    """Aviso bloqueante (precisa ser fechado pelo usuário)."""
    dlg = ft.AlertDialog(
        modal=True,
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[ft.TextButton("OK", on_click=lambda e: page.close(dlg))],
    )
    page.open(dlg)


def confirm(page: ft.Page, title: str, message: str, on_confirm, confirm_text: str = "Excluir"):
    def do_confirm(e):
        page.close(dlg)
        on_confirm()

    dlg = ft.AlertDialog(
        title=ft.Text(title),
        content=ft.Text(message),
        actions=[
            ft.TextButton("Cancelar", on_click=lambda e: page.close(dlg)),
            ft.TextButton(confirm_text, on_click=do_confirm, style=ft.ButtonStyle(color=ft.Colors.RED)),
        ],
        actions_alignment=ft.MainAxisAlignment.END,
    )
    page.open(dlg)
