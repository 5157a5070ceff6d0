"""UI feedback helpers against a minimal page double."""

import flet as ft

from scard.ui.feedback import show_alert, show_snack


class RecordingPage:
    def __init__(self):
        self.overlay = []
        self.opened = []

    def open(self, control):
        self.opened.append(control)

    def close(self, control):
        self.opened.remove(control)

    def update(self):
        pass


def test_snack_does_not_pile_up_in_overlay():
    page = RecordingPage()
    for _ in range(5):
        show_snack(page, "Salvo!")
    assert page.overlay == []
    assert len(page.opened) == 5
    assert all(isinstance(c, ft.SnackBar) for c in page.opened)


def test_error_snack_is_red():
    page = RecordingPage()
    show_snack(page, "Falhou", is_error=True)
    assert page.opened[0].bgcolor == ft.Colors.RED_600


def test_alert_is_modal():
    page = RecordingPage()
    show_alert(page, "Erro ao salvar", "Tente uma imagem menor.")
    dialog = page.opened[0]
    assert isinstance(dialog, ft.AlertDialog)
    assert dialog.modal is True
