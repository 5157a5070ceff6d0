import logging
import flet as ft
from scard.data.local_storage import LocalStorage
from scard.models.settings import Theme
from scard.models.usuario import Area, User
from scard.services.admin_service import AdminService
from scard.services.app_controller import AppController
from scard.services.auth_service import AuthService
from scard.services.exceptions import PermissionDeniedError
from scard.ui.feedback import show_alert
from scard.ui.pages.login_page import LoginPage
from scard.ui.widgets.admin_panel import AdminPanel
from scard.ui.widgets.agenda_view import AgendaView
from scard.ui.widgets.cash_flow_view import CashFlowView
from scard.ui.widgets.dashboard_view import DashboardView
from scard.ui.widgets.service_form import ServiceForm
from scard.ui.widgets.service_list import ServiceList
from scard.ui.widgets.settings_dialog import SettingsDialog

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("Main")

# Ordem das abas: (área, rótulo, ícone)
TABS = [
    (Area.AGENDA.value, "Agenda", ft.Icons.CALENDAR_MONTH),
    (Area.LIST.value, "Histórico", ft.Icons.LIST),
    (Area.CASHFLOW.value, "Fluxo de Caixa", ft.Icons.COMPARE_ARROWS),
    (Area.DASHBOARD.value, "Resumo Financeiro", ft.Icons.DASHBOARD),
    (Area.ADMIN.value, "Usuários", ft.Icons.ADMIN_PANEL_SETTINGS),
]


def main(page: ft.Page):
    page.title = "Scard System"

    try:
        storage = LocalStorage()
    except Exception as e:
        logger.error(f"Erro de Setup: {e}")
        page.add(ft.Text(f"Erro de Setup: {e}", color="red"))
        return

    auth = AuthService(storage)
    controller = AppController(storage)
    admin_service = AdminService(storage)
    # Um único dialog (os FilePickers ficam no overlay da página)
    settings_dialog = SettingsDialog(page, controller, on_saved=lambda: page.go("/"))

    def apply_theme():
        is_dark = controller.state.settings.theme == Theme.DARK
        page.theme_mode = ft.ThemeMode.DARK if is_dark else ft.ThemeMode.LIGHT

    def on_login_success(user: User):
        controller.activate_session(user)
        page.go("/")

    def route_change(route):
        page.views.clear()

        if page.route == "/login":
            page.theme_mode = ft.ThemeMode.LIGHT
            page.views.append(
                ft.View(
                    "/login",
                    [LoginPage(page, auth, on_login_success=on_login_success)],
                    vertical_alignment=ft.MainAxisAlignment.CENTER,
                    horizontal_alignment=ft.CrossAxisAlignment.CENTER
                )
            )

        elif page.route == "/":
            current_user = auth.current_user
            if not current_user:
                page.go("/login")
                return
            page.views.append(build_main_view(current_user))
            apply_theme()

        page.update()

    def build_main_view(current_user: User) -> ft.View:
        settings = controller.state.settings

        # --- Abas permitidas ---
        tab_defs = [t for t in TABS if controller.can_access(t[0])]
        tab_areas = [t[0] for t in tab_defs]

        def open_form():
            """Mostra o formulário no lugar das abas."""
            form_view.visible = True
            tabs_control.visible = False
            page.update()
            form_view.load_from_state()

        def close_form():
            form_view.visible = False
            tabs_control.visible = True
            go_to(controller.state.active_area, refresh=True)

        def go_to(area, refresh=False):
            """Navegação programática: sem permissão mostra aviso bloqueante."""
            try:
                controller.navigate(area)
            except PermissionDeniedError as ex:
                show_alert(page, "Acesso negado", ex.message)
                return
            tabs_control.selected_index = tab_areas.index(controller.state.active_area)
            if refresh:
                reload_views()
            page.update()

        def reload_views():
            for view in views.values():
                if view.page:
                    view.load_data()

        # --- Callbacks do formulário ---
        def new_schedule():
            controller.start_new_schedule()
            open_form()

        def new_service(e=None):
            controller.start_new_service()
            open_form()

        def finish(record):
            controller.start_finishing(record)
            open_form()

        def edit_schedule(record):
            controller.start_editing_schedule(record)
            open_form()

        def edit_history(record):
            controller.start_editing_history(record)
            open_form()

        # --- Instanciando as Views ---
        form_view = ServiceForm(page, controller, on_done=close_form)
        form_view.visible = False

        factories = {
            Area.AGENDA.value: lambda: AgendaView(page, controller, on_new=new_schedule,
                                                  on_finish=finish, on_edit=edit_schedule),
            Area.LIST.value: lambda: ServiceList(page, controller, on_edit_click=edit_history),
            Area.CASHFLOW.value: lambda: CashFlowView(page, controller),
            Area.DASHBOARD.value: lambda: DashboardView(page, controller),
            Area.ADMIN.value: lambda: AdminPanel(page, admin_service, settings.company_name),
        }
        views = {area: factories[area]() for area in tab_areas}

        def on_tab_change(e):
            area = tab_areas[tabs_control.selected_index]
            go_to(area)
            views[area].load_data()

        tabs_control = ft.Tabs(
            tabs=[ft.Tab(text=label, icon=icon, content=views[area]) for area, label, icon in tab_defs],
            selected_index=tab_areas.index(controller.state.active_area) if controller.state.active_area in tab_areas else 0,
            expand=True,
            animation_duration=300,
            on_change=on_tab_change
        )

        if not tab_defs:
            tabs_control = ft.Container(
                content=ft.Text("Seu usuário não tem acesso a nenhuma área. Fale com o administrador."),
                padding=30,
            )

        actions = [
            ft.IconButton(ft.Icons.ADD, tooltip="Novo Atendimento", on_click=new_service),
            ft.IconButton(ft.Icons.SETTINGS, tooltip="Configurar", on_click=lambda e: settings_dialog.open()),
            ft.IconButton(ft.Icons.LOGOUT, tooltip="Sair", on_click=logout_click),
        ]
        if not controller.can_access(Area.AGENDA):
            actions.pop(0)

        leading = None
        if settings.logo:
            leading = ft.Container(
                content=ft.Image(src_base64=settings.logo.split(",", 1)[-1], width=36, height=36, fit=ft.ImageFit.COVER),
                padding=8,
            )

        return ft.View(
            "/",
            [
                ft.AppBar(
                    leading=leading,
                    title=ft.Text(f"{settings.company_name} · Olá, {current_user.name}"),
                    bgcolor=ft.Colors.INDIGO_700,
                    color=ft.Colors.WHITE,
                    actions=actions,
                ),
                form_view,
                tabs_control,
                ft.Text("Scard System v1.0.0", size=10, color=ft.Colors.GREY_500),
            ]
        )

    def view_pop(view):
        page.views.pop()
        top_view = page.views[-1]
        page.go(top_view.route)

    def logout_click(e):
        auth.logout()
        controller.clear_session()
        page.go("/login")

    page.on_route_change = route_change
    page.on_view_pop = view_pop

    # Sessão salva leva direto para a tela principal
    restored = auth.restore_session()
    if restored:
        controller.activate_session(restored)
        page.go("/")
    else:
        page.go("/login")


if __name__ == "__main__":
    ft.app(target=main)
