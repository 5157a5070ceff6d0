import flet as ft
from scard.models.usuario import StoredUser, UserRole
from scard.services.admin_service import AdminService
from scard.services.exceptions import ProtectedUserError
from scard.services.formatters import format_date
from scard.services.permissions import DEFAULT_EMPLOYEE_PERMISSIONS, EMPLOYEE_AREAS, toggle_permission
from scard.ui.feedback import confirm, show_snack

ROLE_LABELS = {
    UserRole.MASTER.value: ("MASTER", ft.Colors.PURPLE_700),
    UserRole.ADMIN.value: ("ADMIN", ft.Colors.INDIGO_700),
    UserRole.EMPLOYEE.value: ("FUNCIONÁRIO", ft.Colors.GREY_700),
}


class AdminPanel(ft.Column):
    def __init__(self, page: ft.Page, admin_service: AdminService, company_name: str = "Scard System"):
        super().__init__()
        self.page_ref = page
        self.service = admin_service
        self.company_name = company_name
        self.expand = True

        self.editing_user = None
        self.edit_permissions = []

        self.txt_search = ft.TextField(
            label="Buscar usuário",
            prefix_icon=ft.Icons.SEARCH,
            on_change=lambda e: self.load_data(),
            border_radius=10,
        )
        self.list_view = ft.ListView(expand=True, spacing=10, padding=10)

        self.controls = [
            ft.Row([
                ft.Icon(ft.Icons.SHIELD, color=ft.Colors.INDIGO_700),
                ft.Text("Gestão de Usuários", size=20, weight="bold", color=ft.Colors.INDIGO_900),
            ]),
            self.txt_search,
            ft.Divider(),
            self.list_view,
        ]

        # --- Campos do Dialog (Instanciados uma vez para reuso) ---
        self.txt_name = ft.TextField(label="Nome")
        self.txt_email = ft.TextField(label="E-mail")
        self.dd_role = ft.Dropdown(
            label="Cargo",
            options=[
                ft.dropdown.Option(UserRole.EMPLOYEE.value, "Funcionário"),
                ft.dropdown.Option(UserRole.ADMIN.value, "Administrador"),
            ],
            on_change=self.on_role_change,
        )
        self.permissions_column = ft.Column(spacing=0)
        self.txt_new_password = ft.TextField(label="Nova senha (opcional)", can_reveal_password=True, password=True)

    def did_mount(self):
        self.load_data()

    def role_badge(self, role) -> ft.Container:
        text, color = ROLE_LABELS.get(role.value if isinstance(role, UserRole) else role, ROLE_LABELS["employee"])
        return ft.Container(
            content=ft.Text(text, size=10, color=ft.Colors.WHITE, weight="bold"),
            bgcolor=color,
            padding=ft.padding.symmetric(horizontal=8, vertical=2),
            border_radius=10,
        )

    def load_data(self):
        self.list_view.controls.clear()
        for user in self.service.list_users(self.txt_search.value or ""):
            trailing = None
            if AdminService.can_manage(user):
                trailing = ft.PopupMenuButton(
                    icon=ft.Icons.MORE_VERT,
                    items=[
                        ft.PopupMenuItem(text="Editar", icon=ft.Icons.EDIT,
                                         on_click=lambda _, u=user: self.open_dialog(u)),
                        ft.PopupMenuItem(text="Excluir", icon=ft.Icons.DELETE,
                                         on_click=lambda _, u=user: self.confirm_delete(u)),
                    ]
                )
            self.list_view.controls.append(
                ft.Card(
                    content=ft.ListTile(
                        leading=ft.Icon(ft.Icons.PERSON, size=40),
                        title=ft.Row([ft.Text(user.name, weight="bold"), self.role_badge(user.role)]),
                        subtitle=ft.Text(f"{user.email} · desde {format_date(user.created_at)}"),
                        trailing=trailing,
                    )
                )
            )
        self.update()

    # --- Edição ---

    def render_permissions(self):
        is_employee = self.dd_role.value == UserRole.EMPLOYEE.value
        self.permissions_column.controls = [
            ft.Checkbox(
                label=label,
                value=area in self.edit_permissions,
                disabled=not is_employee,
                on_change=lambda _, a=area: self.on_toggle(a),
            )
            for area, label in EMPLOYEE_AREAS
        ]

    def on_toggle(self, area: str):
        self.edit_permissions = toggle_permission(self.edit_permissions, area)

    def on_role_change(self, e):
        self.render_permissions()
        self.page_ref.update()

    def open_dialog(self, user: StoredUser):
        self.editing_user = user
        self.txt_name.value = user.name
        self.txt_email.value = user.email
        self.dd_role.value = user.role.value
        self.edit_permissions = list(user.permissions or DEFAULT_EMPLOYEE_PERMISSIONS)
        self.txt_new_password.value = ""
        self.render_permissions()

        self.dialog = ft.AlertDialog(
            title=ft.Text("Editar Usuário"),
            content=ft.Column([
                self.txt_name,
                self.txt_email,
                self.dd_role,
                ft.Text("Permissões", weight="bold"),
                self.permissions_column,
                ft.Divider(),
                ft.Row([
                    self.txt_new_password,
                    ft.IconButton(ft.Icons.KEY, tooltip="Gerar senha", on_click=self.generate_password),
                    ft.IconButton(ft.Icons.SEND, tooltip="Enviar por e-mail", on_click=self.send_password_email),
                ]),
            ], tight=True, width=450, scroll=ft.ScrollMode.AUTO),
            actions=[
                ft.TextButton("Cancelar", on_click=lambda e: self.page_ref.close(self.dialog)),
                ft.ElevatedButton("Salvar", on_click=self.save_user),
            ],
        )
        self.page_ref.open(self.dialog)

    def generate_password(self, e):
        self.txt_new_password.value = AdminService.generate_password()
        self.txt_new_password.password = False
        self.page_ref.update()

    def send_password_email(self, e):
        if not self.txt_new_password.value or not self.editing_user:
            return
        self.page_ref.launch_url(
            AdminService.password_reset_mailto(self.editing_user, self.txt_new_password.value, self.company_name)
        )

    def save_user(self, e):
        if not self.txt_name.value or not self.txt_email.value:
            self.txt_name.error_text = "Nome e e-mail obrigatórios"
            self.page_ref.update()
            return
        try:
            self.service.update_user(
                self.editing_user.id,
                name=self.txt_name.value,
                email=self.txt_email.value,
                role=UserRole(self.dd_role.value),
                permissions=self.edit_permissions,
                new_password=self.txt_new_password.value,
            )
        except ProtectedUserError as ex:
            show_snack(self.page_ref, ex.message, is_error=True)
            return

        self.page_ref.close(self.dialog)
        self.load_data()
        show_snack(self.page_ref, "Dados do usuário atualizados com sucesso!")

    def confirm_delete(self, user: StoredUser):
        def do_delete():
            try:
                self.service.delete_user(user.id)
            except ProtectedUserError as ex:
                show_snack(self.page_ref, ex.message, is_error=True)
                return
            self.load_data()
            show_snack(self.page_ref, "Usuário excluído.")

        confirm(self.page_ref, "Excluir Usuário", f"Tem certeza que deseja excluir {user.name}?", do_delete)
