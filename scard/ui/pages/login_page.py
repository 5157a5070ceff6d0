import flet as ft
from scard.services.auth_service import AuthService
from scard.services.exceptions import ScardError


class LoginPage(ft.Container):
    """Login, cadastro e recuperação de senha. O logo alterna o modo Master."""

    def __init__(self, page: ft.Page, auth_service: AuthService, on_login_success):
        super().__init__()
        self.page_ref = page
        self.auth_service = auth_service
        self.on_login_success = on_login_success

        self.mode = "login"  # login | register | forgot
        self.is_master_mode = False

        self.padding = 30
        self.alignment = ft.alignment.center

        # --- Criação dos Controles ---
        self.btn_logo = ft.IconButton(
            icon=ft.Icons.AUTO_AWESOME,
            icon_size=60,
            icon_color=ft.Colors.INDIGO_600,
            tooltip="Acesso Restrito",
            on_click=self.toggle_master_mode,
        )
        self.lbl_title = ft.Text("Scard System", size=30, weight="bold", color=ft.Colors.INDIGO_900)
        self.lbl_subtitle = ft.Text("Controle e Gestão Inteligente", size=14, color=ft.Colors.GREY_600)
        self.lbl_form_title = ft.Text("Acesse sua conta", size=18, weight="bold")

        self.txt_name = ft.TextField(label="Seu nome", prefix_icon=ft.Icons.PERSON, visible=False)
        self.txt_email = ft.TextField(
            label="E-mail",
            prefix_icon=ft.Icons.EMAIL,
            autofocus=True,
            on_submit=lambda e: self.txt_pass.focus()
        )
        self.txt_pass = ft.TextField(
            label="Senha",
            password=True,
            can_reveal_password=True,
            prefix_icon=ft.Icons.LOCK,
            on_submit=self.handle_action
        )

        self.lbl_error = ft.Text("", color=ft.Colors.RED_600, visible=False)
        self.lbl_success = ft.Text("", color=ft.Colors.GREEN_700, visible=False, selectable=True)

        self.btn_action = ft.ElevatedButton(
            text="Entrar",
            icon=ft.Icons.LOGIN,
            style=ft.ButtonStyle(
                padding=20,
                shape=ft.RoundedRectangleBorder(radius=8),
                bgcolor=ft.Colors.INDIGO_600,
                color=ft.Colors.WHITE,
            ),
            width=250,
            on_click=self.handle_action
        )
        self.btn_register = ft.TextButton("Criar conta", on_click=lambda e: self.set_mode("register"))
        self.btn_forgot = ft.TextButton("Esqueci minha senha", on_click=lambda e: self.set_mode("forgot"))
        self.btn_back = ft.TextButton("Voltar ao login", on_click=lambda e: self.set_mode("login"), visible=False)

        self.content = ft.Column(
            horizontal_alignment=ft.CrossAxisAlignment.CENTER,
            alignment=ft.MainAxisAlignment.CENTER,
            width=400,
            controls=[
                self.btn_logo,
                self.lbl_title,
                self.lbl_subtitle,
                ft.Divider(height=30, color=ft.Colors.TRANSPARENT),
                self.lbl_form_title,
                self.lbl_error,
                self.lbl_success,
                self.txt_name,
                self.txt_email,
                self.txt_pass,
                ft.Divider(height=20, color=ft.Colors.TRANSPARENT),
                self.btn_action,
                ft.Row([self.btn_register, self.btn_forgot], alignment=ft.MainAxisAlignment.CENTER),
                self.btn_back,
            ]
        )

    def clear_messages(self):
        self.lbl_error.visible = False
        self.lbl_success.visible = False

    def toggle_master_mode(self, e):
        self.is_master_mode = not self.is_master_mode
        self.txt_email.value = ""
        self.txt_pass.value = ""
        self.set_mode("login")

    def set_mode(self, mode: str):
        self.mode = mode
        self.clear_messages()

        self.txt_name.visible = mode == "register"
        self.txt_pass.visible = mode != "forgot"
        self.btn_register.visible = mode == "login" and not self.is_master_mode
        self.btn_forgot.visible = mode == "login" and not self.is_master_mode
        self.btn_back.visible = mode != "login"

        self.txt_email.label = "Login" if self.is_master_mode else "E-mail"
        self.lbl_title.value = "System Access" if self.is_master_mode else "Scard System"
        self.lbl_subtitle.value = "Painel do Criador" if self.is_master_mode else "Controle e Gestão Inteligente"

        titles = {
            "login": "Autenticação Master" if self.is_master_mode else "Acesse sua conta",
            "register": "Crie sua conta grátis",
            "forgot": "Recuperar Senha",
        }
        labels = {"login": "Entrar", "register": "Cadastrar", "forgot": "Gerar nova senha"}
        self.lbl_form_title.value = titles[mode]
        self.btn_action.text = labels[mode]
        self.update()

    def handle_action(self, e):
        self.clear_messages()
        email = (self.txt_email.value or "").strip()
        password = self.txt_pass.value or ""

        try:
            if self.mode == "login":
                if not email or not password:
                    self.show_error("Preencha todos os campos.")
                    return
                if self.is_master_mode:
                    user = self.auth_service.login_master(email, password)
                else:
                    user = self.auth_service.login(email, password)
                self.on_login_success(user)

            elif self.mode == "register":
                user = self.auth_service.register((self.txt_name.value or "").strip(), email, password)
                self.on_login_success(user)

            elif self.mode == "forgot":
                temp_password = self.auth_service.recover_password(email)
                self.lbl_success.value = f"Sua nova senha temporária é: {temp_password}"
                self.lbl_success.visible = True
                self.update()

        except ScardError as ex:
            self.show_error(ex.message)

    def show_error(self, msg):
        self.lbl_error.value = msg
        self.lbl_error.visible = True
        self.update()
