# vitrine/presentation/views_auth.py
"""
Views para autenticação e registro de usuários.
A verificação de credenciais é do backend; aqui só guardamos o token na sessão.
"""

from django.contrib import messages
from django.shortcuts import redirect, render
from django.views import View
from django.views.decorators.http import require_POST

from vitrine.core import dependency_injection as di
from vitrine.core.authorization import View as Screen
from vitrine.core.exceptions import RequestError, StorefrontError

from .forms import LoginForm, SignupForm
from .mixins import StorefrontViewMixin
from .session import clear_session, save_session_context


class LoginView(StorefrontViewMixin, View):
    """
    View para a página de login.
    """
    template_name = 'auth/login.html'
    required_view = Screen.LOGIN

    def get(self, request):
        if self.principal.is_authenticated:
            return redirect(Screen.HOME.value)
        return render(request, self.template_name, {'form': LoginForm()})

    def post(self, request):
        form = LoginForm(request.POST)
        if form.is_valid():
            auth = di.get_auth_use_case(self.session_context)
            try:
                principal = auth.login(form.cleaned_data['email'], form.cleaned_data['password'])
            except RequestError as e:
                if e.status_code in (400, 401):
                    messages.error(request, 'E-mail ou senha inválidos.')
                else:
                    messages.error(request, e.message)
            except StorefrontError as e:
                messages.error(request, e.message)
            else:
                # Nova sessão: consultas de outro principal não sobrevivem ao login
                request.session.flush()
                save_session_context(request, self.session_context)
                messages.success(request, f'Bem-vindo(a), {principal.name or principal.email}!')
                return redirect(Screen.HOME.value)

        return render(request, self.template_name, {'form': form})


class SignupView(StorefrontViewMixin, View):
    """
    View para a página de registro de usuário. O cadastro já deixa o usuário logado.
    """
    template_name = 'auth/signup.html'
    required_view = Screen.SIGNUP

    def get(self, request):
        return render(request, self.template_name, {'form': SignupForm()})

    def post(self, request):
        form = SignupForm(request.POST)
        if form.is_valid():
            auth = di.get_auth_use_case(self.session_context)
            try:
                auth.signup(form.cleaned_data['name'], form.cleaned_data['email'], form.cleaned_data['password'])
            except StorefrontError as e:
                messages.error(request, e.message)
            else:
                request.session.flush()
                save_session_context(request, self.session_context)
                messages.success(request, 'Cadastro realizado com sucesso!')
                return redirect(Screen.HOME.value)

        return render(request, self.template_name, {'form': form})


@require_POST
def logout_view(request):
    """
    View para a saída do usuário.
    """
    clear_session(request)
    messages.info(request, "Você saiu do sistema.")
    return redirect(Screen.LOGIN.value)
