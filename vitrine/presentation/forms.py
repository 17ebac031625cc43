# vitrine/presentation/forms.py

from django import forms

from vitrine.core.entities import OrderStatus, Role

# --- 1. FORMULÁRIOS DE AUTENTICAÇÃO ---

class LoginForm(forms.Form):
    """
    Formulário simples para login. A verificação da senha é do backend.
    """
    email = forms.EmailField(
        label="E-mail",
        widget=forms.EmailInput(attrs={'placeholder': 'Seu e-mail'})
    )
    password = forms.CharField(
        label="Senha",
        widget=forms.PasswordInput(attrs={'placeholder': 'Sua senha secreta'})
    )


class SignupForm(forms.Form):
    name = forms.CharField(label="Nome", max_length=150)
    email = forms.EmailField(label="E-mail", max_length=254)
    password = forms.CharField(label="Senha", widget=forms.PasswordInput)
    password_confirm = forms.CharField(label="Confirme a Senha", widget=forms.PasswordInput)

    def clean(self):
        # Validação para garantir que as senhas são iguais
        cleaned_data = super().clean()
        password = cleaned_data.get("password")
        password_confirm = cleaned_data.get("password_confirm")

        if password and password_confirm and password != password_confirm:
            self.add_error('password_confirm', "As senhas não coincidem.")

        return cleaned_data


# --- 2. FORMULÁRIOS DO CARRINHO ---

class AddToCartForm(forms.Form):
    quantity = forms.IntegerField(label="Quantidade", min_value=1, initial=1)


class CartQuantityForm(forms.Form):
    """Quantidade absoluta desejada. Abaixo de 1 a view remove a linha."""
    quantity = forms.IntegerField(label="Quantidade")


# --- 3. FORMULÁRIOS ADMINISTRATIVOS ---

class ProductForm(forms.Form):
    """
    Formulário de criação/edição de produto (ADMIN/SUPERADMIN).
    """
    name = forms.CharField(label="Nome", max_length=200)
    description = forms.CharField(label="Descrição", widget=forms.Textarea, required=False)
    price = forms.DecimalField(label="Preço", min_value=0, decimal_places=2)
    category = forms.CharField(label="Categoria", max_length=100, required=False)
    stock = forms.IntegerField(label="Estoque", min_value=0)
    image_url = forms.CharField(label="URL da Imagem", max_length=500, required=False)


class OrderStatusForm(forms.Form):
    STATUS_CHOICES = [(s.value, s.value) for s in OrderStatus]

    status = forms.ChoiceField(choices=STATUS_CHOICES)
    # Status exibido na tela no momento do envio
    current_status = forms.ChoiceField(choices=STATUS_CHOICES, required=False)


class UserRoleForm(forms.Form):
    role = forms.ChoiceField(choices=[(r.value, r.value) for r in Role.assignable()])
