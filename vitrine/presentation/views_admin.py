# vitrine/presentation/views_admin.py
"""
Views para o painel de administração (ADMIN/SUPERADMIN) e para a gestão
de usuários (somente SUPERADMIN).
"""
from django.contrib import messages
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views import View

from vitrine.core import dependency_injection as di
from vitrine.core.authorization import View as Screen
from vitrine.core.entities import OrderStatus, Role
from vitrine.core.exceptions import ForbiddenActionError, StorefrontError

from .forms import OrderStatusForm, ProductForm, UserRoleForm
from .mixins import QueryStateSessionMixin, StorefrontViewMixin
from .views import ORDER_SORT_OPTIONS


def dashboard_url(tab='orders'):
    return f"{reverse(Screen.ADMIN_DASHBOARD.value)}?tab={tab}"


# ====================================================================
# DASHBOARD
# ====================================================================

class AdminDashboardView(StorefrontViewMixin, QueryStateSessionMixin, View):
    """
    Painel com duas abas: pedidos de todos os clientes e produtos do catálogo.
    Cada aba guarda a própria consulta na sessão.
    """
    template_name = 'admin/dashboard.html'
    required_view = Screen.ADMIN_DASHBOARD

    def get(self, request):
        tab = request.GET.get('tab', 'orders')
        context = {
            'tab': tab,
            'status_choices': [s.value for s in OrderStatus],
        }

        if tab == 'products':
            state = self.get_query_state(
                request, name='admin_produtos', page_size_setting='VITRINE_ADMIN_PRODUCTS_PAGE_SIZE',
                allowed_filters=('search', 'category'),
            )
            catalog = di.get_catalog_use_case(self.session_context)
            page = self.load_page(request, catalog.list_products, state, name='admin_produtos')
            context.update({
                'products': page.items if page else [],
                'product_form': ProductForm(),
            })
        else:
            state = self.get_query_state(
                request, name='admin_pedidos', default_sort='createdAt,desc', allowed_filters=(),
            )
            controller = di.get_order_controller(self.session_context)
            page = self.load_page(request, controller.list_all_orders, state, name='admin_pedidos')
            context.update({
                'orders': page.items if page else [],
                'sort_options': ORDER_SORT_OPTIONS,
            })

        context.update({'page': page, 'query': state})
        return render(request, self.template_name, context)


# ====================================================================
# GERENCIAMENTO DE PEDIDOS
# ====================================================================

class AdminOrderStatusView(StorefrontViewMixin, View):
    """
    View para atualizar o status de um pedido.
    """
    required_view = Screen.ADMIN_DASHBOARD

    def post(self, request, pk):
        form = OrderStatusForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Status inválido.")
            return redirect(dashboard_url('orders'))

        controller = di.get_order_controller(self.session_context)
        try:
            order = controller.set_status(
                pk, form.cleaned_data['status'], form.cleaned_data.get('current_status') or None
            )
            messages.success(request, f"Status do Pedido #{pk} atualizado para {order.status.value} com sucesso.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao atualizar status: {e.message}")

        return redirect(dashboard_url('orders'))


# ====================================================================
# GERENCIAMENTO DE PRODUTOS
# ====================================================================

class AdminProductCreateView(StorefrontViewMixin, View):
    required_view = Screen.ADMIN_DASHBOARD

    def post(self, request):
        form = ProductForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Verifique os campos do produto.")
            return redirect(dashboard_url('products'))

        try:
            product = di.get_catalog_admin_use_case(self.session_context).create_product(form.cleaned_data)
            messages.success(request, f"Produto '{product.name}' criado.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao criar produto: {e.message}")

        return redirect(dashboard_url('products'))


class AdminProductUpdateView(StorefrontViewMixin, View):
    """
    Formulário de edição de um produto existente.
    """
    template_name = 'admin/product_form.html'
    required_view = Screen.ADMIN_DASHBOARD

    def get(self, request, pk):
        try:
            product = di.get_catalog_use_case(self.session_context).get_product(pk)
        except StorefrontError as e:
            messages.error(request, e.message)
            return redirect(dashboard_url('products'))

        form = ProductForm(initial={
            'name': product.name,
            'description': product.description,
            'price': product.price,
            'category': product.category,
            'stock': product.stock,
            'image_url': product.image_url or '',
        })
        return render(request, self.template_name, {'form': form, 'product_id': pk, 'product': product})

    def post(self, request, pk):
        form = ProductForm(request.POST)
        if not form.is_valid():
            return render(request, self.template_name, {'form': form, 'product_id': pk})

        try:
            di.get_catalog_admin_use_case(self.session_context).update_product(pk, form.cleaned_data)
            messages.success(request, "Produto atualizado.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao atualizar produto: {e.message}")

        return redirect(dashboard_url('products'))


class AdminProductDeleteView(StorefrontViewMixin, View):
    required_view = Screen.ADMIN_DASHBOARD

    def post(self, request, pk):
        try:
            di.get_catalog_admin_use_case(self.session_context).delete_product(pk)
            messages.success(request, "Produto removido.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao remover produto: {e.message}")

        return redirect(dashboard_url('products'))


# ====================================================================
# GERENCIAMENTO DE USUÁRIOS (SUPERADMIN)
# ====================================================================

class SuperAdminUsersView(StorefrontViewMixin, QueryStateSessionMixin, View):
    template_name = 'admin/users.html'
    required_view = Screen.SUPERADMIN_USERS
    query_name = 'usuarios'
    page_size_setting = 'VITRINE_USERS_PAGE_SIZE'
    allowed_filters = ('role',)

    def get(self, request):
        state = self.get_query_state(request)
        use_case = di.get_user_admin_use_case(self.session_context)
        page = self.load_page(request, use_case.list_users, state)

        context = {
            'page': page,
            'users': page.items if page else [],
            'query': state,
            'role_choices': [r.value for r in Role.assignable()],
        }
        return render(request, self.template_name, context)


class UserRoleUpdateView(StorefrontViewMixin, View):
    required_view = Screen.SUPERADMIN_USERS

    def post(self, request, pk):
        form = UserRoleForm(request.POST)
        if not form.is_valid():
            messages.error(request, "Papel inválido.")
            return redirect(Screen.SUPERADMIN_USERS.value)

        try:
            di.get_user_admin_use_case(self.session_context).change_role(pk, form.cleaned_data['role'])
            messages.success(request, f"Papel do usuário #{pk} alterado para {form.cleaned_data['role']}.")
        except ForbiddenActionError:
            messages.error(request, "Você não pode alterar o papel da própria conta.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao alterar papel: {e.message}")

        return redirect(Screen.SUPERADMIN_USERS.value)


class UserDeleteView(StorefrontViewMixin, View):
    required_view = Screen.SUPERADMIN_USERS

    def post(self, request, pk):
        try:
            di.get_user_admin_use_case(self.session_context).delete_user(pk)
            messages.success(request, f"Usuário #{pk} removido.")
        except ForbiddenActionError:
            messages.error(request, "Você não pode apagar a própria conta.")
        except StorefrontError as e:
            messages.error(request, f"Erro ao remover usuário: {e.message}")

        return redirect(Screen.SUPERADMIN_USERS.value)
