"""
Define as URLs da loja, dos painéis e da API JSON do carrinho.
Os nomes das rotas de página são os mesmos valores do enum View do portão de papéis,
então um redirect do portão resolve direto para a rota.
"""
from django.urls import path

from . import views, views_admin, views_auth

urlpatterns = [
    # ====================================================================
    # 1. ROTAS DE CATÁLOGO (LOJA)
    # ====================================================================
    path('', views.HomeView.as_view(), name='home'),
    path('produtos/', views.ProductListView.as_view(), name='products'),
    path('produtos/<str:pk>/', views.ProductDetailView.as_view(), name='product-detail'),

    # ====================================================================
    # 2. ROTAS DE COMPRA (CARRINHO E CHECKOUT)
    # ====================================================================
    path('carrinho/', views.CartView.as_view(), name='cart'),
    path('carrinho/<str:line_id>/quantidade/', views.CartLineUpdateView.as_view(), name='cart-line-update'),
    path('carrinho/<str:line_id>/remover/', views.CartLineRemoveView.as_view(), name='cart-line-remove'),
    path('checkout/', views.CheckoutView.as_view(), name='checkout'),
    path('meus-pedidos/', views.MyOrdersView.as_view(), name='my-orders'),

    # ====================================================================
    # 3. ROTAS DE AUTENTICAÇÃO
    # ====================================================================
    path('login/', views_auth.LoginView.as_view(), name='login'),
    path('cadastro/', views_auth.SignupView.as_view(), name='signup'),
    path('logout/', views_auth.logout_view, name='logout'),

    # ====================================================================
    # 4. ROTAS ADMINISTRATIVAS
    # ====================================================================
    path('painel/', views_admin.AdminDashboardView.as_view(), name='admin-dashboard'),
    path('painel/pedidos/<str:pk>/status/', views_admin.AdminOrderStatusView.as_view(), name='admin-order-status'),
    path('painel/produtos/novo/', views_admin.AdminProductCreateView.as_view(), name='admin-product-create'),
    path('painel/produtos/<str:pk>/editar/', views_admin.AdminProductUpdateView.as_view(), name='admin-product-update'),
    path('painel/produtos/<str:pk>/remover/', views_admin.AdminProductDeleteView.as_view(), name='admin-product-delete'),

    # Gerenciamento de Usuários (SUPERADMIN)
    path('painel/usuarios/', views_admin.SuperAdminUsersView.as_view(), name='superadmin-users'),
    path('painel/usuarios/<str:pk>/papel/', views_admin.UserRoleUpdateView.as_view(), name='superadmin-user-role'),
    path('painel/usuarios/<str:pk>/remover/', views_admin.UserDeleteView.as_view(), name='superadmin-user-delete'),

    # ====================================================================
    # 5. ROTAS DE API (Django REST Framework)
    # ====================================================================
    path('api/carrinho/', views.CartAPIView.as_view(), name='api-cart'),
    path('api/carrinho/<str:line_id>/', views.CartLineAPIView.as_view(), name='api-cart-line'),
    path('api/checkout/', views.CheckoutAPIView.as_view(), name='api-checkout'),
]
