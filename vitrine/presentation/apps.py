import os

from django.apps import AppConfig


class PresentationConfig(AppConfig):
    name = 'vitrine.presentation'
    label = 'presentation' # Define um label para evitar conflitos de nomes
    verbose_name = 'Loja e Painéis'
    # Pacote sem __init__.py: o caminho precisa ser explícito
    path = os.path.dirname(os.path.abspath(__file__))
