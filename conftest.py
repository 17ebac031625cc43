import os

import django


def pytest_configure():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'vitrine.settings')
    django.setup()

    # Mesmo ambiente do test runner do Django: response.context, e-mail em memória
    from django.test.utils import setup_test_environment
    setup_test_environment()
