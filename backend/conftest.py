import pytest
from rest_framework.test import APIClient

from cargo.services.commercial_parameters import clear_commercial_parameters_cache


@pytest.fixture(autouse=True)
def _reset_commercial_parameters():
    clear_commercial_parameters_cache()
    yield
    clear_commercial_parameters_cache()


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="ops", email="ops@example.com", password="pass")


@pytest.fixture
def manager(django_user_model):
    return django_user_model.objects.create_user(
        username="manager", email="manager@example.com", password="pass", is_staff=True
    )


@pytest.fixture
def api_client(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def manager_client(manager):
    client = APIClient()
    client.force_authenticate(user=manager)
    return client
