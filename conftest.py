# conftest.py (na raiz do projeto)

import logging

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from empresas.models import Empresa, UsuarioEmpresa


# =============================================================================
# EMPRESAS (TENANTS) E USUÁRIOS
# =============================================================================

@pytest.fixture
def empresa(db):
    return Empresa.objects.create(cnpj_raiz="99666666000191", nome="Indústria Alfa", uf="SP")


@pytest.fixture
def empresa_b(db):
    return Empresa.objects.create(cnpj_raiz="99777777000191", nome="Comércio Beta", uf="RJ")


def _criar_usuario(username: str, empresa: Empresa):
    user = get_user_model().objects.create_user(username=username, password="x")
    UsuarioEmpresa.objects.create(user=user, empresa=empresa)
    return user


@pytest.fixture
def user(empresa):
    return _criar_usuario("fiscal_alfa", empresa)


@pytest.fixture
def user_b(empresa_b):
    return _criar_usuario("fiscal_beta", empresa_b)


# =============================================================================
# CLIENTES HTTP (JWT)
# =============================================================================

def _client_jwt(user) -> APIClient:
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def api_client(user):
    return _client_jwt(user)


@pytest.fixture
def api_client_b(user_b):
    return _client_jwt(user_b)


# =============================================================================
# LOGS
# =============================================================================

class _ListHandler(logging.Handler):
    """
    Handler em memória para o logger 'erp.fiscal', sem depender do caplog
    (que pode ser afetado pela configuração de LOGGING em JSON).
    """

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def eventos(self):
        return [getattr(r, "event", None) for r in self.records]


@pytest.fixture
def fiscal_logs():
    logger = logging.getLogger("erp.fiscal")
    handler = _ListHandler()
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield handler
    finally:
        logger.setLevel(old_level)
        logger.removeHandler(handler)
