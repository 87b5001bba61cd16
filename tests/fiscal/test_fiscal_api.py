# tests/fiscal/test_fiscal_api.py

import uuid

import pytest
from rest_framework.test import APIClient

from fiscal.models import ObrigacaoFiscal

pytestmark = pytest.mark.django_db

BASE = "/api/v1/fiscal"


def test_sem_token_401(empresa):
    resp = APIClient().get(f"{BASE}/obrigacoes/", {"ano": 2024, "mes": 1})
    assert resp.status_code == 401


def test_usuario_sem_empresa_403(django_user_model):
    from rest_framework_simplejwt.tokens import RefreshToken

    solto = django_user_model.objects.create_user(username="solto", password="x")
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {RefreshToken.for_user(solto).access_token}")

    resp = client.get(f"{BASE}/obrigacoes/", {"ano": 2024, "mes": 1})
    assert resp.status_code == 403


# =============================================================================
# OBRIGAÇÕES / CALENDÁRIO
# =============================================================================

def test_gerar_obrigacoes_idempotente(api_client):
    r1 = api_client.post(f"{BASE}/obrigacoes/gerar/", {"ano": 2024, "mes": 1}, format="json")
    r2 = api_client.post(f"{BASE}/obrigacoes/gerar/", {"ano": 2024, "mes": 1}, format="json")

    assert r1.status_code == 201, r1.content
    assert {o["id"] for o in r1.json()} == {o["id"] for o in r2.json()}
    assert ObrigacaoFiscal.objects.count() == len(r1.json())


@pytest.mark.parametrize("payload", [{"ano": 2019, "mes": 1}, {"ano": 2024, "mes": 13}, {"ano": 2024}])
def test_gerar_obrigacoes_periodo_invalido(api_client, payload):
    resp = api_client.post(f"{BASE}/obrigacoes/gerar/", payload, format="json")
    assert resp.status_code == 400


def test_status_obrigacao_e_isolamento(api_client, api_client_b):
    ob = api_client.post(
        f"{BASE}/obrigacoes/gerar/", {"ano": 2024, "mes": 1, "codigos": ["SPED_FISCAL"]}, format="json"
    ).json()[0]

    resp = api_client_b.patch(f"{BASE}/obrigacoes/{ob['id']}/status/", {"status": "GENERATING"}, format="json")
    assert resp.status_code == 404

    resp = api_client.patch(f"{BASE}/obrigacoes/{ob['id']}/status/", {"status": "ACCEPTED"}, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "FISCAL_2002"

    resp = api_client.patch(
        f"{BASE}/obrigacoes/{ob['id']}/status/",
        {"status": "TRANSMITTED", "numero_recibo": "REC-9"},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["transmitida_em"] is not None


def test_calendario(api_client):
    resp = api_client.get(f"{BASE}/calendario/", {"ano": 2024, "mes": 1})
    assert resp.status_code == 200
    sped = next(i for i in resp.json() if i["codigo"] == "SPED_FISCAL")
    assert sped["data_vencimento"] == "2024-02-20"
    assert sped["status"] == "NOT_GENERATED"
    assert sped["gerada"] is False


# =============================================================================
# APURAÇÃO
# =============================================================================

def test_fluxo_de_apuracao(api_client):
    apuracao = api_client.post(
        f"{BASE}/apuracoes/", {"tipo_imposto": "ICMS", "ano": 2024, "mes": 1}, format="json"
    ).json()

    item = {
        "tipo_documento": "NFE",
        "valor_base": "2777.78",
        "aliquota": "18",
        "valor_imposto": "500.00",
        "natureza": "CREDIT",
    }
    resp = api_client.post(f"{BASE}/apuracoes/{apuracao['id']}/itens/", item, format="json")
    assert resp.status_code == 201, resp.content

    item.update(valor_base="1000.00", valor_imposto="180.00", natureza="DEBIT")
    resp = api_client.post(f"{BASE}/apuracoes/{apuracao['id']}/itens/", item, format="json")
    assert resp.json()["apuracao"]["saldo"] == "320.00"

    resp = api_client.post(
        f"{BASE}/apuracoes/fechar/", {"tipo_imposto": "ICMS", "ano": 2024, "mes": 1}, format="json"
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "CLOSED"

    resp = api_client.post(f"{BASE}/apuracoes/{apuracao['id']}/itens/", item, format="json")
    assert resp.status_code == 409
    assert resp.json()["code"] == "FISCAL_2001"

    resumo = api_client.get(f"{BASE}/apuracoes/resumo/", {"ano": 2024, "mes": 1}).json()
    assert resumo["saldo"] == "320.00"


def test_item_com_imposto_negativo(api_client):
    apuracao = api_client.post(
        f"{BASE}/apuracoes/", {"tipo_imposto": "ICMS", "ano": 2024, "mes": 1}, format="json"
    ).json()
    resp = api_client.post(
        f"{BASE}/apuracoes/{apuracao['id']}/itens/",
        {"tipo_documento": "AJUSTE", "valor_base": "0", "aliquota": "0", "valor_imposto": "-1", "natureza": "DEBIT"},
        format="json",
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "FISCAL_3003"


# =============================================================================
# DIFAL / ICMS-ST
# =============================================================================

def test_difal_api(api_client, api_client_b):
    payload = {
        "tipo_documento": "NFE",
        "uf_origem": "SP",
        "uf_destino": "RJ",
        "valor_produto": "1000.00",
        "aliquota_icms_origem": "12",
        "aliquota_icms_destino": "18",
        "aliquota_fcp": "2",
    }
    resp = api_client.post(f"{BASE}/difal/", payload, format="json")
    assert resp.status_code == 201, resp.content
    assert resp.json()["valor_total"] == "80.00"

    assert len(api_client.get(f"{BASE}/difal/").json()) == 1
    assert api_client_b.get(f"{BASE}/difal/").json() == []


@pytest.mark.parametrize(
    "campo,valor",
    [("uf_destino", "XX"), ("aliquota_fcp", "11"), ("aliquota_icms_destino", "101"), ("valor_produto", "0")],
)
def test_difal_api_validacao(api_client, campo, valor):
    payload = {
        "tipo_documento": "NFE",
        "uf_origem": "SP",
        "uf_destino": "RJ",
        "valor_produto": "1000.00",
        "aliquota_icms_origem": "12",
        "aliquota_icms_destino": "18",
        campo: valor,
    }
    assert api_client.post(f"{BASE}/difal/", payload, format="json").status_code == 400


def test_difal_limit_fora_da_faixa(api_client):
    assert api_client.get(f"{BASE}/difal/", {"limit": 101}).status_code == 400


def test_icms_st_api(api_client):
    resp = api_client.post(
        f"{BASE}/icms-st/",
        {"valor_produto": "1000", "aliquota_icms": "12", "mva": "40", "aliquota_interna_st": "18"},
        format="json",
    )
    assert resp.status_code == 200
    assert resp.json()["valor_icms_st"] == "132.00"


# =============================================================================
# NFS-e
# =============================================================================

def _payload_nfse(**kw):
    payload = {
        "cliente_id": str(uuid.uuid4()),
        "codigo_servico": "01.07",
        "descricao": "Suporte técnico",
        "data_competencia": "2024-01-15",
        "valor_servico": "1000.00",
        "aliquota_iss": "5",
    }
    payload.update(kw)
    return payload


def test_nfse_config_mascarada(api_client):
    assert api_client.get(f"{BASE}/nfse/config/").status_code == 404

    resp = api_client.put(
        f"{BASE}/nfse/config/",
        {"codigo_provedor": "ABRASF", "codigo_municipio": "3550308", "senha": "segredo"},
        format="json",
    )
    assert resp.status_code == 200, resp.content
    assert resp.json()["senha"] != "segredo"
    assert "segredo" not in api_client.get(f"{BASE}/nfse/config/").content.decode()


def test_nfse_cria_lista_e_cancela(api_client, api_client_b):
    resp = api_client.post(f"{BASE}/nfse/", _payload_nfse(), format="json")
    assert resp.status_code == 201, resp.content
    nfse = resp.json()
    assert nfse["status"] == "DRAFT"
    assert nfse["valor_iss"] == "50.00"
    assert nfse["valor_liquido"] == "1000.00"

    lista = api_client.get(f"{BASE}/nfse/", {"status": "DRAFT"}).json()
    assert lista["count"] == 1
    assert api_client_b.get(f"{BASE}/nfse/").json()["count"] == 0
    assert api_client_b.get(f"{BASE}/nfse/{nfse['id']}/").status_code == 404

    url = f"{BASE}/nfse/{nfse['id']}/cancelar/"
    assert api_client.post(url, {"motivo": "Valor incorreto"}, format="json").status_code == 200
    segunda = api_client.post(url, {"motivo": "Valor incorreto"}, format="json")
    assert segunda.status_code == 400
    assert segunda.json()["code"] == "FISCAL_2003"


def test_nfse_status_denegada_nao_cancela(api_client):
    nfse = api_client.post(f"{BASE}/nfse/", _payload_nfse(), format="json").json()
    api_client.patch(f"{BASE}/nfse/{nfse['id']}/status/", {"status": "PENDING"}, format="json")
    resp = api_client.patch(f"{BASE}/nfse/{nfse['id']}/status/", {"status": "DENIED"}, format="json")
    assert resp.status_code == 200

    resp = api_client.post(f"{BASE}/nfse/{nfse['id']}/cancelar/", {"motivo": "x"}, format="json")
    assert resp.status_code == 409


def test_nfse_limit_invalido(api_client):
    assert api_client.get(f"{BASE}/nfse/", {"limit": 0}).status_code == 400
    assert api_client.get(f"{BASE}/nfse/", {"offset": -1}).status_code == 400


# =============================================================================
# BLOCO K
# =============================================================================

def test_bloco_k_api(api_client):
    resp = api_client.post(f"{BASE}/bloco-k/gerar/", {"ano": 2024, "mes": 1}, format="json")
    assert resp.status_code == 201
    assert resp.json() == []

    resp = api_client.get(f"{BASE}/bloco-k/", {"ano": 2024, "mes": 1, "tipo_registro": "K999"})
    assert resp.status_code == 400


def test_health(client):
    assert client.get("/health/liveness").status_code == 200
