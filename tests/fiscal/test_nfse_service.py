# tests/fiscal/test_nfse_service.py

import uuid
from datetime import date
from decimal import Decimal

import pytest
from django.conf import settings
from rest_framework.exceptions import NotFound, ValidationError

from fiscal import crypto
from fiscal.exceptions import ERR_NFSE_JA_CANCELADA, EstadoInvalido, NfseJaCancelada
from fiscal.models import NfseConfig, StatusNfse
from fiscal.services.nfse_service import (
    atualizar_status_nfse,
    cancelar_nfse,
    criar_nfse,
    listar_nfse,
    obter_nfse,
    obter_nfse_config,
    salvar_nfse_config,
)

pytestmark = pytest.mark.django_db

D = Decimal
CLIENTE = uuid.uuid4()


def _nfse(empresa, **kw):
    dados = {
        "cliente_id": CLIENTE,
        "codigo_servico": "01.07",
        "descricao": "Suporte técnico em informática",
        "data_competencia": date(2024, 1, 15),
        "valor_servico": D("1000.00"),
        "aliquota_iss": D("5"),
    }
    dados.update(kw)
    return criar_nfse(empresa_id=empresa.id, **dados)


# =============================================================================
# CONFIGURAÇÃO
# =============================================================================

def test_config_segredos_cifrados_e_mascarados(empresa):
    salvo = salvar_nfse_config(
        empresa_id=empresa.id,
        codigo_provedor="ABRASF",
        codigo_municipio="3550308",
        login="prefeitura",
        senha="s3nh@",
        token="tok-123",
        aliquota_iss=D("2"),
    )
    mascara = settings.FISCAL["MASCARA_SEGREDO"]
    assert salvo["senha"] == mascara
    assert salvo["token"] == mascara

    config = NfseConfig.objects.get(empresa=empresa)
    assert config.senha != "s3nh@"
    assert crypto.decifrar(config.senha) == "s3nh@"
    assert crypto.decifrar(config.token) == "tok-123"

    lido = obter_nfse_config(empresa_id=empresa.id)
    assert lido["senha"] == mascara
    assert lido["login"] == "prefeitura"


def test_atualizacao_parcial_mantem_segredos(empresa):
    salvar_nfse_config(empresa_id=empresa.id, codigo_provedor="ABRASF", codigo_municipio="3550308", senha="a")
    cifrada = NfseConfig.objects.get(empresa=empresa).senha

    salvar_nfse_config(empresa_id=empresa.id, ambiente="PRODUCTION")

    config = NfseConfig.objects.get(empresa=empresa)
    assert config.senha == cifrada
    assert config.ambiente == "PRODUCTION"
    assert config.codigo_municipio == "3550308"


def test_segredo_vazio_apaga_o_gravado(empresa):
    salvar_nfse_config(
        empresa_id=empresa.id, codigo_provedor="ABRASF", codigo_municipio="3550308", senha="a", token="t"
    )

    salvo = salvar_nfse_config(empresa_id=empresa.id, senha="")

    config = NfseConfig.objects.get(empresa=empresa)
    assert config.senha is None
    assert crypto.decifrar(config.token) == "t"
    assert salvo["senha"] is None
    assert salvo["token"] == settings.FISCAL["MASCARA_SEGREDO"]


def test_primeira_config_exige_provedor_e_municipio(empresa):
    with pytest.raises(ValidationError):
        salvar_nfse_config(empresa_id=empresa.id, login="x")


def test_sem_config(empresa):
    assert obter_nfse_config(empresa_id=empresa.id) is None


# =============================================================================
# EMISSÃO
# =============================================================================

def test_cria_em_draft_com_tributos(empresa, user):
    nfse = _nfse(empresa, usuario=user)

    assert nfse.status == StatusNfse.DRAFT
    assert nfse.codigo == 1
    assert nfse.valor_iss == D("50.00")
    assert nfse.valor_liquido == D("1000.00")
    assert nfse.criado_por == user


def test_retencao_reduz_liquido(empresa):
    nfse = _nfse(empresa, iss_retido=True, aliquota_ir=D("1.5"))
    assert nfse.valor_total_retido == D("65.00")
    assert nfse.valor_liquido == D("935.00")


def test_codigo_sequencial_por_empresa(empresa, empresa_b):
    assert [_nfse(empresa).codigo for _ in range(3)] == [1, 2, 3]
    assert _nfse(empresa_b).codigo == 1


def test_aliquota_iss_padrao_da_config(empresa):
    salvar_nfse_config(
        empresa_id=empresa.id, codigo_provedor="ABRASF", codigo_municipio="3550308", aliquota_iss=D("2")
    )
    nfse = _nfse(empresa, aliquota_iss=None)
    assert nfse.aliquota_iss == D("2")
    assert nfse.valor_iss == D("20.00")


def test_sem_aliquota_iss(empresa):
    with pytest.raises(ValidationError):
        _nfse(empresa, aliquota_iss=None)


def test_obter_de_outra_empresa(empresa, empresa_b):
    nfse = _nfse(empresa)
    with pytest.raises(NotFound):
        obter_nfse(empresa_id=empresa_b.id, nfse_id=nfse.id)


def test_listagem_com_filtros_e_paginacao(empresa):
    outro_cliente = uuid.uuid4()
    _nfse(empresa, data_competencia=date(2024, 1, 10))
    _nfse(empresa, data_competencia=date(2024, 2, 10))
    _nfse(empresa, data_competencia=date(2024, 3, 10), cliente_id=outro_cliente)

    pagina = listar_nfse(empresa_id=empresa.id)
    assert pagina.total == 3
    assert [n.codigo for n in pagina.itens] == [3, 2, 1]

    pagina = listar_nfse(
        empresa_id=empresa.id,
        filtros={"competencia_de": date(2024, 2, 1), "competencia_ate": date(2024, 3, 31)},
    )
    assert pagina.total == 2

    pagina = listar_nfse(empresa_id=empresa.id, filtros={"cliente_id": outro_cliente})
    assert [n.codigo for n in pagina.itens] == [3]

    pagina = listar_nfse(empresa_id=empresa.id, limite=1, offset=1)
    assert pagina.total == 3
    assert [n.codigo for n in pagina.itens] == [2]


# =============================================================================
# CANCELAMENTO / STATUS
# =============================================================================

def test_cancelamento_unico(empresa):
    nfse = _nfse(empresa)

    cancelada = cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="Erro no valor")
    assert cancelada.status == StatusNfse.CANCELLED
    assert cancelada.cancelada_em is not None
    assert cancelada.motivo_cancelamento == "Erro no valor"

    with pytest.raises(NfseJaCancelada) as exc:
        cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="De novo")
    assert exc.value.status_code == 400
    assert exc.value.detail["code"] == ERR_NFSE_JA_CANCELADA


def test_cancelar_denegada(empresa):
    nfse = _nfse(empresa)
    atualizar_status_nfse(empresa_id=empresa.id, nfse_id=nfse.id, status=StatusNfse.PENDING)
    atualizar_status_nfse(empresa_id=empresa.id, nfse_id=nfse.id, status=StatusNfse.DENIED)

    with pytest.raises(EstadoInvalido) as exc:
        cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="Tentativa")
    assert exc.value.status_code == 409


def test_cancelar_sem_motivo(empresa):
    nfse = _nfse(empresa)
    with pytest.raises(ValidationError):
        cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="   ")


def test_cancelar_de_outra_empresa(empresa, empresa_b):
    nfse = _nfse(empresa)
    with pytest.raises(NotFound):
        cancelar_nfse(empresa_id=empresa_b.id, nfse_id=nfse.id, motivo="Erro")
    nfse.refresh_from_db()
    assert nfse.status == StatusNfse.DRAFT


def test_autorizacao(empresa):
    nfse = _nfse(empresa)
    atualizar_status_nfse(empresa_id=empresa.id, nfse_id=nfse.id, status=StatusNfse.PENDING)
    autorizada = atualizar_status_nfse(
        empresa_id=empresa.id,
        nfse_id=nfse.id,
        status=StatusNfse.AUTHORIZED,
        numero_nfse="2024000001",
        codigo_verificacao="ABC123",
    )
    assert autorizada.autorizada_em is not None
    assert autorizada.numero_nfse == "2024000001"


def test_transicao_invalida(empresa):
    nfse = _nfse(empresa)
    with pytest.raises(EstadoInvalido):
        atualizar_status_nfse(empresa_id=empresa.id, nfse_id=nfse.id, status=StatusNfse.AUTHORIZED)


def test_cancelada_nao_muda_de_status(empresa):
    nfse = _nfse(empresa)
    cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="Erro")
    with pytest.raises(EstadoInvalido):
        atualizar_status_nfse(empresa_id=empresa.id, nfse_id=nfse.id, status=StatusNfse.PENDING)


def test_logs_nfse(empresa, fiscal_logs):
    nfse = _nfse(empresa)
    cancelar_nfse(empresa_id=empresa.id, nfse_id=nfse.id, motivo="Erro")
    eventos = fiscal_logs.eventos()
    assert "nfse_criada" in eventos
    assert "nfse_cancelada" in eventos
