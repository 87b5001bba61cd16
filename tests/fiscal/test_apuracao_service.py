# tests/fiscal/test_apuracao_service.py

import uuid
from decimal import Decimal

import pytest
from rest_framework.exceptions import NotFound, ValidationError

from fiscal.exceptions import (
    ERR_APURACAO_FECHADA,
    ERR_VALOR_IMPOSTO_INCONSISTENTE,
    ERR_VALOR_IMPOSTO_NEGATIVO,
    EstadoInvalido,
)
from fiscal.models import ApuracaoImposto, ItemApuracao
from fiscal.services.apuracao_service import (
    adicionar_item_apuracao,
    fechar_apuracao,
    obter_ou_criar_apuracao,
    resumo_apuracao,
)

pytestmark = pytest.mark.django_db

D = Decimal


def _item(empresa, apuracao, natureza, base, aliquota, imposto, **kw):
    return adicionar_item_apuracao(
        empresa_id=empresa.id,
        apuracao_id=apuracao.id,
        tipo_documento=kw.pop("tipo_documento", "NFE"),
        valor_base=D(base),
        aliquota=D(aliquota),
        valor_imposto=D(imposto),
        natureza=natureza,
        **kw,
    )


@pytest.fixture
def icms(empresa):
    return obter_ou_criar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)


def test_obter_ou_criar_nao_duplica(empresa, icms):
    mesma = obter_ou_criar_apuracao(empresa_id=empresa.id, tipo_imposto="icms", ano=2024, mes=1)
    assert mesma.id == icms.id
    assert ApuracaoImposto.objects.filter(empresa=empresa).count() == 1
    assert icms.status == ApuracaoImposto.STATUS_OPEN


def test_saldo_credito_menos_debito(empresa, icms):
    _item(empresa, icms, "CREDIT", "2777.78", "18", "500.00", cfop="1102")
    _item(empresa, icms, "DEBIT", "1000.00", "18", "180.00", cfop="5102")

    icms.refresh_from_db()
    assert icms.total_credito == D("500.00")
    assert icms.total_debito == D("180.00")
    assert icms.saldo == D("320.00")


def test_totais_recalculados_de_todos_os_itens(empresa, icms):
    for _ in range(3):
        _item(empresa, icms, "DEBIT", "100.00", "10", "10.00")

    icms.refresh_from_db()
    assert icms.total_debito == D("30.00")
    assert icms.saldo == D("-30.00")
    assert ItemApuracao.objects.filter(apuracao=icms).count() == 3


def test_imposto_negativo(empresa, icms):
    with pytest.raises(ValidationError) as exc:
        _item(empresa, icms, "CREDIT", "0", "0", "-1")
    assert exc.value.detail["code"] == ERR_VALOR_IMPOSTO_NEGATIVO


def test_imposto_inconsistente_com_base_e_aliquota(empresa, icms):
    with pytest.raises(ValidationError) as exc:
        _item(empresa, icms, "DEBIT", "1000.00", "18", "200.00")
    assert exc.value.detail["code"] == ERR_VALOR_IMPOSTO_INCONSISTENTE
    assert not icms.itens.exists()


def test_imposto_dentro_da_tolerancia(empresa, icms):
    # 333.33 * 18% = 59.9994
    item = _item(empresa, icms, "DEBIT", "333.33", "18", "60.00")
    assert item.valor_imposto == D("60.00")


def test_ajuste_sem_base_aceito(empresa, icms):
    item = _item(empresa, icms, "CREDIT", "0", "0", "45.00", tipo_documento="AJUSTE")
    assert item.valor_imposto == D("45.00")


def test_apuracao_de_outra_empresa(empresa_b, icms):
    with pytest.raises(NotFound):
        _item(empresa_b, icms, "CREDIT", "100", "10", "10")


def test_apuracao_inexistente(empresa):
    with pytest.raises(NotFound):
        adicionar_item_apuracao(
            empresa_id=empresa.id,
            apuracao_id=uuid.uuid4(),
            tipo_documento="NFE",
            valor_base=D("100"),
            aliquota=D("10"),
            valor_imposto=D("10"),
            natureza="CREDIT",
        )


def test_fechada_nao_aceita_item(empresa, icms):
    _item(empresa, icms, "DEBIT", "1000", "18", "180")
    fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)

    with pytest.raises(EstadoInvalido) as exc:
        _item(empresa, icms, "CREDIT", "100", "18", "18")
    assert exc.value.status_code == 409
    assert exc.value.detail["code"] == ERR_APURACAO_FECHADA


def test_fechar_duas_vezes(empresa, icms):
    fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)
    with pytest.raises(EstadoInvalido):
        fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)


def test_fechar_inexistente(empresa):
    with pytest.raises(NotFound):
        fechar_apuracao(empresa_id=empresa.id, tipo_imposto="IPI", ano=2024, mes=1)


def test_fechamento_com_imposto_a_recolher(empresa, icms, user):
    _item(empresa, icms, "CREDIT", "1000", "12", "120")
    _item(empresa, icms, "DEBIT", "2000", "18", "360")

    fechada = fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1, usuario=user)

    assert fechada.status == ApuracaoImposto.STATUS_CLOSED
    assert fechada.fechada_por == user
    assert fechada.valor_a_recolher == D("240.00")
    assert fechada.credito_a_transportar == D("0")
    assert not ApuracaoImposto.objects.filter(empresa=empresa, ano=2024, mes=2).exists()


def test_credito_transportado_para_periodo_seguinte(empresa, icms):
    _item(empresa, icms, "CREDIT", "2777.78", "18", "500.00")
    _item(empresa, icms, "DEBIT", "1000.00", "18", "180.00")

    fechada = fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)
    assert fechada.credito_a_transportar == D("320.00")

    fevereiro = ApuracaoImposto.objects.get(empresa=empresa, tipo_imposto="ICMS", ano=2024, mes=2)
    assert fevereiro.credito_anterior == D("320.00")
    assert fevereiro.status == ApuracaoImposto.STATUS_OPEN

    _item(empresa, fevereiro, "DEBIT", "2000", "18", "360")
    fevereiro = fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=2)
    assert fevereiro.valor_a_recolher == D("40.00")


def test_credito_de_dezembro_vai_para_janeiro(empresa):
    dezembro = obter_ou_criar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=12)
    _item(empresa, dezembro, "CREDIT", "1000", "10", "100")
    fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=12)

    janeiro = ApuracaoImposto.objects.get(empresa=empresa, tipo_imposto="ICMS", ano=2025, mes=1)
    assert janeiro.credito_anterior == D("100.00")


def test_resumo_por_tipo(empresa, icms):
    _item(empresa, icms, "CREDIT", "2777.78", "18", "500.00")
    _item(empresa, icms, "DEBIT", "1000.00", "18", "180.00")
    ipi = obter_ou_criar_apuracao(empresa_id=empresa.id, tipo_imposto="IPI", ano=2024, mes=1)
    _item(empresa, ipi, "DEBIT", "1000.00", "10", "100.00")

    resumo = resumo_apuracao(empresa_id=empresa.id, ano=2024, mes=1)

    por_tipo = {r.tipo_imposto: r for r in resumo.por_tipo}
    assert set(por_tipo) == {"ICMS", "IPI"}
    assert por_tipo["ICMS"].saldo == D("320.00")
    assert por_tipo["ICMS"].credito_a_transportar == D("320.00")
    assert por_tipo["IPI"].valor_a_recolher == D("100.00")
    assert resumo.total_credito == D("500.00")
    assert resumo.total_debito == D("280.00")
    assert resumo.saldo == D("220.00")
    assert resumo.valor_a_recolher == D("100.00")


def test_logs_de_apuracao(empresa, icms, fiscal_logs):
    _item(empresa, icms, "DEBIT", "1000", "18", "180")
    fechar_apuracao(empresa_id=empresa.id, tipo_imposto="ICMS", ano=2024, mes=1)

    eventos = fiscal_logs.eventos()
    assert "apuracao_item_adicionado" in eventos
    assert "apuracao_fechada" in eventos
