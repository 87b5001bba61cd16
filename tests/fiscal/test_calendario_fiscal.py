# tests/fiscal/test_calendario_fiscal.py

from datetime import date

import pytest
from rest_framework.exceptions import ValidationError

from fiscal.exceptions import ERR_OBRIGACAO_DESCONHECIDA, ERR_PERIODO_INVALIDO
from fiscal.models import StatusObrigacao
from fiscal.services.calendario_service import (
    STATUS_NAO_GERADA,
    calcular_vencimento_obrigacao,
    gerar_calendario_fiscal,
)
from fiscal.services.obrigacao_service import gerar_obrigacoes
from fiscal.tabelas import OBRIGACOES


@pytest.mark.parametrize(
    "codigo,ano,mes,esperado",
    [
        # dia útil, sem ajuste
        ("SPED_FISCAL", 2024, 1, date(2024, 2, 20)),
        # dezembro vira para o ano seguinte
        ("SPED_FISCAL", 2024, 12, date(2025, 1, 20)),
        # domingo -> segunda
        ("SPED_CONTRIBUICOES", 2024, 1, date(2024, 3, 11)),
        # sábado -> segunda
        ("EFD_REINF", 2024, 5, date(2024, 6, 17)),
        # dia 31 em mês de 30 dias -> último dia
        ("ECF", 2024, 2, date(2024, 9, 30)),
        # 31/08/2024 é sábado -> 02/09
        ("ECF", 2024, 1, date(2024, 9, 2)),
        # 31 -> 30/06 (domingo) -> 01/07
        ("ECD", 2024, 1, date(2024, 7, 1)),
    ],
)
def test_vencimento(codigo, ano, mes, esperado):
    assert calcular_vencimento_obrigacao(codigo, ano, mes) == esperado


def test_vencimento_nunca_em_fim_de_semana():
    for codigo in OBRIGACOES:
        for mes in range(1, 13):
            assert calcular_vencimento_obrigacao(codigo, 2025, mes).weekday() < 5


def test_codigo_desconhecido():
    with pytest.raises(ValidationError) as exc:
        calcular_vencimento_obrigacao("NAO_EXISTE", 2024, 1)
    assert exc.value.detail["code"] == ERR_OBRIGACAO_DESCONHECIDA


@pytest.mark.parametrize("ano,mes", [(2019, 1), (2101, 1), (2024, 0), (2024, 13)])
def test_periodo_invalido(ano, mes):
    with pytest.raises(ValidationError) as exc:
        calcular_vencimento_obrigacao("SPED_FISCAL", ano, mes)
    assert exc.value.detail["code"] == ERR_PERIODO_INVALIDO


@pytest.mark.django_db
def test_calendario_mistura_geradas_e_nao_geradas(empresa):
    gerar_obrigacoes(empresa_id=empresa.id, ano=2024, mes=1, codigos=["SPED_FISCAL"])

    itens = gerar_calendario_fiscal(empresa_id=empresa.id, ano=2024, mes=1)

    assert [i.codigo for i in itens] == list(OBRIGACOES)
    por_codigo = {i.codigo: i for i in itens}

    sped = por_codigo["SPED_FISCAL"]
    assert sped.gerada
    assert sped.status == StatusObrigacao.PENDING
    assert sped.data_vencimento == date(2024, 2, 20)

    dctf = por_codigo["DCTF"]
    assert not dctf.gerada
    assert dctf.status == STATUS_NAO_GERADA
    assert dctf.obrigacao_id is None


@pytest.mark.django_db
def test_calendario_nao_cria_nada(empresa):
    from fiscal.models import ObrigacaoFiscal

    gerar_calendario_fiscal(empresa_id=empresa.id, ano=2024, mes=3)
    assert ObrigacaoFiscal.objects.count() == 0
