# tests/fiscal/test_aliquota_interestadual.py

from decimal import Decimal

import pytest
from rest_framework.exceptions import ValidationError

from fiscal.exceptions import ERR_UF_INVALIDA
from fiscal.services.calculos import obter_aliquota_interestadual
from fiscal.tabelas import TABELA_UF, UFS_VALIDAS


@pytest.mark.parametrize(
    "origem,destino,esperado",
    [
        ("SP", "RJ", "7"),
        ("PR", "MG", "7"),
        ("RS", "SC", "7"),
        ("SP", "BA", "12"),
        ("BA", "SP", "12"),
        ("SP", "ES", "12"),
        ("ES", "RJ", "12"),
        ("AM", "PE", "12"),
    ],
)
def test_aliquota_interestadual(origem, destino, esperado):
    assert obter_aliquota_interestadual(origem, destino) == Decimal(esperado)


def test_importado_sempre_4():
    assert obter_aliquota_interestadual("SP", "RJ", importado=True) == Decimal("4")
    assert obter_aliquota_interestadual("AM", "PE", importado=True) == Decimal("4")


def test_mesma_uf_devolve_aliquota_interna():
    assert obter_aliquota_interestadual("SP", "SP") == TABELA_UF["SP"].aliquota_interna
    assert obter_aliquota_interestadual("ba", "BA") == Decimal("20.5")


def test_uf_desconhecida():
    with pytest.raises(ValidationError) as exc:
        obter_aliquota_interestadual("SP", "XX")
    assert exc.value.detail["code"] == ERR_UF_INVALIDA


def test_tabela_tem_27_ufs():
    assert len(UFS_VALIDAS) == 27
    assert {uf.sigla for uf in TABELA_UF.values() if uf.sul_sudeste} == {"SP", "RJ", "MG", "PR", "SC", "RS"}
