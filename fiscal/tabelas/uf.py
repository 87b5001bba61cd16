# fiscal/tabelas/uf.py
from __future__ import annotations

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from .base import UFDef


def _uf(sigla, nome, regiao, interna, sul_sudeste=False) -> UFDef:
    return UFDef(
        sigla=sigla,
        nome=nome,
        regiao=regiao,
        aliquota_interna=Decimal(interna),
        sul_sudeste=sul_sudeste,
    )


# Alíquotas internas modais vigentes em 2024 (sem adicional de FCP).
TABELA_UF: Mapping[str, UFDef] = MappingProxyType({
    uf.sigla: uf
    for uf in (
        _uf("AC", "Acre", "N", "19"),
        _uf("AL", "Alagoas", "NE", "19"),
        _uf("AM", "Amazonas", "N", "20"),
        _uf("AP", "Amapá", "N", "18"),
        _uf("BA", "Bahia", "NE", "20.5"),
        _uf("CE", "Ceará", "NE", "20"),
        _uf("DF", "Distrito Federal", "CO", "20"),
        _uf("ES", "Espírito Santo", "SE", "17"),
        _uf("GO", "Goiás", "CO", "19"),
        _uf("MA", "Maranhão", "NE", "22"),
        _uf("MG", "Minas Gerais", "SE", "18", sul_sudeste=True),
        _uf("MS", "Mato Grosso do Sul", "CO", "17"),
        _uf("MT", "Mato Grosso", "CO", "17"),
        _uf("PA", "Pará", "N", "19"),
        _uf("PB", "Paraíba", "NE", "20"),
        _uf("PE", "Pernambuco", "NE", "20.5"),
        _uf("PI", "Piauí", "NE", "21"),
        _uf("PR", "Paraná", "S", "19.5", sul_sudeste=True),
        _uf("RJ", "Rio de Janeiro", "SE", "20", sul_sudeste=True),
        _uf("RN", "Rio Grande do Norte", "NE", "18"),
        _uf("RO", "Rondônia", "N", "19.5"),
        _uf("RR", "Roraima", "N", "20"),
        _uf("RS", "Rio Grande do Sul", "S", "17", sul_sudeste=True),
        _uf("SC", "Santa Catarina", "S", "17", sul_sudeste=True),
        _uf("SE", "Sergipe", "NE", "19"),
        _uf("SP", "São Paulo", "SE", "18", sul_sudeste=True),
        _uf("TO", "Tocantins", "N", "20"),
    )
})

UFS_VALIDAS = frozenset(TABELA_UF)

ALIQUOTA_INTERESTADUAL_PADRAO = Decimal("12")
ALIQUOTA_INTERESTADUAL_SUL_SUDESTE = Decimal("7")
# Resolução do Senado 13/2012: bens e mercadorias importados.
ALIQUOTA_INTERESTADUAL_IMPORTADOS = Decimal("4")
