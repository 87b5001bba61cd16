# fiscal/tabelas/obrigacoes.py
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from .base import ObrigacaoDef


_DEFINICOES = (
    ObrigacaoDef("SPED_FISCAL", "SPED Fiscal (EFD ICMS/IPI)", dia_vencimento=20, meses_apos=1),
    ObrigacaoDef("SPED_CONTRIBUICOES", "SPED Contribuições (PIS/COFINS)", dia_vencimento=10, meses_apos=2),
    ObrigacaoDef("EFD_REINF", "EFD-Reinf", dia_vencimento=15, meses_apos=1),
    ObrigacaoDef("ESOCIAL", "eSocial", dia_vencimento=15, meses_apos=1),
    ObrigacaoDef("DCTF", "DCTF", dia_vencimento=15, meses_apos=2),
    ObrigacaoDef("GIA", "GIA (SP)", dia_vencimento=15, meses_apos=1),
    ObrigacaoDef("SINTEGRA", "SINTEGRA", dia_vencimento=15, meses_apos=1),
    ObrigacaoDef("DIRF", "DIRF", dia_vencimento=28, meses_apos=2),
    ObrigacaoDef("ECF", "ECF (Escrituração Contábil Fiscal)", dia_vencimento=31, meses_apos=7),
    ObrigacaoDef("ECD", "ECD (Escrituração Contábil Digital)", dia_vencimento=31, meses_apos=5),
)

# Ordem de inserção preservada: é a ordem do calendário.
OBRIGACOES: Mapping[str, ObrigacaoDef] = MappingProxyType({d.codigo: d for d in _DEFINICOES})

CODIGOS_OBRIGACOES = tuple(OBRIGACOES)
