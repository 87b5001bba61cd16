# fiscal/tabelas/__init__.py
from __future__ import annotations

from .base import ObrigacaoDef, UFDef
from .obrigacoes import CODIGOS_OBRIGACOES, OBRIGACOES
from .uf import (
    ALIQUOTA_INTERESTADUAL_IMPORTADOS,
    ALIQUOTA_INTERESTADUAL_PADRAO,
    ALIQUOTA_INTERESTADUAL_SUL_SUDESTE,
    TABELA_UF,
    UFS_VALIDAS,
)

__all__ = [
    "ObrigacaoDef",
    "UFDef",
    "OBRIGACOES",
    "CODIGOS_OBRIGACOES",
    "TABELA_UF",
    "UFS_VALIDAS",
    "ALIQUOTA_INTERESTADUAL_PADRAO",
    "ALIQUOTA_INTERESTADUAL_SUL_SUDESTE",
    "ALIQUOTA_INTERESTADUAL_IMPORTADOS",
]
