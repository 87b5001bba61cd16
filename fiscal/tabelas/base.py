# fiscal/tabelas/base.py
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class UFDef:
    """
    Dados tributários estáticos de uma UF.

    - sigla: 'SP', 'BA', ...
    - regiao: N, NE, CO, SE ou S.
    - aliquota_interna: alíquota modal de ICMS nas operações internas (%).
    - sul_sudeste: pertence ao grupo Sul/Sudeste para a regra interestadual
      (o ES fica de fora, mesmo sendo do Sudeste).
    """
    sigla: str
    nome: str
    regiao: str
    aliquota_interna: Decimal
    sul_sudeste: bool = False


@dataclass(frozen=True)
class ObrigacaoDef:
    """
    Definição de uma obrigação acessória.

    - dia_vencimento: dia do mês de vencimento (limitado ao último dia do mês).
    - meses_apos: quantos meses após o período de referência vence
      (0 = mesmo mês, 1 = mês seguinte...).
    """
    codigo: str
    nome: str
    dia_vencimento: int
    meses_apos: int
