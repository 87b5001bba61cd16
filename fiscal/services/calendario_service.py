# fiscal/services/calendario_service.py

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Mapping, Optional

from rest_framework.exceptions import ValidationError

from fiscal.exceptions import ERR_OBRIGACAO_DESCONHECIDA, ERR_PERIODO_INVALIDO
from fiscal.models import ObrigacaoFiscal
from fiscal.tabelas import OBRIGACOES, ObrigacaoDef

ANO_MINIMO = 2020
ANO_MAXIMO = 2100

# Status do item de calendário cuja obrigação ainda não foi gerada
STATUS_NAO_GERADA = "NOT_GENERATED"


def validar_periodo(ano: int, mes: int) -> None:
    if not isinstance(ano, int) or not ANO_MINIMO <= ano <= ANO_MAXIMO:
        raise ValidationError({
            "code": ERR_PERIODO_INVALIDO,
            "message": f"Ano deve estar entre {ANO_MINIMO} e {ANO_MAXIMO}.",
        })
    if not isinstance(mes, int) or not 1 <= mes <= 12:
        raise ValidationError({
            "code": ERR_PERIODO_INVALIDO,
            "message": "Mês deve estar entre 1 e 12.",
        })


def obter_definicao(codigo: str, definicoes: Mapping[str, ObrigacaoDef] = OBRIGACOES) -> ObrigacaoDef:
    definicao = definicoes.get(codigo)
    if definicao is None:
        raise ValidationError({
            "code": ERR_OBRIGACAO_DESCONHECIDA,
            "message": f"Obrigação desconhecida: {codigo!r}.",
        })
    return definicao


def proximo_dia_util(data: date) -> date:
    """Sábado → segunda (+2), domingo → segunda (+1). Feriados não são considerados."""
    if data.weekday() == 5:
        return data + timedelta(days=2)
    if data.weekday() == 6:
        return data + timedelta(days=1)
    return data


def calcular_vencimento_obrigacao(
    codigo: str,
    ano: int,
    mes: int,
    *,
    definicoes: Mapping[str, ObrigacaoDef] = OBRIGACOES,
) -> date:
    """
    Vencimento da obrigação `codigo` referente a mes/ano.

    - Soma meses_apos ao mês de referência, virando o ano quando passa de dezembro.
    - Dia maior que o último dia do mês alvo é limitado ao último dia.
    - Caindo em fim de semana, avança para o próximo dia útil.
    """
    validar_periodo(ano, mes)
    definicao = obter_definicao(codigo, definicoes)

    indice = (mes - 1) + definicao.meses_apos
    ano_alvo = ano + indice // 12
    mes_alvo = indice % 12 + 1

    ultimo_dia = calendar.monthrange(ano_alvo, mes_alvo)[1]
    dia = min(definicao.dia_vencimento, ultimo_dia)

    return proximo_dia_util(date(ano_alvo, mes_alvo, dia))


@dataclass
class ItemCalendario:
    codigo: str
    nome: str
    ano: int
    mes: int
    data_vencimento: date
    status: str
    obrigacao_id: Optional[str] = None

    @property
    def gerada(self) -> bool:
        return self.obrigacao_id is not None


def gerar_calendario_fiscal(
    *,
    empresa_id,
    ano: int,
    mes: int,
    definicoes: Mapping[str, ObrigacaoDef] = OBRIGACOES,
) -> List[ItemCalendario]:
    """
    Planejamento do período: uma linha por obrigação conhecida, com o status
    da obrigação já gerada ou NOT_GENERATED. Somente leitura.
    """
    validar_periodo(ano, mes)

    existentes = {
        ob.codigo: ob
        for ob in ObrigacaoFiscal.objects.filter(empresa_id=empresa_id, ano=ano, mes=mes)
    }

    itens = []
    for codigo, definicao in definicoes.items():
        obrigacao = existentes.get(codigo)
        itens.append(
            ItemCalendario(
                codigo=codigo,
                nome=definicao.nome,
                ano=ano,
                mes=mes,
                data_vencimento=(
                    obrigacao.data_vencimento
                    if obrigacao
                    else calcular_vencimento_obrigacao(codigo, ano, mes, definicoes=definicoes)
                ),
                status=obrigacao.status if obrigacao else STATUS_NAO_GERADA,
                obrigacao_id=str(obrigacao.id) if obrigacao else None,
            )
        )
    return itens
