# fiscal/services/obrigacao_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from fiscal.exceptions import (
    ERR_CAMPOS_NAO_PERMITIDOS,
    ERR_OBRIGACAO_NAO_ENCONTRADA,
    ERR_TRANSICAO_OBRIGACAO,
    ERR_VALOR_INVALIDO,
    EstadoInvalido,
)
from fiscal.models import ObrigacaoFiscal, StatusObrigacao
from fiscal.services.calendario_service import (
    calcular_vencimento_obrigacao,
    obter_definicao,
    validar_periodo,
)
from fiscal.tabelas import OBRIGACOES

logger = logging.getLogger("erp.fiscal")


@dataclass
class DadosTransmissao:
    """Campos opcionais devolvidos pelo subsistema de geração/transmissão."""
    numero_recibo: Optional[str] = None
    nome_arquivo: Optional[str] = None
    conteudo_arquivo: Optional[str] = None
    mensagem_erro: Optional[str] = None

    def informados(self) -> dict:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }


# Quais campos de DadosTransmissao cada status aceita gravar
CAMPOS_POR_STATUS: dict[str, set[str]] = {
    StatusObrigacao.PENDING: {"mensagem_erro"},
    StatusObrigacao.GENERATING: set(),
    StatusObrigacao.GENERATED: {"nome_arquivo", "conteudo_arquivo"},
    StatusObrigacao.TRANSMITTED: {"numero_recibo", "nome_arquivo", "conteudo_arquivo"},
    StatusObrigacao.ACCEPTED: {"numero_recibo"},
    StatusObrigacao.REJECTED: {"numero_recibo", "mensagem_erro"},
    StatusObrigacao.RECTIFIED: {"nome_arquivo", "conteudo_arquivo"},
}

# GENERATING só parte de uma obrigação ainda não gerada (ou retificada)
ORIGENS_GENERATING = {
    StatusObrigacao.PENDING,
    StatusObrigacao.RECTIFIED,
    StatusObrigacao.GENERATING,
}


def gerar_obrigacoes(
    *,
    empresa_id,
    ano: int,
    mes: int,
    codigos: Optional[Iterable[str]] = None,
) -> List[ObrigacaoFiscal]:
    """
    Garante uma ObrigacaoFiscal por código para o período.

    - Idempotente: obrigação já existente é devolvida como está
      (status e dados de transmissão preservados).
    - `codigos` restringe a geração; sem ele, usa o catálogo inteiro.
    """
    validar_periodo(ano, mes)

    if codigos is None:
        definicoes = list(OBRIGACOES.values())
    else:
        definicoes = [obter_definicao(codigo) for codigo in dict.fromkeys(codigos)]

    resultado: List[ObrigacaoFiscal] = []
    criadas = 0

    with transaction.atomic():
        for definicao in definicoes:
            existente = ObrigacaoFiscal.objects.filter(
                empresa_id=empresa_id,
                codigo=definicao.codigo,
                ano=ano,
                mes=mes,
            ).first()
            if existente:
                resultado.append(existente)
                continue

            # savepoint: outra requisição pode ter criado a mesma obrigação
            # entre o filter e o create; aí só relemos a linha dela.
            try:
                with transaction.atomic():
                    obrigacao = ObrigacaoFiscal.objects.create(
                        empresa_id=empresa_id,
                        codigo=definicao.codigo,
                        nome=definicao.nome,
                        ano=ano,
                        mes=mes,
                        data_vencimento=calcular_vencimento_obrigacao(definicao.codigo, ano, mes),
                        status=StatusObrigacao.PENDING,
                    )
                    criadas += 1
            except IntegrityError:
                obrigacao = ObrigacaoFiscal.objects.get(
                    empresa_id=empresa_id,
                    codigo=definicao.codigo,
                    ano=ano,
                    mes=mes,
                )
            resultado.append(obrigacao)

    logger.info(
        "obrigacoes_geradas",
        extra={
            "event": "obrigacoes_geradas",
            "empresa_id": str(empresa_id),
            "ano": ano,
            "mes": mes,
            "total": len(resultado),
            "criadas": criadas,
        },
    )

    resultado.sort(key=lambda ob: (ob.data_vencimento, ob.codigo))
    return resultado


def _validar_transicao(obrigacao: ObrigacaoFiscal, novo_status: str) -> None:
    if novo_status in (StatusObrigacao.ACCEPTED, StatusObrigacao.REJECTED):
        if obrigacao.status != StatusObrigacao.TRANSMITTED or obrigacao.transmitida_em is None:
            raise EstadoInvalido(
                ERR_TRANSICAO_OBRIGACAO,
                f"Obrigação ainda não transmitida; não pode ir para {novo_status}.",
            )

    if novo_status == StatusObrigacao.GENERATING and obrigacao.status not in ORIGENS_GENERATING:
        raise EstadoInvalido(
            ERR_TRANSICAO_OBRIGACAO,
            f"Transição {obrigacao.status} -> {novo_status} não permitida.",
        )


def atualizar_status_obrigacao(
    *,
    empresa_id,
    obrigacao_id,
    status: str,
    dados: Optional[DadosTransmissao] = None,
) -> ObrigacaoFiscal:
    """
    Única porta de alteração do status de uma obrigação.

    Regras:
      - ACCEPTED/REJECTED só a partir de TRANSMITTED.
      - GENERATING só a partir de PENDING ou RECTIFIED; limpa transmitida_em,
        o arquivo regerado precisa ser transmitido de novo.
      - TRANSMITTED carimba transmitida_em.
      - Campos de DadosTransmissao fora do permitido para o status → 400.
    """
    if status not in StatusObrigacao.values:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"Status inválido: {status!r}.",
        })

    dados = dados or DadosTransmissao()
    informados = dados.informados()
    nao_permitidos = sorted(set(informados) - CAMPOS_POR_STATUS[status])
    if nao_permitidos:
        raise ValidationError({
            "code": ERR_CAMPOS_NAO_PERMITIDOS,
            "message": f"Campos não permitidos para o status {status}: {', '.join(nao_permitidos)}.",
        })

    with transaction.atomic():
        obrigacao = (
            ObrigacaoFiscal.objects.select_for_update()
            .filter(id=obrigacao_id, empresa_id=empresa_id)
            .first()
        )
        if obrigacao is None:
            raise NotFound({
                "code": ERR_OBRIGACAO_NAO_ENCONTRADA,
                "message": "Obrigação fiscal não encontrada.",
            })

        status_anterior = obrigacao.status
        _validar_transicao(obrigacao, status)

        obrigacao.status = status
        for campo, valor in informados.items():
            setattr(obrigacao, campo, valor)
        if status == StatusObrigacao.TRANSMITTED:
            obrigacao.transmitida_em = timezone.now()
        elif status == StatusObrigacao.GENERATING:
            obrigacao.transmitida_em = None

        obrigacao.save(
            update_fields=["status", "transmitida_em", "updated_at", *informados.keys()]
        )

    logger.info(
        "obrigacao_status_atualizado",
        extra={
            "event": "obrigacao_status_atualizado",
            "empresa_id": str(empresa_id),
            "obrigacao_id": str(obrigacao.id),
            "codigo": obrigacao.codigo,
            "status_anterior": status_anterior,
            "status_novo": status,
        },
    )
    return obrigacao


def listar_obrigacoes(*, empresa_id, ano: int, mes: int, status: Optional[str] = None):
    validar_periodo(ano, mes)
    qs = ObrigacaoFiscal.objects.filter(empresa_id=empresa_id, ano=ano, mes=mes)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("data_vencimento", "codigo")
