# fiscal/services/apuracao_service.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, ValidationError

from fiscal.exceptions import (
    ERR_APURACAO_FECHADA,
    ERR_APURACAO_NAO_ENCONTRADA,
    ERR_VALOR_IMPOSTO_INCONSISTENTE,
    ERR_VALOR_IMPOSTO_NEGATIVO,
    ERR_VALOR_INVALIDO,
    EstadoInvalido,
)
from fiscal.models import ApuracaoImposto, ItemApuracao, NaturezaItem
from fiscal.services.calculos import (
    CEM,
    ZERO,
    calcular_saldo_apuracao,
    calcular_valor_a_recolher,
    para_decimal,
)
from fiscal.services.calendario_service import validar_periodo

logger = logging.getLogger("erp.fiscal")

__all__ = [
    "obter_ou_criar_apuracao",
    "adicionar_item_apuracao",
    "calcular_saldo_apuracao",
    "fechar_apuracao",
    "listar_apuracoes",
    "resumo_apuracao",
]


def _normalizar_tipo(tipo_imposto: str) -> str:
    tipo = (tipo_imposto or "").strip().upper()
    if not tipo or len(tipo) > 20:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": "tipo_imposto deve ter entre 1 e 20 caracteres.",
        })
    return tipo


def _tolerancia() -> Decimal:
    return Decimal(str(settings.FISCAL.get("TOLERANCIA_VALOR_IMPOSTO", "0.01")))


def _proximo_periodo(ano: int, mes: int) -> tuple[int, int]:
    return (ano + 1, 1) if mes == 12 else (ano, mes + 1)


def obter_ou_criar_apuracao(*, empresa_id, tipo_imposto: str, ano: int, mes: int) -> ApuracaoImposto:
    """Upsert puro: não recalcula nada, só garante a linha do período."""
    validar_periodo(ano, mes)
    tipo = _normalizar_tipo(tipo_imposto)

    try:
        with transaction.atomic():
            apuracao, _ = ApuracaoImposto.objects.get_or_create(
                empresa_id=empresa_id,
                tipo_imposto=tipo,
                ano=ano,
                mes=mes,
            )
    except IntegrityError:
        apuracao = ApuracaoImposto.objects.get(
            empresa_id=empresa_id, tipo_imposto=tipo, ano=ano, mes=mes
        )
    return apuracao


def _validar_item(*, valor_base, aliquota, valor_imposto, natureza) -> tuple[Decimal, Decimal, Decimal]:
    if natureza not in NaturezaItem.values:
        raise ValidationError({
            "code": ERR_VALOR_INVALIDO,
            "message": f"Natureza inválida: {natureza!r}.",
        })

    base = para_decimal("valor_base", valor_base, minimo=ZERO)
    aliq = para_decimal("aliquota", aliquota, minimo=ZERO, maximo=CEM)
    imposto = para_decimal("valor_imposto", valor_imposto)

    if imposto < ZERO:
        raise ValidationError({
            "code": ERR_VALOR_IMPOSTO_NEGATIVO,
            "message": "valor_imposto não pode ser negativo; use a natureza para o sinal.",
        })

    # Base e alíquota informadas: o imposto tem que bater com base * alíquota
    if base > ZERO and aliq > ZERO:
        esperado = base * aliq / CEM
        if abs(imposto - esperado) > _tolerancia():
            raise ValidationError({
                "code": ERR_VALOR_IMPOSTO_INCONSISTENTE,
                "message": (
                    f"valor_imposto {imposto} diverge de valor_base * aliquota / 100 "
                    f"({esperado.quantize(Decimal('0.01'))})."
                ),
            })

    return base, aliq, imposto


def _recalcular_totais(apuracao: ApuracaoImposto) -> None:
    saldo = calcular_saldo_apuracao(apuracao.itens.all())
    apuracao.total_credito = saldo.total_credito
    apuracao.total_debito = saldo.total_debito
    apuracao.saldo = saldo.saldo


def _obter_apuracao_travada(*, empresa_id, **filtros) -> ApuracaoImposto:
    apuracao = (
        ApuracaoImposto.objects.select_for_update()
        .filter(empresa_id=empresa_id, **filtros)
        .first()
    )
    if apuracao is None:
        raise NotFound({
            "code": ERR_APURACAO_NAO_ENCONTRADA,
            "message": "Apuração não encontrada.",
        })
    return apuracao


def adicionar_item_apuracao(
    *,
    empresa_id,
    apuracao_id,
    tipo_documento: str,
    valor_base,
    aliquota,
    valor_imposto,
    natureza: str,
    documento_id=None,
    numero_documento: Optional[str] = None,
    cfop: Optional[str] = None,
    descricao: Optional[str] = None,
) -> ItemApuracao:
    """
    Lança um crédito/débito e recalcula os totais da apuração a partir
    de TODOS os itens, na mesma transação (com a apuração travada).
    """
    base, aliq, imposto = _validar_item(
        valor_base=valor_base,
        aliquota=aliquota,
        valor_imposto=valor_imposto,
        natureza=natureza,
    )

    with transaction.atomic():
        apuracao = _obter_apuracao_travada(empresa_id=empresa_id, id=apuracao_id)

        if apuracao.fechada:
            raise EstadoInvalido(ERR_APURACAO_FECHADA, "Apuração fechada não aceita novos itens.")

        item = ItemApuracao.objects.create(
            apuracao=apuracao,
            tipo_documento=tipo_documento,
            documento_id=documento_id,
            numero_documento=numero_documento,
            cfop=cfop,
            valor_base=base,
            aliquota=aliq,
            valor_imposto=imposto,
            natureza=natureza,
            descricao=descricao,
        )

        _recalcular_totais(apuracao)
        apuracao.save(update_fields=["total_credito", "total_debito", "saldo", "updated_at"])

    logger.info(
        "apuracao_item_adicionado",
        extra={
            "event": "apuracao_item_adicionado",
            "empresa_id": str(empresa_id),
            "apuracao_id": str(apuracao.id),
            "tipo_imposto": apuracao.tipo_imposto,
            "natureza": natureza,
            "valor_imposto": str(imposto),
            "saldo": str(apuracao.saldo),
        },
    )
    return item


def fechar_apuracao(
    *,
    empresa_id,
    tipo_imposto: str,
    ano: int,
    mes: int,
    usuario=None,
) -> ApuracaoImposto:
    """
    Fecha a apuração do período.

    - Totais recalculados uma última vez antes de congelar.
    - Débito acima dos créditos (período + transportado) vira valor_a_recolher;
      sobra de crédito é transportada para o período seguinte, criando a
      apuração de lá quando ainda não existir.
    - Fechar duas vezes → 409.
    """
    validar_periodo(ano, mes)
    tipo = _normalizar_tipo(tipo_imposto)

    with transaction.atomic():
        apuracao = _obter_apuracao_travada(
            empresa_id=empresa_id, tipo_imposto=tipo, ano=ano, mes=mes
        )
        if apuracao.fechada:
            raise EstadoInvalido(ERR_APURACAO_FECHADA, "Apuração já está fechada.")

        _recalcular_totais(apuracao)
        resultado = calcular_valor_a_recolher(
            total_debito=apuracao.total_debito,
            total_credito=apuracao.total_credito,
            credito_anterior=apuracao.credito_anterior,
        )
        apuracao.valor_a_recolher = resultado.valor_a_recolher
        apuracao.credito_a_transportar = resultado.credito_a_transportar
        apuracao.fechada_em = timezone.now()
        if usuario is not None and getattr(usuario, "is_authenticated", False):
            apuracao.fechada_por = usuario
        apuracao.save()

        if resultado.credito_a_transportar > ZERO:
            _transportar_credito(apuracao, resultado.credito_a_transportar)

    logger.info(
        "apuracao_fechada",
        extra={
            "event": "apuracao_fechada",
            "empresa_id": str(empresa_id),
            "apuracao_id": str(apuracao.id),
            "tipo_imposto": tipo,
            "ano": ano,
            "mes": mes,
            "saldo": str(apuracao.saldo),
            "valor_a_recolher": str(apuracao.valor_a_recolher),
            "credito_a_transportar": str(apuracao.credito_a_transportar),
        },
    )
    return apuracao


def _transportar_credito(apuracao: ApuracaoImposto, valor: Decimal) -> None:
    ano, mes = _proximo_periodo(apuracao.ano, apuracao.mes)
    proxima, _ = ApuracaoImposto.objects.select_for_update().get_or_create(
        empresa_id=apuracao.empresa_id,
        tipo_imposto=apuracao.tipo_imposto,
        ano=ano,
        mes=mes,
    )
    if proxima.fechada:
        logger.warning(
            "credito_nao_transportado",
            extra={
                "event": "credito_nao_transportado",
                "empresa_id": str(apuracao.empresa_id),
                "apuracao_id": str(proxima.id),
                "valor": str(valor),
            },
        )
        return
    proxima.credito_anterior = valor
    proxima.save(update_fields=["credito_anterior", "updated_at"])


def listar_apuracoes(*, empresa_id, ano: int, mes: int, tipo_imposto: Optional[str] = None):
    validar_periodo(ano, mes)
    qs = ApuracaoImposto.objects.filter(empresa_id=empresa_id, ano=ano, mes=mes)
    if tipo_imposto:
        qs = qs.filter(tipo_imposto=_normalizar_tipo(tipo_imposto))
    return qs.prefetch_related("itens").order_by("tipo_imposto")


@dataclass
class ResumoTipoImposto:
    apuracao_id: str
    tipo_imposto: str
    status: str
    quantidade_itens: int
    total_credito: Decimal
    total_debito: Decimal
    saldo: Decimal
    credito_anterior: Decimal
    valor_a_recolher: Decimal
    credito_a_transportar: Decimal


@dataclass
class ResumoApuracao:
    ano: int
    mes: int
    por_tipo: List[ResumoTipoImposto] = field(default_factory=list)
    total_credito: Decimal = ZERO
    total_debito: Decimal = ZERO
    saldo: Decimal = ZERO
    valor_a_recolher: Decimal = ZERO


def resumo_apuracao(*, empresa_id, ano: int, mes: int) -> ResumoApuracao:
    """
    Visão do período por tipo de imposto. Somente leitura: para apurações
    abertas o valor a recolher é uma prévia do que o fechamento gravaria.
    """
    resumo = ResumoApuracao(ano=ano, mes=mes)

    for apuracao in listar_apuracoes(empresa_id=empresa_id, ano=ano, mes=mes):
        itens = list(apuracao.itens.all())
        saldo = calcular_saldo_apuracao(itens)
        recolher = calcular_valor_a_recolher(
            total_debito=saldo.total_debito,
            total_credito=saldo.total_credito,
            credito_anterior=apuracao.credito_anterior,
        )
        resumo.por_tipo.append(
            ResumoTipoImposto(
                apuracao_id=str(apuracao.id),
                tipo_imposto=apuracao.tipo_imposto,
                status=apuracao.status,
                quantidade_itens=len(itens),
                total_credito=saldo.total_credito,
                total_debito=saldo.total_debito,
                saldo=saldo.saldo,
                credito_anterior=apuracao.credito_anterior,
                valor_a_recolher=recolher.valor_a_recolher,
                credito_a_transportar=recolher.credito_a_transportar,
            )
        )
        resumo.total_credito += saldo.total_credito
        resumo.total_debito += saldo.total_debito
        resumo.valor_a_recolher += recolher.valor_a_recolher

    resumo.saldo = resumo.total_credito - resumo.total_debito
    return resumo
