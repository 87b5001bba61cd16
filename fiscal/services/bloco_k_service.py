# fiscal/services/bloco_k_service.py

from __future__ import annotations

import calendar
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from django.db import transaction
from django.db.models import Q, Sum
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from empresas.models import Empresa
from fiscal.exceptions import ERR_VALOR_INVALIDO
from fiscal.models import RegistroBlocoK, TipoMovimentoBlocoK, TipoRegistroBlocoK
from fiscal.services.calendario_service import validar_periodo
from producao.models import Material, MovimentoEstoque, OrdemProducao

logger = logging.getLogger("erp.fiscal")

# Tipos de item escriturados no K200 (mercadoria, MP, embalagem, em processo,
# acabado, subproduto, intermediário, outros insumos)
TIPOS_ITEM_K200 = {"00", "01", "02", "03", "04", "05", "06", "10"}


def _limites_periodo(ano: int, mes: int) -> tuple[datetime, datetime, date]:
    inicio = timezone.make_aware(datetime(ano, mes, 1))
    if mes == 12:
        fim = timezone.make_aware(datetime(ano + 1, 1, 1))
    else:
        fim = timezone.make_aware(datetime(ano, mes + 1, 1))
    ultimo_dia = date(ano, mes, calendar.monthrange(ano, mes)[1])
    return inicio, fim, ultimo_dia


def _registros_producao(*, empresa_id, ano, mes, inicio, fim) -> List[RegistroBlocoK]:
    ordens = (
        OrdemProducao.objects.filter(
            empresa_id=empresa_id,
            status=OrdemProducao.Status.CONCLUIDA,
            concluida_em__gte=inicio,
            concluida_em__lt=fim,
        )
        .select_related("material")
        .prefetch_related("consumos__material")
        .order_by("concluida_em", "numero")
    )

    registros = []
    for ordem in ordens:
        data_movimento = timezone.localtime(ordem.concluida_em).date()
        quantidade = ordem.quantidade_produzida or ordem.quantidade_planejada

        registros.append(
            RegistroBlocoK(
                empresa_id=empresa_id,
                ano=ano,
                mes=mes,
                tipo_registro=TipoRegistroBlocoK.K230,
                tipo_movimento=TipoMovimentoBlocoK.PRODUCTION,
                material=ordem.material,
                codigo_item=ordem.material.codigo,
                ordem_producao=ordem,
                data_movimento=data_movimento,
                quantidade=quantidade,
            )
        )

        for consumo in ordem.consumos.all():
            registros.append(
                RegistroBlocoK(
                    empresa_id=empresa_id,
                    ano=ano,
                    mes=mes,
                    tipo_registro=TipoRegistroBlocoK.K235,
                    tipo_movimento=TipoMovimentoBlocoK.CONSUMPTION,
                    material=consumo.material,
                    codigo_item=consumo.material.codigo,
                    ordem_producao=ordem,
                    data_movimento=data_movimento,
                    quantidade=consumo.quantidade,
                )
            )
    return registros


def _registros_estoque(*, empresa_id, ano, mes, ultimo_dia) -> List[RegistroBlocoK]:
    saldos = (
        MovimentoEstoque.objects.filter(empresa_id=empresa_id, data_movimento__lte=ultimo_dia)
        .values("material_id")
        .annotate(
            entradas=Sum("quantidade", filter=Q(tipo=MovimentoEstoque.Tipo.ENTRADA)),
            saidas=Sum("quantidade", filter=Q(tipo=MovimentoEstoque.Tipo.SAIDA)),
        )
    )
    saldo_por_material = {
        linha["material_id"]: (linha["entradas"] or Decimal("0")) - (linha["saidas"] or Decimal("0"))
        for linha in saldos
    }

    materiais = list(
        Material.objects.filter(
            id__in=[mid for mid, saldo in saldo_por_material.items() if saldo != 0],
            tipo_item__in=TIPOS_ITEM_K200,
        ).order_by("codigo")
    )

    # K200 só aceita quantidade positiva; saldo negativo é furo de estoque
    negativos = [m for m in materiais if saldo_por_material[m.id] < 0]
    for material in negativos:
        logger.warning(
            "bloco_k_saldo_negativo",
            extra={
                "event": "bloco_k_saldo_negativo",
                "empresa_id": str(empresa_id),
                "codigo_item": material.codigo,
                "saldo": str(saldo_por_material[material.id]),
                "data": ultimo_dia.isoformat(),
            },
        )

    return [
        RegistroBlocoK(
            empresa_id=empresa_id,
            ano=ano,
            mes=mes,
            tipo_registro=TipoRegistroBlocoK.K200,
            tipo_movimento=TipoMovimentoBlocoK.INVENTORY,
            material=material,
            codigo_item=material.codigo,
            data_movimento=ultimo_dia,
            quantidade=saldo_por_material[material.id],
        )
        for material in materiais
        if saldo_por_material[material.id] > 0
    ]


def gerar_registros_bloco_k(*, empresa_id, ano: int, mes: int) -> List[RegistroBlocoK]:
    """
    Regera o Bloco K do período a partir de produção e estoque:

      - K230: uma linha por ordem CONCLUÍDA no período (quantidade produzida).
      - K235: uma linha por insumo consumido nessas ordens.
      - K200: saldo de estoque no último dia do período, por item com saldo positivo
        (saldo negativo gera warning bloco_k_saldo_negativo e fica de fora).

    Apaga e recria tudo numa única transação: quem consulta vê o conjunto
    anterior inteiro ou o novo inteiro.
    """
    validar_periodo(ano, mes)
    inicio, fim, ultimo_dia = _limites_periodo(ano, mes)

    with transaction.atomic():
        # duas regerações do mesmo período não se intercalam
        Empresa.objects.select_for_update().only("id").get(id=empresa_id)

        removidos, _ = RegistroBlocoK.objects.filter(empresa_id=empresa_id, ano=ano, mes=mes).delete()

        registros = _registros_producao(empresa_id=empresa_id, ano=ano, mes=mes, inicio=inicio, fim=fim)
        registros += _registros_estoque(empresa_id=empresa_id, ano=ano, mes=mes, ultimo_dia=ultimo_dia)
        RegistroBlocoK.objects.bulk_create(registros)

    resultado = list(listar_registros_bloco_k(empresa_id=empresa_id, ano=ano, mes=mes))

    logger.info(
        "bloco_k_gerado",
        extra={
            "event": "bloco_k_gerado",
            "empresa_id": str(empresa_id),
            "ano": ano,
            "mes": mes,
            "removidos": removidos,
            "total": len(resultado),
        },
    )
    return resultado


def listar_registros_bloco_k(*, empresa_id, ano: int, mes: int, tipo_registro: Optional[str] = None):
    validar_periodo(ano, mes)
    qs = RegistroBlocoK.objects.filter(empresa_id=empresa_id, ano=ano, mes=mes)
    if tipo_registro:
        if tipo_registro not in TipoRegistroBlocoK.values:
            raise ValidationError({
                "code": ERR_VALOR_INVALIDO,
                "message": f"Tipo de registro inválido: {tipo_registro!r}.",
            })
        qs = qs.filter(tipo_registro=tipo_registro)
    return qs.order_by("tipo_registro", "data_movimento", "codigo_item")
