# fiscal/models/apuracao_models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


class NaturezaItem(models.TextChoices):
    CREDIT = "CREDIT", "Crédito"
    DEBIT = "DEBIT", "Débito"


class ApuracaoImposto(models.Model):
    """
    Livro de créditos/débitos de um tipo de imposto (ICMS, IPI, PIS...) para
    uma empresa em um período.

    - No máximo uma por (empresa, tipo_imposto, ano, mes).
    - Status derivado de fechada_em: sem data = OPEN, com data = CLOSED.
    - Fechada, não recebe mais itens nem volta a abrir pelo fluxo normal.
    - Totais são sempre recalculados a partir do conjunto completo de itens.
    """

    STATUS_OPEN = "OPEN"
    STATUS_CLOSED = "CLOSED"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="apuracoes",
    )

    tipo_imposto = models.CharField(max_length=20)
    ano = models.PositiveSmallIntegerField()
    mes = models.PositiveSmallIntegerField()

    total_credito = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    total_debito = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    saldo = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    # Crédito transportado do período anterior e resultado do fechamento
    credito_anterior = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_a_recolher = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    credito_a_transportar = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))

    fechada_em = models.DateTimeField(null=True, blank=True)
    fechada_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="apuracoes_fechadas",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "apuracao_imposto"
        constraints = [
            models.UniqueConstraint(
                fields=["empresa", "tipo_imposto", "ano", "mes"],
                name="uniq_apuracao_empresa_tipo_periodo",
            ),
        ]
        ordering = ["tipo_imposto"]

    @property
    def status(self) -> str:
        return self.STATUS_CLOSED if self.fechada_em else self.STATUS_OPEN

    @property
    def fechada(self) -> bool:
        return self.fechada_em is not None

    def __str__(self):
        return f"Apuração {self.tipo_imposto} {self.mes:02d}/{self.ano} ({self.status})"


class ItemApuracao(models.Model):
    """
    Lançamento de crédito ou débito ligado a um documento de origem.
    O valor_imposto é sempre não-negativo; o sinal vem da natureza.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    apuracao = models.ForeignKey(
        "fiscal.ApuracaoImposto",
        on_delete=models.PROTECT,
        related_name="itens",
    )

    tipo_documento = models.CharField(max_length=30)
    documento_id = models.UUIDField(null=True, blank=True)
    numero_documento = models.CharField(max_length=60, blank=True, null=True)
    cfop = models.CharField(max_length=4, blank=True, null=True)

    valor_base = models.DecimalField(max_digits=15, decimal_places=2)
    aliquota = models.DecimalField(max_digits=7, decimal_places=4)
    valor_imposto = models.DecimalField(max_digits=15, decimal_places=2)
    natureza = models.CharField(max_length=6, choices=NaturezaItem.choices)
    descricao = models.CharField(max_length=255, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "apuracao_item"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.natureza} {self.valor_imposto} ({self.tipo_documento})"
