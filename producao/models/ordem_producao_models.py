# producao/models/ordem_producao_models.py

import uuid
from decimal import Decimal

from django.db import models


class OrdemProducao(models.Model):
    """
    Ordem de produção. Só ordens CONCLUIDAS dentro do período
    alimentam os registros K230/K235.
    """

    class Status(models.TextChoices):
        PLANEJADA = "PLANEJADA", "Planejada"
        EM_PRODUCAO = "EM_PRODUCAO", "Em produção"
        CONCLUIDA = "CONCLUIDA", "Concluída"
        CANCELADA = "CANCELADA", "Cancelada"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="ordens_producao",
    )
    material = models.ForeignKey(
        "producao.Material",
        on_delete=models.PROTECT,
        related_name="ordens_producao",
        help_text="Item produzido pela ordem.",
    )

    numero = models.CharField(max_length=30)
    quantidade_planejada = models.DecimalField(max_digits=15, decimal_places=4)
    quantidade_produzida = models.DecimalField(
        max_digits=15,
        decimal_places=4,
        default=Decimal("0"),
    )

    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PLANEJADA,
    )
    iniciada_em = models.DateTimeField(null=True, blank=True)
    concluida_em = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "ordem_producao"
        indexes = [
            models.Index(fields=["empresa", "status", "concluida_em"], name="ordem_prod_emp_status_idx"),
        ]

    def __str__(self):
        return f"OP {self.numero} ({self.status})"


class ConsumoOrdemProducao(models.Model):
    """Insumo consumido por uma ordem de produção."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    ordem = models.ForeignKey(
        "producao.OrdemProducao",
        on_delete=models.CASCADE,
        related_name="consumos",
    )
    material = models.ForeignKey(
        "producao.Material",
        on_delete=models.PROTECT,
        related_name="consumos",
    )
    quantidade = models.DecimalField(max_digits=15, decimal_places=4)

    class Meta:
        db_table = "ordem_producao_consumo"

    def __str__(self):
        return f"{self.material_id}: {self.quantidade}"
