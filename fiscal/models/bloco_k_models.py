# fiscal/models/bloco_k_models.py

import uuid

from django.db import models


class TipoRegistroBlocoK(models.TextChoices):
    K200 = "K200", "K200 - Estoque escriturado"
    K230 = "K230", "K230 - Itens produzidos"
    K235 = "K235", "K235 - Insumos consumidos"


class TipoMovimentoBlocoK(models.TextChoices):
    INVENTORY = "INVENTORY", "Estoque final"
    PRODUCTION = "PRODUCTION", "Produção"
    CONSUMPTION = "CONSUMPTION", "Consumo"


class RegistroBlocoK(models.Model):
    """
    Linha do Bloco K (SPED Fiscal) de um período.

    Gerada em lote por gerar_registros_bloco_k; regerar o período substitui
    o conjunto anterior inteiro. Não é editada linha a linha.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="registros_bloco_k",
    )
    ano = models.PositiveSmallIntegerField()
    mes = models.PositiveSmallIntegerField()

    tipo_registro = models.CharField(max_length=4, choices=TipoRegistroBlocoK.choices)
    tipo_movimento = models.CharField(max_length=12, choices=TipoMovimentoBlocoK.choices)

    material = models.ForeignKey(
        "producao.Material",
        on_delete=models.PROTECT,
        related_name="registros_bloco_k",
    )
    codigo_item = models.CharField(max_length=60)
    ordem_producao = models.ForeignKey(
        "producao.OrdemProducao",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="registros_bloco_k",
    )

    data_movimento = models.DateField()
    quantidade = models.DecimalField(max_digits=15, decimal_places=4)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "bloco_k_registro"
        indexes = [
            models.Index(fields=["empresa", "ano", "mes", "tipo_registro"], name="bloco_k_emp_periodo_idx"),
        ]
        ordering = ["tipo_registro", "data_movimento", "codigo_item"]

    def __str__(self):
        return f"{self.tipo_registro} {self.codigo_item} {self.quantidade} em {self.data_movimento}"
