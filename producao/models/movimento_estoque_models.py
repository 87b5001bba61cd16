# producao/models/movimento_estoque_models.py

import uuid

from django.db import models


class MovimentoEstoque(models.Model):
    """
    Entrada ou saída de estoque de um material. O saldo em uma data é
    Σ entradas − Σ saídas até aquela data (base do K200).
    """

    class Tipo(models.TextChoices):
        ENTRADA = "ENTRADA", "Entrada"
        SAIDA = "SAIDA", "Saída"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="movimentos_estoque",
    )
    material = models.ForeignKey(
        "producao.Material",
        on_delete=models.PROTECT,
        related_name="movimentos",
    )
    tipo = models.CharField(max_length=10, choices=Tipo.choices)
    quantidade = models.DecimalField(max_digits=15, decimal_places=4)
    data_movimento = models.DateField()
    documento = models.CharField(max_length=60, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "movimento_estoque"
        indexes = [
            models.Index(fields=["empresa", "material", "data_movimento"], name="mov_estoque_emp_mat_data_idx"),
        ]

    def __str__(self):
        return f"{self.tipo} {self.quantidade} {self.material_id} em {self.data_movimento}"
