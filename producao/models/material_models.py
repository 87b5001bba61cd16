# producao/models/material_models.py

import uuid

from django.db import models


class Material(models.Model):
    """
    Item de estoque (produto acabado, insumo, embalagem...).

    tipo_item segue a tabela do registro 0200 do SPED (00 a 10), usada
    pelo Bloco K para decidir o que entra no inventário escriturado.
    """

    TIPO_ITEM_CHOICES = (
        ("00", "00 - Mercadoria para revenda"),
        ("01", "01 - Matéria-prima"),
        ("02", "02 - Embalagem"),
        ("03", "03 - Produto em processo"),
        ("04", "04 - Produto acabado"),
        ("05", "05 - Subproduto"),
        ("06", "06 - Produto intermediário"),
        ("07", "07 - Material de uso e consumo"),
        ("08", "08 - Ativo imobilizado"),
        ("09", "09 - Serviços"),
        ("10", "10 - Outros insumos"),
        ("99", "99 - Outras"),
    )

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="materiais",
    )

    codigo = models.CharField(
        max_length=60,
        help_text="Código do item (COD_ITEM do registro 0200).",
    )
    descricao = models.CharField(max_length=255)
    unidade = models.CharField(max_length=6, default="UN")
    tipo_item = models.CharField(max_length=2, choices=TIPO_ITEM_CHOICES, default="04")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "material"
        unique_together = (("empresa", "codigo"),)

    def __str__(self):
        return f"{self.codigo} - {self.descricao}"
