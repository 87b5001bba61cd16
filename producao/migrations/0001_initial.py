import uuid
from decimal import Decimal

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("empresas", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Material",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("codigo", models.CharField(help_text="Código do item (COD_ITEM do registro 0200).", max_length=60)),
                ("descricao", models.CharField(max_length=255)),
                ("unidade", models.CharField(default="UN", max_length=6)),
                (
                    "tipo_item",
                    models.CharField(
                        choices=[
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
                        ],
                        default="04",
                        max_length=2,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="materiais",
                        to="empresas.empresa",
                    ),
                ),
            ],
            options={
                "db_table": "material",
                "unique_together": {("empresa", "codigo")},
            },
        ),
        migrations.CreateModel(
            name="OrdemProducao",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("numero", models.CharField(max_length=30)),
                ("quantidade_planejada", models.DecimalField(decimal_places=4, max_digits=15)),
                ("quantidade_produzida", models.DecimalField(decimal_places=4, default=Decimal("0"), max_digits=15)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PLANEJADA", "Planejada"),
                            ("EM_PRODUCAO", "Em produção"),
                            ("CONCLUIDA", "Concluída"),
                            ("CANCELADA", "Cancelada"),
                        ],
                        default="PLANEJADA",
                        max_length=20,
                    ),
                ),
                ("iniciada_em", models.DateTimeField(blank=True, null=True)),
                ("concluida_em", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ordens_producao",
                        to="empresas.empresa",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        help_text="Item produzido pela ordem.",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="ordens_producao",
                        to="producao.material",
                    ),
                ),
            ],
            options={
                "db_table": "ordem_producao",
                "indexes": [
                    models.Index(fields=["empresa", "status", "concluida_em"], name="ordem_prod_emp_status_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ConsumoOrdemProducao",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("quantidade", models.DecimalField(decimal_places=4, max_digits=15)),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="consumos",
                        to="producao.material",
                    ),
                ),
                (
                    "ordem",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="consumos",
                        to="producao.ordemproducao",
                    ),
                ),
            ],
            options={
                "db_table": "ordem_producao_consumo",
            },
        ),
        migrations.CreateModel(
            name="MovimentoEstoque",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                (
                    "tipo",
                    models.CharField(
                        choices=[("ENTRADA", "Entrada"), ("SAIDA", "Saída")],
                        max_length=10,
                    ),
                ),
                ("quantidade", models.DecimalField(decimal_places=4, max_digits=15)),
                ("data_movimento", models.DateField()),
                ("documento", models.CharField(blank=True, default="", max_length=60)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movimentos_estoque",
                        to="empresas.empresa",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="movimentos",
                        to="producao.material",
                    ),
                ),
            ],
            options={
                "db_table": "movimento_estoque",
                "indexes": [
                    models.Index(fields=["empresa", "material", "data_movimento"], name="mov_estoque_emp_mat_data_idx"),
                ],
            },
        ),
    ]
