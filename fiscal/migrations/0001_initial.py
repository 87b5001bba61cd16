import uuid
from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("empresas", "0001_initial"),
        ("producao", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="ObrigacaoFiscal",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("codigo", models.CharField(max_length=30)),
                ("nome", models.CharField(max_length=120)),
                ("ano", models.PositiveSmallIntegerField()),
                ("mes", models.PositiveSmallIntegerField()),
                ("data_vencimento", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("PENDING", "Pendente"),
                            ("GENERATING", "Gerando arquivo"),
                            ("GENERATED", "Arquivo gerado"),
                            ("TRANSMITTED", "Transmitida"),
                            ("ACCEPTED", "Aceita"),
                            ("REJECTED", "Rejeitada"),
                            ("RECTIFIED", "Retificada"),
                        ],
                        default="PENDING",
                        max_length=20,
                    ),
                ),
                ("numero_recibo", models.CharField(blank=True, max_length=100, null=True)),
                ("nome_arquivo", models.CharField(blank=True, max_length=255, null=True)),
                ("conteudo_arquivo", models.TextField(blank=True, null=True)),
                ("mensagem_erro", models.TextField(blank=True, null=True)),
                ("transmitida_em", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="obrigacoes_fiscais",
                        to="empresas.empresa",
                    ),
                ),
            ],
            options={
                "db_table": "obrigacao_fiscal",
                "ordering": ["data_vencimento", "codigo"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("empresa", "codigo", "ano", "mes"),
                        name="uniq_obrigacao_empresa_codigo_periodo",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ApuracaoImposto",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tipo_imposto", models.CharField(max_length=20)),
                ("ano", models.PositiveSmallIntegerField()),
                ("mes", models.PositiveSmallIntegerField()),
                ("total_credito", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("total_debito", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("saldo", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("credito_anterior", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_a_recolher", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("credito_a_transportar", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("fechada_em", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="apuracoes",
                        to="empresas.empresa",
                    ),
                ),
                (
                    "fechada_por",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="apuracoes_fechadas",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "apuracao_imposto",
                "ordering": ["tipo_imposto"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("empresa", "tipo_imposto", "ano", "mes"),
                        name="uniq_apuracao_empresa_tipo_periodo",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="ItemApuracao",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tipo_documento", models.CharField(max_length=30)),
                ("documento_id", models.UUIDField(blank=True, null=True)),
                ("numero_documento", models.CharField(blank=True, max_length=60, null=True)),
                ("cfop", models.CharField(blank=True, max_length=4, null=True)),
                ("valor_base", models.DecimalField(decimal_places=2, max_digits=15)),
                ("aliquota", models.DecimalField(decimal_places=4, max_digits=7)),
                ("valor_imposto", models.DecimalField(decimal_places=2, max_digits=15)),
                (
                    "natureza",
                    models.CharField(choices=[("CREDIT", "Crédito"), ("DEBIT", "Débito")], max_length=6),
                ),
                ("descricao", models.CharField(blank=True, max_length=255, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "apuracao",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="itens",
                        to="fiscal.apuracaoimposto",
                    ),
                ),
            ],
            options={
                "db_table": "apuracao_item",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="CalculoDifal",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tipo_documento", models.CharField(max_length=30)),
                ("documento_id", models.UUIDField(blank=True, null=True)),
                ("numero_documento", models.CharField(blank=True, max_length=60, null=True)),
                ("uf_origem", models.CharField(max_length=2)),
                ("uf_destino", models.CharField(max_length=2)),
                ("valor_produto", models.DecimalField(decimal_places=2, max_digits=15)),
                ("aliquota_icms_origem", models.DecimalField(decimal_places=4, max_digits=7)),
                ("aliquota_icms_destino", models.DecimalField(decimal_places=4, max_digits=7)),
                ("aliquota_interestadual", models.DecimalField(decimal_places=4, max_digits=7)),
                ("aliquota_fcp", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("valor_icms_origem", models.DecimalField(decimal_places=2, max_digits=15)),
                ("valor_icms_destino", models.DecimalField(decimal_places=2, max_digits=15)),
                ("valor_difal", models.DecimalField(decimal_places=2, max_digits=15)),
                ("valor_fcp", models.DecimalField(decimal_places=2, max_digits=15)),
                ("valor_total", models.DecimalField(decimal_places=2, max_digits=15)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="calculos_difal",
                        to="empresas.empresa",
                    ),
                ),
            ],
            options={
                "db_table": "calculo_difal",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["empresa", "uf_origem", "uf_destino"], name="difal_emp_ufs_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="NfseConfig",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "codigo_provedor",
                    models.CharField(help_text="Provedor/padrão do município (ABRASF, GINFES...).", max_length=30),
                ),
                ("codigo_municipio", models.CharField(help_text="Código IBGE do município.", max_length=7)),
                (
                    "ambiente",
                    models.CharField(
                        choices=[("HOMOLOGATION", "Homologação"), ("PRODUCTION", "Produção")],
                        default="HOMOLOGATION",
                        max_length=12,
                    ),
                ),
                ("caminho_certificado", models.CharField(blank=True, max_length=255, null=True)),
                ("login", models.CharField(blank=True, max_length=120, null=True)),
                ("senha", models.TextField(blank=True, null=True)),
                ("token", models.TextField(blank=True, null=True)),
                ("cnae", models.CharField(blank=True, max_length=10, null=True)),
                ("codigo_servico", models.CharField(blank=True, max_length=20, null=True)),
                ("aliquota_iss", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "empresa",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="nfse_config",
                        to="empresas.empresa",
                    ),
                ),
            ],
            options={
                "verbose_name": "Configuração NFS-e da Empresa",
                "verbose_name_plural": "Configurações NFS-e das Empresas",
                "db_table": "nfse_config",
            },
        ),
        migrations.CreateModel(
            name="NfseEmitida",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("codigo", models.PositiveIntegerField()),
                ("cliente_id", models.UUIDField()),
                ("codigo_servico", models.CharField(max_length=20)),
                ("cnae", models.CharField(blank=True, max_length=10, null=True)),
                ("descricao", models.TextField()),
                ("data_competencia", models.DateField()),
                ("valor_servico", models.DecimalField(decimal_places=2, max_digits=15)),
                ("valor_deducao", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_base", models.DecimalField(decimal_places=2, max_digits=15)),
                ("aliquota_iss", models.DecimalField(decimal_places=4, max_digits=7)),
                ("valor_iss", models.DecimalField(decimal_places=2, max_digits=15)),
                ("iss_retido", models.BooleanField(default=False)),
                ("aliquota_pis", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("aliquota_cofins", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("aliquota_ir", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("aliquota_csll", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("aliquota_inss", models.DecimalField(blank=True, decimal_places=4, max_digits=7, null=True)),
                ("valor_pis", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_cofins", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_ir", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_csll", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_inss", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_total_retido", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=15)),
                ("valor_liquido", models.DecimalField(decimal_places=2, max_digits=15)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("DRAFT", "Rascunho"),
                            ("PENDING", "Aguardando prefeitura"),
                            ("AUTHORIZED", "Autorizada"),
                            ("DENIED", "Denegada"),
                            ("CANCELLED", "Cancelada"),
                        ],
                        default="DRAFT",
                        max_length=12,
                    ),
                ),
                ("numero_nfse", models.CharField(blank=True, max_length=30, null=True)),
                ("codigo_verificacao", models.CharField(blank=True, max_length=60, null=True)),
                ("mensagem_retorno", models.TextField(blank=True, null=True)),
                ("autorizada_em", models.DateTimeField(blank=True, null=True)),
                ("cancelada_em", models.DateTimeField(blank=True, null=True)),
                ("motivo_cancelamento", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "criado_por",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="nfses_criadas",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="nfses",
                        to="empresas.empresa",
                    ),
                ),
            ],
            options={
                "db_table": "nfse_emitida",
                "ordering": ["-codigo"],
                "indexes": [
                    models.Index(fields=["empresa", "status"], name="nfse_emp_status_idx"),
                    models.Index(fields=["empresa", "data_competencia"], name="nfse_emp_competencia_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("empresa", "codigo"), name="uniq_nfse_empresa_codigo"),
                ],
            },
        ),
        migrations.CreateModel(
            name="RegistroBlocoK",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("ano", models.PositiveSmallIntegerField()),
                ("mes", models.PositiveSmallIntegerField()),
                (
                    "tipo_registro",
                    models.CharField(
                        choices=[
                            ("K200", "K200 - Estoque escriturado"),
                            ("K230", "K230 - Itens produzidos"),
                            ("K235", "K235 - Insumos consumidos"),
                        ],
                        max_length=4,
                    ),
                ),
                (
                    "tipo_movimento",
                    models.CharField(
                        choices=[
                            ("INVENTORY", "Estoque final"),
                            ("PRODUCTION", "Produção"),
                            ("CONSUMPTION", "Consumo"),
                        ],
                        max_length=12,
                    ),
                ),
                ("codigo_item", models.CharField(max_length=60)),
                ("data_movimento", models.DateField()),
                ("quantidade", models.DecimalField(decimal_places=4, max_digits=15)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "empresa",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registros_bloco_k",
                        to="empresas.empresa",
                    ),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registros_bloco_k",
                        to="producao.material",
                    ),
                ),
                (
                    "ordem_producao",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registros_bloco_k",
                        to="producao.ordemproducao",
                    ),
                ),
            ],
            options={
                "db_table": "bloco_k_registro",
                "ordering": ["tipo_registro", "data_movimento", "codigo_item"],
                "indexes": [
                    models.Index(fields=["empresa", "ano", "mes", "tipo_registro"], name="bloco_k_emp_periodo_idx"),
                ],
            },
        ),
    ]
