# fiscal/models/nfse_models.py

import uuid
from decimal import Decimal

from django.conf import settings
from django.db import models


class AmbienteNfse(models.TextChoices):
    HOMOLOGATION = "HOMOLOGATION", "Homologação"
    PRODUCTION = "PRODUCTION", "Produção"


class StatusNfse(models.TextChoices):
    DRAFT = "DRAFT", "Rascunho"
    PENDING = "PENDING", "Aguardando prefeitura"
    AUTHORIZED = "AUTHORIZED", "Autorizada"
    DENIED = "DENIED", "Denegada"
    CANCELLED = "CANCELLED", "Cancelada"


class NfseConfig(models.Model):
    """
    Parâmetros de integração com a prefeitura. Uma por empresa.

    senha/token são gravados CIFRADOS (fiscal.crypto) e nunca devolvidos
    em texto puro pela API.
    """

    empresa = models.OneToOneField(
        "empresas.Empresa",
        on_delete=models.CASCADE,
        related_name="nfse_config",
    )

    codigo_provedor = models.CharField(max_length=30, help_text="Provedor/padrão do município (ABRASF, GINFES...).")
    codigo_municipio = models.CharField(max_length=7, help_text="Código IBGE do município.")
    ambiente = models.CharField(
        max_length=12,
        choices=AmbienteNfse.choices,
        default=AmbienteNfse.HOMOLOGATION,
    )

    caminho_certificado = models.CharField(max_length=255, blank=True, null=True)
    login = models.CharField(max_length=120, blank=True, null=True)
    senha = models.TextField(blank=True, null=True)
    token = models.TextField(blank=True, null=True)

    cnae = models.CharField(max_length=10, blank=True, null=True)
    codigo_servico = models.CharField(max_length=20, blank=True, null=True)
    aliquota_iss = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "nfse_config"
        verbose_name = "Configuração NFS-e da Empresa"
        verbose_name_plural = "Configurações NFS-e das Empresas"

    def __str__(self):
        return f"NFS-e - {self.empresa_id} ({self.ambiente})"


class NfseEmitida(models.Model):
    """
    Nota fiscal de serviço eletrônica (municipal).

    - codigo sequencial por empresa, sem buracos.
    - Nasce em DRAFT; CANCELLED só via cancelar_nfse, uma única vez.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="nfses",
    )
    codigo = models.PositiveIntegerField()

    # Cliente do cadastro comercial (só o UUID; o cadastro mora em outro módulo)
    cliente_id = models.UUIDField()

    codigo_servico = models.CharField(max_length=20)
    cnae = models.CharField(max_length=10, blank=True, null=True)
    descricao = models.TextField()
    data_competencia = models.DateField()

    valor_servico = models.DecimalField(max_digits=15, decimal_places=2)
    valor_deducao = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_base = models.DecimalField(max_digits=15, decimal_places=2)

    aliquota_iss = models.DecimalField(max_digits=7, decimal_places=4)
    valor_iss = models.DecimalField(max_digits=15, decimal_places=2)
    iss_retido = models.BooleanField(default=False)

    aliquota_pis = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)
    aliquota_cofins = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)
    aliquota_ir = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)
    aliquota_csll = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)
    aliquota_inss = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)

    valor_pis = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_cofins = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_ir = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_csll = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_inss = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_total_retido = models.DecimalField(max_digits=15, decimal_places=2, default=Decimal("0.00"))
    valor_liquido = models.DecimalField(max_digits=15, decimal_places=2)

    status = models.CharField(
        max_length=12,
        choices=StatusNfse.choices,
        default=StatusNfse.DRAFT,
    )

    # Retorno da prefeitura (preenchido pelo subsistema de transmissão)
    numero_nfse = models.CharField(max_length=30, blank=True, null=True)
    codigo_verificacao = models.CharField(max_length=60, blank=True, null=True)
    mensagem_retorno = models.TextField(blank=True, null=True)
    autorizada_em = models.DateTimeField(null=True, blank=True)

    cancelada_em = models.DateTimeField(null=True, blank=True)
    motivo_cancelamento = models.TextField(blank=True, null=True)

    criado_por = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="nfses_criadas",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "nfse_emitida"
        constraints = [
            models.UniqueConstraint(fields=["empresa", "codigo"], name="uniq_nfse_empresa_codigo"),
        ]
        indexes = [
            models.Index(fields=["empresa", "status"], name="nfse_emp_status_idx"),
            models.Index(fields=["empresa", "data_competencia"], name="nfse_emp_competencia_idx"),
        ]
        ordering = ["-codigo"]

    def __str__(self):
        return f"NFS-e {self.codigo} ({self.status})"
