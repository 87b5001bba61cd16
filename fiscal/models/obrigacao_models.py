# fiscal/models/obrigacao_models.py

import uuid

from django.db import models


class StatusObrigacao(models.TextChoices):
    PENDING = "PENDING", "Pendente"
    GENERATING = "GENERATING", "Gerando arquivo"
    GENERATED = "GENERATED", "Arquivo gerado"
    TRANSMITTED = "TRANSMITTED", "Transmitida"
    ACCEPTED = "ACCEPTED", "Aceita"
    REJECTED = "REJECTED", "Rejeitada"
    RECTIFIED = "RECTIFIED", "Retificada"


class ObrigacaoFiscal(models.Model):
    """
    Uma entrega de obrigação acessória (SPED, EFD-Reinf, eSocial...) de uma
    empresa para um período (ano/mês de referência).

    - Única por (empresa, codigo, ano, mes).
    - Criada por gerar_obrigacoes e alterada apenas por atualizar_status_obrigacao.
    - Nunca é apagada: serve de trilha de auditoria das entregas.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="obrigacoes_fiscais",
    )

    codigo = models.CharField(max_length=30)
    nome = models.CharField(max_length=120)
    ano = models.PositiveSmallIntegerField()
    mes = models.PositiveSmallIntegerField()
    data_vencimento = models.DateField()

    status = models.CharField(
        max_length=20,
        choices=StatusObrigacao.choices,
        default=StatusObrigacao.PENDING,
    )

    # Dados devolvidos pelo subsistema de transmissão
    numero_recibo = models.CharField(max_length=100, blank=True, null=True)
    nome_arquivo = models.CharField(max_length=255, blank=True, null=True)
    conteudo_arquivo = models.TextField(blank=True, null=True)
    mensagem_erro = models.TextField(blank=True, null=True)

    transmitida_em = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "obrigacao_fiscal"
        constraints = [
            models.UniqueConstraint(
                fields=["empresa", "codigo", "ano", "mes"],
                name="uniq_obrigacao_empresa_codigo_periodo",
            ),
        ]
        ordering = ["data_vencimento", "codigo"]

    def __str__(self):
        return f"{self.codigo} {self.mes:02d}/{self.ano} ({self.status})"
