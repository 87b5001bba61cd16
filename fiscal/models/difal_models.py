# fiscal/models/difal_models.py

import uuid

from django.db import models

from fiscal.exceptions import ERR_CALCULO_IMUTAVEL, EstadoInvalido



class CalculoDifal(models.Model):
    """
    Registro de auditoria de um cálculo de DIFAL. Imutável depois de criado.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    empresa = models.ForeignKey(
        "empresas.Empresa",
        on_delete=models.PROTECT,
        related_name="calculos_difal",
    )

    tipo_documento = models.CharField(max_length=30)
    documento_id = models.UUIDField(null=True, blank=True)
    numero_documento = models.CharField(max_length=60, blank=True, null=True)

    uf_origem = models.CharField(max_length=2)
    uf_destino = models.CharField(max_length=2)

    valor_produto = models.DecimalField(max_digits=15, decimal_places=2)
    aliquota_icms_origem = models.DecimalField(max_digits=7, decimal_places=4)
    aliquota_icms_destino = models.DecimalField(max_digits=7, decimal_places=4)
    aliquota_interestadual = models.DecimalField(max_digits=7, decimal_places=4)
    aliquota_fcp = models.DecimalField(max_digits=7, decimal_places=4, null=True, blank=True)

    valor_icms_origem = models.DecimalField(max_digits=15, decimal_places=2)
    valor_icms_destino = models.DecimalField(max_digits=15, decimal_places=2)
    valor_difal = models.DecimalField(max_digits=15, decimal_places=2)
    valor_fcp = models.DecimalField(max_digits=15, decimal_places=2)
    valor_total = models.DecimalField(max_digits=15, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "calculo_difal"
        indexes = [
            models.Index(fields=["empresa", "uf_origem", "uf_destino"], name="difal_emp_ufs_idx"),
        ]
        ordering = ["-created_at"]

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise EstadoInvalido(ERR_CALCULO_IMUTAVEL, "Cálculo de DIFAL não pode ser alterado.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise EstadoInvalido(ERR_CALCULO_IMUTAVEL, "Cálculo de DIFAL não pode ser excluído.")

    def __str__(self):
        return f"DIFAL {self.uf_origem}->{self.uf_destino}: {self.valor_total}"
