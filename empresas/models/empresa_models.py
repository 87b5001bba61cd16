import uuid

from django.conf import settings
from django.db import models


class Empresa(models.Model):
    """
    Empresa (tenant) dona de todos os registros fiscais.

    O isolamento é por linha: toda tabela fiscal carrega empresa_id e
    os services sempre filtram por ela.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    cnpj_raiz = models.CharField(max_length=14, unique=True)
    nome = models.CharField(max_length=150)
    uf = models.CharField(max_length=2, blank=True, default="")
    ativo = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "empresa"
        verbose_name = "Empresa"
        verbose_name_plural = "Empresas"

    def __str__(self):
        return f"{self.nome} ({self.cnpj_raiz})"


class UsuarioEmpresa(models.Model):
    """
    Vínculo usuário ↔ empresa. Um usuário opera em uma única empresa;
    é daqui que a API resolve o empresa_id da requisição.
    """
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vinculo_empresa",
    )
    empresa = models.ForeignKey(
        Empresa,
        on_delete=models.CASCADE,
        related_name="usuarios",
    )

    class Meta:
        db_table = "usuario_empresa"

    def __str__(self):
        return f"{self.user} → {self.empresa}"
