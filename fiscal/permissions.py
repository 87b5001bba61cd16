# fiscal/permissions.py
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission

ERR_SEM_EMPRESA = "AUTH_1006"


def empresa_id_da_requisicao(request):
    """
    Empresa (tenant) do usuário autenticado. Todo service fiscal recebe
    esse id e filtra por ele; nada da requisição escolhe a empresa.
    """
    vinculo = getattr(request.user, "vinculo_empresa", None)
    if vinculo is None:
        raise PermissionDenied({
            "code": ERR_SEM_EMPRESA,
            "message": "Usuário não está vinculado a nenhuma empresa.",
        })
    return vinculo.empresa_id


class PossuiEmpresaVinculada(BasePermission):
    """
    Usuário autenticado e vinculado a uma empresa.
    - Não autenticado: devolve False e o DRF responde 401.
    - Sem vínculo: 403 com code AUTH_1006.
    """
    message = "Usuário não está vinculado a nenhuma empresa."

    def has_permission(self, request, view):
        user = getattr(request, "user", None)
        if not user or not user.is_authenticated:
            return False
        empresa_id_da_requisicao(request)
        return True
