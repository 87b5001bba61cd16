from .empresa_models import Empresa, UsuarioEmpresa


__all__ = [
    "Empresa",
    "UsuarioEmpresa",
]
