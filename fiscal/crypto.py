# fiscal/crypto.py

from typing import Optional

from cryptography.fernet import Fernet
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


def validar_chave_cifragem() -> None:
    """
    Garante que FISCAL_ENCRYPTION_KEY existe e é uma chave Fernet válida.
    Chamado na inicialização do app fiscal.
    """
    chave = getattr(settings, "FISCAL_ENCRYPTION_KEY", "")
    if not chave:
        raise ImproperlyConfigured(
            "FISCAL_ENCRYPTION_KEY não configurada; defina a variável de ambiente."
        )
    try:
        Fernet(chave)
    except (ValueError, TypeError) as exc:
        raise ImproperlyConfigured("FISCAL_ENCRYPTION_KEY não é uma chave Fernet válida.") from exc


def _fernet() -> Fernet:
    return Fernet(settings.FISCAL_ENCRYPTION_KEY)


def cifrar(texto: Optional[str]) -> Optional[str]:
    """Cifra um segredo (senha/token da prefeitura). None/vazio passa direto."""
    if not texto:
        return None
    return _fernet().encrypt(texto.encode()).decode()


def decifrar(texto_cifrado: Optional[str]) -> Optional[str]:
    if not texto_cifrado:
        return None
    return _fernet().decrypt(texto_cifrado.encode()).decode()
