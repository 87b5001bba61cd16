# tests/fiscal/test_crypto.py

import pytest
from cryptography.fernet import Fernet
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from fiscal.crypto import cifrar, decifrar, validar_chave_cifragem


def test_chave_ausente_impede_inicializacao():
    with override_settings(FISCAL_ENCRYPTION_KEY=""):
        with pytest.raises(ImproperlyConfigured):
            validar_chave_cifragem()


def test_chave_invalida_impede_inicializacao():
    with override_settings(FISCAL_ENCRYPTION_KEY="nao-e-fernet"):
        with pytest.raises(ImproperlyConfigured):
            validar_chave_cifragem()


def test_chave_configurada_cifra_e_decifra():
    with override_settings(FISCAL_ENCRYPTION_KEY=Fernet.generate_key().decode()):
        validar_chave_cifragem()
        cifrado = cifrar("s3nha")
        assert cifrado != "s3nha"
        assert decifrar(cifrado) == "s3nha"
