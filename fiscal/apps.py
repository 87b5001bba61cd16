from django.apps import AppConfig


class FiscalConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fiscal"
    verbose_name = "Motor fiscal"

    def ready(self):
        from fiscal.crypto import validar_chave_cifragem

        validar_chave_cifragem()
