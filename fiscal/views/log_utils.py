# fiscal/views/log_utils.py

import logging

from rest_framework.exceptions import APIException

logger = logging.getLogger("erp.fiscal")

_OUTCOMES = {
    400: "validation_error",
    401: "not_authenticated",
    403: "permission_denied",
    404: "not_found",
    409: "invalid_state",
}


def registrar_falha(evento: str, *, request, empresa_id, exc: APIException) -> None:
    """Warning estruturado para erro de domínio/validação; quem chama re-levanta."""
    logger.warning(
        f"{evento}_falhou",
        extra={
            "event": evento,
            "empresa_id": str(empresa_id) if empresa_id else None,
            "user_id": getattr(request.user, "id", None),
            "status_code": exc.status_code,
            "detail": exc.detail,
            "outcome": _OUTCOMES.get(exc.status_code, "error"),
        },
    )
