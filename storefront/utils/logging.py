# storefront/utils/logging.py
import logging

from storefront.utils.settings import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_configured = False


def get_logger(name: str) -> logging.Logger:
    global _configured
    if not _configured:
        logging.basicConfig(level=LOG_LEVEL.upper(), format=_FORMAT)
        _configured = True
    return logging.getLogger(name)


def log_rejection(logger: logging.Logger, operation: str, exc: Exception) -> Exception:
    """Loguje odrzucenie (operacja, encja, kod, przyczyna) i zwraca wyjatek do `raise`."""
    entity_id = getattr(exc, "entity_id", None)
    code = getattr(exc, "code", type(exc).__name__)
    detail = getattr(exc, "detail", None) or str(exc)
    logger.warning(f"[{operation}] {entity_id}: {code}: {detail}")
    return exc
