# storefront/api/context.py
from fastapi import Depends, Header, HTTPException

from storefront.domain.errors import (
    CompensatedCreationFailure,
    InvalidTransitionError,
    InvoiceGenerationFailed,
    InvoiceNotAllowedError,
    NotFoundError,
    StorefrontError,
    TransitionConflictError,
    UpstreamFailure,
    ValidationError,
)
from storefront.domain.schemas import RequestContext
from storefront.utils.messages import pick_locale, translate

# kolejnosc ma znaczenie: podklasy przed klasami bazowymi
_STATUS_CODES = (
    (InvoiceNotAllowedError, 400),
    (ValidationError, 400),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (TransitionConflictError, 409),
    (CompensatedCreationFailure, 500),
    (InvoiceGenerationFailed, 503),
    (UpstreamFailure, 502),
)


def get_request_context(
    x_user_id: str | None = Header(default=None),
    x_user_email: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
    accept_language: str | None = Header(default=None),
) -> RequestContext:
    # naglowki ustawia provider auth przed nami, ufamy im wprost
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail=_detail("unauthorized", pick_locale(accept_language)))
    return RequestContext(
        user_id=x_user_id.strip(),
        email=x_user_email,
        role=(x_user_role or "customer").strip().lower(),
    )


def require_admin(
    ctx: RequestContext = Depends(get_request_context),
    accept_language: str | None = Header(default=None),
) -> RequestContext:
    if not ctx.is_admin:
        raise HTTPException(status_code=403, detail=_detail("forbidden", pick_locale(accept_language)))
    return ctx


def get_locale(accept_language: str | None = Header(default=None)) -> str:
    return pick_locale(accept_language)


def to_http(exc: Exception, locale: str) -> HTTPException:
    """Blad domeny -> HTTPException z przetlumaczonym komunikatem (bez szczegolow z bazy)."""
    if isinstance(exc, PermissionError):
        return HTTPException(status_code=403, detail=_detail("forbidden", locale))

    if isinstance(exc, StorefrontError):
        for error_type, status_code in _STATUS_CODES:
            if isinstance(exc, error_type):
                headers = {"Retry-After": "5"} if status_code == 503 else None
                return HTTPException(
                    status_code=status_code,
                    detail=_detail(exc.code, locale),
                    headers=headers,
                )

    return HTTPException(status_code=500, detail=_detail("internal_error", locale))


def _detail(code: str, locale: str) -> dict:
    return {"error": code, "message": translate(code, locale)}
