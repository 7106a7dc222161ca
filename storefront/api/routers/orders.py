# storefront/api/routers/orders.py
from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response
from sqlalchemy.orm import Session

from storefront.api.context import get_locale, get_request_context, require_admin, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import (
    CheckoutIn,
    OrderCreate,
    OrderCreatedOut,
    OrderOut,
    OrderPageOut,
    OrderStatsOut,
    RequestContext,
    StatusUpdateIn,
    SuccessOut,
    TotalCorrectionIn,
)
from storefront.domain.status import OrderStatus
from storefront.services.invoice_service import InvoiceService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService
from storefront.services.render_client import RenderClient
from storefront.services.stats_service import StatsService
from storefront.services.status_service import StatusService
from storefront.services.storage_client import StorageClient

router = APIRouter(prefix="/orders", tags=["orders"])


def get_notification_service() -> NotificationService:
    return NotificationService()


def get_render_client() -> RenderClient:
    return RenderClient()


def get_storage_client() -> StorageClient:
    return StorageClient()


def get_order_service(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
) -> OrderService:
    return OrderService(db, notification_service=notifier)


def get_status_service(
    db: Session = Depends(get_db),
    notifier: NotificationService = Depends(get_notification_service),
) -> StatusService:
    return StatusService(db, notification_service=notifier)


def get_invoice_service(
    db: Session = Depends(get_db),
    render_client: RenderClient = Depends(get_render_client),
    storage_client: StorageClient = Depends(get_storage_client),
) -> InvoiceService:
    return InvoiceService(db, render_client=render_client, storage_client=storage_client)


def get_stats_service(db: Session = Depends(get_db)) -> StatsService:
    return StatsService(db)


@router.post("/", response_model=OrderCreatedOut, status_code=201)
def create_order(
    payload: OrderCreate,
    ctx: RequestContext = Depends(get_request_context),
    locale: str = Depends(get_locale),
    svc: OrderService = Depends(get_order_service),
):
    """
    Tworzy zamówienie z podanych pozycji.
    Suma (jesli podana) musi zgadzac sie z cenami z katalogu.
    """
    try:
        order_id = svc.create_order(
            customer_id=ctx.user_id,
            shipping_address_id=payload.shipping_address_id,
            items=payload.items,
            delivery_fee=payload.delivery_fee,
            payment_method=payload.payment_method,
            expected_total=payload.total_amount,
            notes=payload.notes,
        )
    except StorefrontError as e:
        raise to_http(e, locale)
    return {"order_id": order_id}


@router.post("/checkout", response_model=OrderCreatedOut, status_code=201)
def checkout(
    payload: CheckoutIn,
    ctx: RequestContext = Depends(get_request_context),
    locale: str = Depends(get_locale),
    svc: OrderService = Depends(get_order_service),
):
    """
    Tworzy zamówienie z koszyka klienta (ceny i dostawa liczone po stronie serwera).
    """
    try:
        order_id = svc.checkout(
            customer_id=ctx.user_id,
            payment_method=payload.payment_method,
            shipping_address_id=payload.shipping_address_id,
            notes=payload.notes,
        )
    except StorefrontError as e:
        raise to_http(e, locale)
    return {"order_id": order_id}


@router.get("/", response_model=OrderPageOut)
def list_orders(
    status: OrderStatus | None = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    ctx: RequestContext = Depends(get_request_context),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(ctx, status=status, page=page, limit=limit)


@router.get("/stats", response_model=OrderStatsOut)
def order_stats(
    _: RequestContext = Depends(require_admin),
    svc: StatsService = Depends(get_stats_service),
):
    return svc.get_stats()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: str,
    ctx: RequestContext = Depends(get_request_context),
    locale: str = Depends(get_locale),
    svc: OrderService = Depends(get_order_service),
):
    """
    Pobiera szczegóły zamówienia.
    """
    try:
        return svc.get_order(order_id, ctx)
    except (PermissionError, StorefrontError) as e:
        raise to_http(e, locale)


@router.post("/{order_id}/confirm", response_model=SuccessOut)
def confirm_order(
    order_id: str,
    _: RequestContext = Depends(require_admin),
    locale: str = Depends(get_locale),
    svc: StatusService = Depends(get_status_service),
):
    try:
        svc.confirm(order_id)
    except StorefrontError as e:
        raise to_http(e, locale)
    return {"success": True}


@router.post("/{order_id}/cancel", response_model=SuccessOut)
def cancel_order(
    order_id: str,
    _: RequestContext = Depends(require_admin),
    locale: str = Depends(get_locale),
    svc: StatusService = Depends(get_status_service),
):
    try:
        svc.cancel(order_id)
    except StorefrontError as e:
        raise to_http(e, locale)
    return {"success": True}


@router.post("/{order_id}/update-status", response_model=SuccessOut)
def update_status(
    order_id: str,
    payload: StatusUpdateIn,
    _: RequestContext = Depends(require_admin),
    locale: str = Depends(get_locale),
    svc: StatusService = Depends(get_status_service),
):
    try:
        svc.transition(order_id, payload.status)
    except StorefrontError as e:
        raise to_http(e, locale)
    return {"success": True}


@router.post("/{order_id}/correct-total", response_model=OrderOut)
def correct_total(
    order_id: str,
    payload: TotalCorrectionIn,
    ctx: RequestContext = Depends(require_admin),
    locale: str = Depends(get_locale),
    svc: OrderService = Depends(get_order_service),
):
    try:
        return svc.correct_total(order_id, payload.total_amount, payload.reason, ctx)
    except (PermissionError, StorefrontError) as e:
        raise to_http(e, locale)


@router.post("/{order_id}/invoice")
def generate_invoice(
    order_id: str,
    background_tasks: BackgroundTasks,
    ctx: RequestContext = Depends(get_request_context),
    locale: str = Depends(get_locale),
    svc: InvoiceService = Depends(get_invoice_service),
):
    """
    Zwraca PDF od razu, archiwizacja (upload + document_url) po wyslaniu odpowiedzi.
    """
    try:
        document = svc.generate_invoice(order_id, ctx)
    except (PermissionError, StorefrontError) as e:
        raise to_http(e, locale)

    background_tasks.add_task(svc.archive_invoice, document)

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{document.filename}"',
            "Cache-Control": "no-cache, no-store, must-revalidate",
        },
    )
