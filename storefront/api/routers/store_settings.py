# storefront/api/routers/store_settings.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.context import get_locale, require_admin, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import DeliveryFeeIn, DeliveryFeeOut, RequestContext
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/store-settings", tags=["store-settings"])


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


@router.get("/delivery-fee", response_model=DeliveryFeeOut)
def get_delivery_fee(svc: CartService = Depends(get_service)):
    return {"delivery_fee": svc.get_delivery_fee()}


@router.put("/delivery-fee", response_model=DeliveryFeeOut)
def update_delivery_fee(
    payload: DeliveryFeeIn,
    _: RequestContext = Depends(require_admin),
    locale: str = Depends(get_locale),
    svc: CartService = Depends(get_service),
):
    try:
        return {"delivery_fee": svc.update_delivery_fee(payload.delivery_fee)}
    except StorefrontError as e:
        raise to_http(e, locale)
