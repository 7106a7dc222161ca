#storefront/api/routers/carts.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.context import get_locale, get_request_context, to_http
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.domain.schemas import CartItemIn, CartOut, RequestContext
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(db: Session = Depends(get_db)) -> CartService:
    return CartService(db)


@router.get("/me", response_model=CartOut)
def get_cart(
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.get_cart(ctx.user_id)


@router.post("/me/items", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    ctx: RequestContext = Depends(get_request_context),
    locale: str = Depends(get_locale),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.add_product(ctx.user_id, payload.product_id, payload.quantity)
    except StorefrontError as e:
        raise to_http(e, locale)


@router.delete("/me/items/{product_id}", response_model=CartOut)
def remove_item(
    product_id: str,
    ctx: RequestContext = Depends(get_request_context),
    svc: CartService = Depends(get_service),
):
    return svc.remove_product(ctx.user_id, product_id)
