"""Cart and wishlist router."""

import uuid
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from libs.auth.dependencies import get_current_user, get_optional_user
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.storefront_service.models import Cart, CartItem, Product, WishlistItem
from services.storefront_service.schemas import (
    CartItemCreate,
    CartItemResponse,
    CartItemUpdate,
    CartResponse,
    ProductResponse,
    WishlistAdd,
    WishlistItemResponse,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

router = APIRouter(tags=["cart"])


# ============================================================================
# CART HELPERS
# ============================================================================


def _owner_filter(user: Optional[AuthUser], session_id: Optional[str]):
    if user:
        return Cart.user_id == user.user_id
    if session_id:
        return (Cart.session_id == session_id) & Cart.user_id.is_(None)
    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="Sign in or provide a session_id to use the cart",
    )


async def load_cart(
    db: AsyncSession, user: Optional[AuthUser], session_id: Optional[str]
) -> Optional[Cart]:
    query = (
        select(Cart)
        .where(_owner_filter(user, session_id))
        .order_by(Cart.created_at.desc())
        .options(selectinload(Cart.items).selectinload(CartItem.product))
        .execution_options(populate_existing=True)
    )
    result = await db.execute(query)
    return result.scalars().first()


async def get_or_create_cart(
    db: AsyncSession, user: Optional[AuthUser], session_id: Optional[str]
) -> Cart:
    cart = await load_cart(db, user, session_id)
    if cart:
        return cart

    cart = Cart(
        user_id=user.user_id if user else None,
        session_id=None if user else session_id,
    )
    db.add(cart)
    await db.commit()
    return await load_cart(db, user, session_id)


def build_cart_response(cart: Cart) -> CartResponse:
    items = []
    subtotal = Decimal("0")
    for item in cart.items:
        line_total = Decimal(str(item.product.price)) * item.quantity
        subtotal += line_total
        items.append(
            CartItemResponse(
                id=item.id,
                product_id=item.product_id,
                quantity=item.quantity,
                product=ProductResponse.model_validate(item.product),
                line_total=line_total,
            )
        )
    return CartResponse(
        id=cart.id,
        items=items,
        item_count=sum(item.quantity for item in cart.items),
        subtotal=subtotal,
    )


async def _get_owned_item(
    db: AsyncSession,
    item_id: uuid.UUID,
    user: Optional[AuthUser],
    session_id: Optional[str],
) -> CartItem:
    query = (
        select(CartItem)
        .join(Cart, CartItem.cart_id == Cart.id)
        .where(CartItem.id == item_id, _owner_filter(user, session_id))
    )
    result = await db.execute(query)
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Cart item not found")
    return item


# ============================================================================
# CART ENDPOINTS
# ============================================================================


@router.get("/cart", response_model=CartResponse)
async def get_cart(
    session_id: Optional[str] = Query(None, max_length=255),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    cart = await get_or_create_cart(db, current_user, session_id)
    return build_cart_response(cart)


@router.post(
    "/cart/items", response_model=CartResponse, status_code=status.HTTP_201_CREATED
)
async def add_cart_item(
    item_in: CartItemCreate,
    session_id: Optional[str] = Query(None, max_length=255),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Add a product to the cart, merging with an existing line."""
    product = await db.get(Product, item_in.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    cart = await get_or_create_cart(db, current_user, session_id)
    existing = next(
        (item for item in cart.items if item.product_id == item_in.product_id), None
    )
    if existing:
        existing.quantity += item_in.quantity
    else:
        db.add(
            CartItem(
                cart_id=cart.id,
                product_id=item_in.product_id,
                quantity=item_in.quantity,
            )
        )
    await db.commit()

    cart = await load_cart(db, current_user, session_id)
    return build_cart_response(cart)


@router.put("/cart/items/{item_id}", response_model=CartResponse)
async def update_cart_item(
    item_id: uuid.UUID,
    item_in: CartItemUpdate,
    session_id: Optional[str] = Query(None, max_length=255),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Set a line's quantity. Zero removes the line."""
    item = await _get_owned_item(db, item_id, current_user, session_id)
    if item_in.quantity == 0:
        await db.delete(item)
    else:
        item.quantity = item_in.quantity
    await db.commit()

    cart = await load_cart(db, current_user, session_id)
    return build_cart_response(cart)


@router.delete("/cart/items/{item_id}", response_model=CartResponse)
async def remove_cart_item(
    item_id: uuid.UUID,
    session_id: Optional[str] = Query(None, max_length=255),
    current_user: Optional[AuthUser] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_async_db),
):
    item = await _get_owned_item(db, item_id, current_user, session_id)
    await db.delete(item)
    await db.commit()

    cart = await load_cart(db, current_user, session_id)
    return build_cart_response(cart)


# ============================================================================
# WISHLIST
# ============================================================================


@router.get("/wishlist", response_model=list[WishlistItemResponse])
async def get_wishlist(
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    query = (
        select(WishlistItem)
        .where(WishlistItem.user_id == current_user.user_id)
        .options(selectinload(WishlistItem.product))
        .order_by(WishlistItem.created_at.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


@router.post(
    "/wishlist",
    response_model=WishlistItemResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_to_wishlist(
    item_in: WishlistAdd,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Save a product. Adding the same product twice is a no-op."""
    product = await db.get(Product, item_in.product_id)
    if not product or not product.is_active:
        raise HTTPException(status_code=404, detail="Product not found")

    query = select(WishlistItem).where(
        WishlistItem.user_id == current_user.user_id,
        WishlistItem.product_id == item_in.product_id,
    )
    item = (await db.execute(query)).scalar_one_or_none()
    if not item:
        item = WishlistItem(user_id=current_user.user_id, product_id=product.id)
        db.add(item)
        await db.commit()

    result = await db.execute(
        select(WishlistItem)
        .where(WishlistItem.id == item.id)
        .options(selectinload(WishlistItem.product))
    )
    return result.scalar_one()


@router.delete("/wishlist/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_wishlist(
    product_id: uuid.UUID,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    query = select(WishlistItem).where(
        WishlistItem.user_id == current_user.user_id,
        WishlistItem.product_id == product_id,
    )
    item = (await db.execute(query)).scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail="Wishlist item not found")

    await db.delete(item)
    await db.commit()
    return None
