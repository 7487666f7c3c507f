"""User, address, wishlist and cart routes."""

import logging

from fastapi import APIRouter, Depends, status

from storefront.api.dependencies import get_current_user
from storefront.models.request import CartQuantityUpdate, WishlistRequest, WishlistResponse
from storefront.models.user import (
    Address,
    AddressCreate,
    AddressUpdate,
    Cart,
    CartItem,
    UserCreate,
    UserInDB,
    UserResponse,
)
from storefront.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(user: UserCreate) -> UserResponse:
    """Register a user synced from the identity provider."""
    created = await user_service.create_user(user)
    return UserResponse(**created.model_dump())


@router.get("/me", response_model=UserResponse)
async def get_me(user: UserInDB = Depends(get_current_user)) -> UserResponse:
    """Return the calling user's account."""
    return UserResponse(**user.model_dump())


# ── Addresses ──────────────────────────────────────────────────────────────────


@router.get("/addresses", response_model=list[Address])
async def get_addresses(user: UserInDB = Depends(get_current_user)) -> list[Address]:
    return user.addresses


@router.post("/addresses", response_model=list[Address], status_code=status.HTTP_201_CREATED)
async def add_address(
    address: AddressCreate,
    user: UserInDB = Depends(get_current_user),
) -> list[Address]:
    return await user_service.add_address(user, address)


@router.put("/addresses/{address_id}", response_model=list[Address])
async def update_address(
    address_id: str,
    update: AddressUpdate,
    user: UserInDB = Depends(get_current_user),
) -> list[Address]:
    return await user_service.update_address(user, address_id, update)


@router.delete("/addresses/{address_id}", response_model=list[Address])
async def delete_address(address_id: str, user: UserInDB = Depends(get_current_user)) -> list[Address]:
    return await user_service.delete_address(user, address_id)


# ── Wishlist ───────────────────────────────────────────────────────────────────


@router.get("/wishlist", response_model=WishlistResponse)
async def get_wishlist(user: UserInDB = Depends(get_current_user)) -> WishlistResponse:
    """Return wishlisted products."""
    return WishlistResponse(wishlist=await user_service.get_wishlist(user))


@router.post("/wishlist", response_model=list[str])
async def add_to_wishlist(
    request: WishlistRequest,
    user: UserInDB = Depends(get_current_user),
) -> list[str]:
    return await user_service.add_to_wishlist(user, request.productId)


@router.delete("/wishlist/{product_id}", response_model=list[str])
async def remove_from_wishlist(product_id: str, user: UserInDB = Depends(get_current_user)) -> list[str]:
    return await user_service.remove_from_wishlist(user, product_id)


# ── Cart ───────────────────────────────────────────────────────────────────────


@cart_router.get("", response_model=Cart)
async def get_cart(user: UserInDB = Depends(get_current_user)) -> Cart:
    return await user_service.get_cart(user)


@cart_router.post("", response_model=Cart)
async def add_to_cart(item: CartItem, user: UserInDB = Depends(get_current_user)) -> Cart:
    """Add a product to the cart; quantities for the same product add up."""
    return await user_service.add_to_cart(user, item)


@cart_router.put("/{product_id}", response_model=Cart)
async def update_cart_item(
    product_id: str,
    update: CartQuantityUpdate,
    user: UserInDB = Depends(get_current_user),
) -> Cart:
    return await user_service.set_cart_quantity(user, product_id, update.quantity)


@cart_router.delete("/{product_id}", response_model=Cart)
async def remove_from_cart(product_id: str, user: UserInDB = Depends(get_current_user)) -> Cart:
    return await user_service.remove_from_cart(user, product_id)


@cart_router.delete("", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cart(user: UserInDB = Depends(get_current_user)) -> None:
    await user_service.clear_cart(user.externalId)
