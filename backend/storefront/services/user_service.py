"""User service for customer accounts, addresses, wishlist and cart."""

import logging
from typing import Optional

from storefront.database.products import product_repository
from storefront.database.users import cart_repository, user_repository
from storefront.exceptions import InvalidRequestError, NotFoundError, OutOfStockError
from storefront.models.product import ProductInDB
from storefront.models.user import (
    Address,
    AddressCreate,
    AddressUpdate,
    Cart,
    CartItem,
    UserCreate,
    UserInDB,
)
from storefront.utils.helpers import generate_uuid

logger = logging.getLogger(__name__)


class UserService:
    """User service for handling user-related operations."""

    @staticmethod
    async def create_user(user: UserCreate) -> UserInDB:
        """Create a new user."""
        created = await user_repository.create(UserInDB(userId=generate_uuid(), **user.model_dump()))
        logger.info("Created user %s for %s", created.userId, created.externalId)
        return created

    @staticmethod
    async def get_by_external_id(external_id: str) -> Optional[UserInDB]:
        """Get user by identity-provider ID."""
        return await user_repository.get_by_external_id(external_id)

    @staticmethod
    async def list_users() -> list[UserInDB]:
        """List all users, newest first."""
        return await user_repository.list_all()

    # ── Addresses ──────────────────────────────────────────────────────────────

    @staticmethod
    def _with_single_default(addresses: list[Address], default_id: str) -> list[Address]:
        for address in addresses:
            address.isDefault = address.addressId == default_id
        return addresses

    @staticmethod
    async def add_address(user: UserInDB, address: AddressCreate) -> list[Address]:
        """Add an address; the first one, or one flagged default, becomes the default."""
        new_address = Address(addressId=generate_uuid(), **address.model_dump())
        addresses = [*user.addresses, new_address]
        if new_address.isDefault or len(addresses) == 1:
            addresses = UserService._with_single_default(addresses, new_address.addressId)

        await user_repository.set_addresses(user.externalId, addresses)
        return addresses

    @staticmethod
    async def update_address(user: UserInDB, address_id: str, update: AddressUpdate) -> list[Address]:
        """Apply the supplied fields to one of the user's addresses."""
        addresses = [a.model_copy() for a in user.addresses]
        target = next((a for a in addresses if a.addressId == address_id), None)
        if target is None:
            raise NotFoundError("Address", address_id)

        for field, value in update.model_dump(exclude_unset=True).items():
            setattr(target, field, value)
        if update.isDefault:
            addresses = UserService._with_single_default(addresses, address_id)

        await user_repository.set_addresses(user.externalId, addresses)
        return addresses

    @staticmethod
    async def delete_address(user: UserInDB, address_id: str) -> list[Address]:
        """Remove an address, promoting the next one to default if needed."""
        removed = next((a for a in user.addresses if a.addressId == address_id), None)
        if removed is None:
            raise NotFoundError("Address", address_id)

        addresses = [a for a in user.addresses if a.addressId != address_id]
        if removed.isDefault and addresses:
            addresses = UserService._with_single_default(addresses, addresses[0].addressId)

        await user_repository.set_addresses(user.externalId, addresses)
        return addresses

    # ── Wishlist ───────────────────────────────────────────────────────────────

    @staticmethod
    async def add_to_wishlist(user: UserInDB, product_id: str) -> list[str]:
        """Add a product to the user's wishlist."""
        if await product_repository.get(product_id) is None:
            raise NotFoundError("Product", product_id)
        if not await user_repository.add_to_wishlist(user.externalId, product_id):
            raise InvalidRequestError("Product already in wishlist")
        return [*user.wishlist, product_id]

    @staticmethod
    async def remove_from_wishlist(user: UserInDB, product_id: str) -> list[str]:
        """Remove a product from the user's wishlist."""
        if not await user_repository.remove_from_wishlist(user.externalId, product_id):
            raise NotFoundError("Wishlist product", product_id)
        return [p for p in user.wishlist if p != product_id]

    @staticmethod
    async def get_wishlist(user: UserInDB) -> list[ProductInDB]:
        """Return the wishlisted products that still exist, in wishlist order."""
        products = {p.productId: p for p in await product_repository.get_many(user.wishlist)}
        return [products[pid] for pid in user.wishlist if pid in products]

    # ── Cart ───────────────────────────────────────────────────────────────────

    @staticmethod
    async def get_cart(user: UserInDB) -> Cart:
        """Return the user's cart."""
        return await cart_repository.get(user.externalId)

    @staticmethod
    async def _checked_product(product_id: str, quantity: int) -> ProductInDB:
        product = await product_repository.get(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        if product.stock < quantity:
            raise OutOfStockError(product.name, product.stock)
        return product

    @staticmethod
    async def add_to_cart(user: UserInDB, item: CartItem) -> Cart:
        """Add a product to the cart, merging with an existing line."""
        cart = await cart_repository.get(user.externalId)
        items = [line.model_copy() for line in cart.items]
        line = next((i for i in items if i.productId == item.productId), None)
        quantity = item.quantity + (line.quantity if line else 0)

        await UserService._checked_product(item.productId, quantity)
        if line:
            line.quantity = quantity
        else:
            items.append(item)
        return await cart_repository.save_items(user.externalId, items)

    @staticmethod
    async def set_cart_quantity(user: UserInDB, product_id: str, quantity: int) -> Cart:
        """Set the quantity of a product already in the cart."""
        cart = await cart_repository.get(user.externalId)
        items = [line.model_copy() for line in cart.items]
        line = next((i for i in items if i.productId == product_id), None)
        if line is None:
            raise NotFoundError("Cart item", product_id)

        await UserService._checked_product(product_id, quantity)
        line.quantity = quantity
        return await cart_repository.save_items(user.externalId, items)

    @staticmethod
    async def remove_from_cart(user: UserInDB, product_id: str) -> Cart:
        """Remove a product from the cart."""
        cart = await cart_repository.get(user.externalId)
        items = [i for i in cart.items if i.productId != product_id]
        if len(items) == len(cart.items):
            raise NotFoundError("Cart item", product_id)
        return await cart_repository.save_items(user.externalId, items)

    @staticmethod
    async def clear_cart(external_id: str) -> None:
        """Empty a customer's cart."""
        await cart_repository.clear(external_id)


# Global user service instance
user_service = UserService()
