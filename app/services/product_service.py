"""
Product service.

Product catalogue management and the per-user view of claimable products.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.product import Product
from app.models.user_task_override import UserTaskOverride
from app.repositories.product_repository import ProductRepository
from app.repositories.task_submission_repository import (
    TaskSubmissionRepository,
)
from app.repositories.user_repository import UserRepository
from app.repositories.user_task_override_repository import (
    UserTaskOverrideRepository,
)
from app.services.base_service import BaseService, transaction
from app.utils.datetime_utils import ensure_utc, utc_now
from app.utils.exceptions import (
    PRODUCT_NOT_FOUND,
    USER_NOT_FOUND,
    NotFoundError,
    ValidationError,
)
from app.validators import validate_amount


# Columns an admin may change after creation
UPDATABLE_FIELDS = frozenset({
    "name",
    "image",
    "price",
    "negative_amount",
    "end_date",
    "is_active",
})

MONEY_FIELDS = ("price", "negative_amount")


@dataclass(frozen=True)
class AvailableProduct:
    """Claimable product with the debit that applies to one user."""

    product: Product
    negative_amount: Decimal
    has_override: bool

    @property
    def id(self) -> int:
        """Product ID."""
        return self.product.id


def _parse_money(field: str, value: Any) -> Decimal:
    """Validate a non-negative money value."""
    is_valid, amount, error = validate_amount(value, allow_zero=True)
    if not is_valid:
        raise ValidationError(error, {"field": field, "value": str(value)})
    return amount


class ProductService(BaseService):
    """Product catalogue and availability."""

    def __init__(
        self,
        session: AsyncSession,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """
        Initialize product service.

        Args:
            session: Database session
            clock: Source of the current instant
        """
        super().__init__(session)
        self.clock = clock
        self.product_repo = ProductRepository(session)
        self.user_repo = UserRepository(session)
        self.submission_repo = TaskSubmissionRepository(session)
        self.override_repo = UserTaskOverrideRepository(session)

    @transaction
    async def create_product(
        self,
        name: str,
        price: Decimal | str | int,
        negative_amount: Decimal | str | int,
        end_date: datetime,
        image: str | None = None,
    ) -> Product:
        """
        Create a product.

        Args:
            name: Display name
            price: Listed price
            negative_amount: Default debit on submission
            end_date: Claim deadline (exclusive)
            image: Optional image path or URL

        Returns:
            Created product
        """
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        product = await self.product_repo.create(
            name=name.strip(),
            image=image,
            price=_parse_money("price", price),
            negative_amount=_parse_money("negative_amount", negative_amount),
            end_date=ensure_utc(end_date),
        )
        self.logger.info(
            "Product created",
            extra={
                "product_id": product.id,
                "negative_amount": str(product.negative_amount),
            },
        )
        return product

    @transaction
    async def update_product(self, product_id: int, **fields: Any) -> Product:
        """
        Update product columns.

        Args:
            product_id: Product ID
            **fields: Columns to change

        Returns:
            Updated product

        Raises:
            NotFoundError: If product does not exist
            ValidationError: On unknown fields or invalid amounts
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(
                f"Unknown product fields: {', '.join(sorted(unknown))}"
            )

        for field in MONEY_FIELDS:
            if field in fields:
                fields[field] = _parse_money(field, fields[field])
        if fields.get("end_date") is not None:
            fields["end_date"] = ensure_utc(fields["end_date"])

        product = await self.product_repo.update(product_id, **fields)
        if not product:
            raise NotFoundError(PRODUCT_NOT_FOUND, {"product_id": product_id})

        self.logger.info(
            "Product updated",
            extra={"product_id": product_id, "fields": sorted(fields)},
        )
        return product

    async def get_products(self) -> list[Product]:
        """Get active products, newest first."""
        return await self.product_repo.find_active()

    async def get_active_products(self) -> list[Product]:
        """Get active, unexpired products, newest first."""
        return await self.product_repo.find_available(self.clock())

    async def get_active_products_for_user(
        self, user_id: int
    ) -> list[AvailableProduct]:
        """
        Get products the user can still claim.

        Excludes products the user already submitted and reports the
        effective debit, with the user's override taking precedence over
        the product default.

        Args:
            user_id: User ID

        Returns:
            Available products, newest first

        Raises:
            NotFoundError: If user does not exist
        """
        if not await self.user_repo.get_by_id(user_id):
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})

        submitted = await self.submission_repo.get_submitted_product_ids(user_id)
        products = await self.product_repo.find_available(
            self.clock(), exclude_ids=submitted
        )
        overrides = await self.override_repo.get_amounts_for_user(user_id)

        return [
            AvailableProduct(
                product=product,
                negative_amount=overrides.get(product.id, product.negative_amount),
                has_override=product.id in overrides,
            )
            for product in products
        ]

    @transaction
    async def set_user_task_override(
        self,
        user_id: int,
        product_id: int,
        negative_amount: Decimal | str | int,
    ) -> UserTaskOverride:
        """
        Create or update the debit override for one user and product.

        Args:
            user_id: User ID
            product_id: Product ID
            negative_amount: Debit replacing the product default

        Returns:
            Stored override

        Raises:
            NotFoundError: If user or product does not exist
        """
        amount = _parse_money("negative_amount", negative_amount)
        await self._ensure_exists(user_id, [product_id])

        override = await self.override_repo.upsert(user_id, product_id, amount)
        self.logger.info(
            "Task override set",
            extra={
                "user_id": user_id,
                "product_id": product_id,
                "negative_amount": str(amount),
            },
        )
        return override

    async def _ensure_exists(
        self, user_id: int, product_ids: Iterable[int]
    ) -> None:
        """Raise NotFoundError for a missing user or product."""
        if not await self.user_repo.get_by_id(user_id):
            raise NotFoundError(USER_NOT_FOUND, {"user_id": user_id})
        for product_id in product_ids:
            if not await self.product_repo.get_by_id(product_id):
                raise NotFoundError(
                    PRODUCT_NOT_FOUND, {"product_id": product_id}
                )
