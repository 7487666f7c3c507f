"""Admin dashboard aggregates."""

import logging

from storefront.database.orders import order_repository
from storefront.database.payments import unfulfilled_payment_repository
from storefront.database.products import product_repository
from storefront.database.users import user_repository
from storefront.models.request import DashboardStats, UnfulfilledPayment

logger = logging.getLogger(__name__)


class AdminService:
    """Admin service for dashboard statistics and the unfulfilled payment ledger."""

    @staticmethod
    async def dashboard_stats() -> DashboardStats:
        """Revenue and entity counts shown on the dashboard."""
        return DashboardStats(
            totalRevenue=round(await order_repository.total_revenue(), 2),
            totalOrders=await order_repository.count(),
            totalCustomers=await user_repository.count(),
            totalProducts=await product_repository.count(),
        )

    @staticmethod
    async def unfulfilled_payments() -> list[UnfulfilledPayment]:
        """Open ledger entries, oldest first."""
        return [UnfulfilledPayment(**entry) for entry in await unfulfilled_payment_repository.list_open()]


# Global admin service instance
admin_service = AdminService()
