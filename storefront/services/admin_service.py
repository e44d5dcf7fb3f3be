# storefront/services/admin_service.py
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.domain import pricing
from storefront.domain.exceptions import ValidationFailed
from storefront.domain.schemas import OrderOut, UserRead
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.review_repo import ReviewRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.review_service import review_to_dict
from storefront.utils.timeutil import as_utc, utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

LOW_STOCK_THRESHOLD = 10
PERIODS = {"7days": 7, "30days": 30, "12months": 365}


def bucket_sales(rows, fmt: str) -> List[Dict[str, Any]]:
    """
    rows: (created_at, total_amount).
    Grupowanie w Pythonie - dziala tak samo na Postgresie i SQLite.
    """
    buckets: "OrderedDict[str, list]" = OrderedDict()
    for created_at, amount in rows:
        key = as_utc(created_at).strftime(fmt)
        buckets.setdefault(key, []).append(Decimal(str(amount)))

    result = []
    for key, amounts in buckets.items():
        revenue = sum(amounts, Decimal("0"))
        result.append({
            "date": key,
            "orders": len(amounts),
            "revenue": pricing.money(revenue),
            "average_order_value": pricing.money(revenue / len(amounts)),
        })
    return result


class AdminService:
    def __init__(self, db: Session):
        self.users = UserRepo(db)
        self.orders = OrderRepo(db)
        self.products = ProductRepo(db)
        self.reviews = ReviewRepo(db)

    def _inventory(self, with_price: bool = False) -> List[Dict[str, Any]]:
        result = []
        for category, variants, stock, avg_price, low, out in self.products.inventory_by_category(LOW_STOCK_THRESHOLD):
            row = {
                "category": category,
                "total_variants": variants,
                "total_stock": int(stock or 0),
                "low_stock": int(low or 0),
                "out_of_stock": int(out or 0),
            }
            if with_price:
                row["average_price"] = pricing.money(avg_price or 0)
            result.append(row)
        return result

    def dashboard(self, time_range_days: int = 30) -> Dict[str, Any]:
        if time_range_days <= 0:
            raise ValidationFailed("timeRange must be a positive number of days")
        start = utcnow() - timedelta(days=time_range_days)

        top_products = [
            {
                "product_id": product_id,
                "name": name,
                "total_sold": int(sold or 0),
                "revenue": pricing.money(revenue or 0),
            }
            for product_id, name, sold, revenue in self.orders.top_products(start, limit=5)
        ]

        logger.info(f"Admin dashboard generated for last {time_range_days} days")
        return {
            "overview": {
                "total_users": self.users.count(),
                "total_orders": self.orders.count(),
                "total_products": self.products.count(),
                "total_revenue": pricing.money(self.orders.revenue() or 0),
                "new_users": self.users.count(since=start),
                "active_users": self.users.count(since=start, field="last_login"),
            },
            "sales_analytics": bucket_sales(self.orders.created_since(start), "%Y-%m-%d"),
            "inventory_status": self._inventory(),
            "top_products": top_products,
            "recent_activity": {
                "orders": [OrderOut.model_validate(o).model_dump() for o in self.orders.recent(5)],
                "reviews": [review_to_dict(r) for r in self.reviews.recent(5)],
                "users": [UserRead.model_validate(u).model_dump() for u in self.users.recent(5)],
            },
            "order_fulfillment": [
                {"status": status, "count": count} for status, count in self.orders.status_breakdown()
            ],
        }

    def order_analytics(self, period: str = "30days") -> Dict[str, Any]:
        if period not in PERIODS:
            raise ValidationFailed(f"period must be one of {', '.join(PERIODS)}")
        start = utcnow() - timedelta(days=PERIODS[period])
        fmt = "%Y-%m" if period == "12months" else "%Y-%m-%d"
        rows = self.orders.created_since(start)
        series = bucket_sales(rows, fmt)

        return {
            "period": period,
            "series": series,
            "total_orders": sum(b["orders"] for b in series),
            "total_revenue": pricing.money(sum((b["revenue"] for b in series), Decimal("0"))),
        }

    def inventory_analytics(self) -> Dict[str, Any]:
        categories = self._inventory(with_price=True)
        return {
            "categories": categories,
            "total_stock": sum(c["total_stock"] for c in categories),
            "low_stock": sum(c["low_stock"] for c in categories),
            "out_of_stock": sum(c["out_of_stock"] for c in categories),
        }
