from .analytics_event import AnalyticsEventRow
from .brand_link import BrandLinkRow

__all__ = [
    "AnalyticsEventRow",
    "BrandLinkRow",
]
