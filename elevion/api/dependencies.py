"""
API Dependencies

FastAPI dependency injection for the storage gateway and the services
built on it. Tests override `get_storage` / `get_stripe_service` through
`app.dependency_overrides`.
"""

from typing import Annotated

from fastapi import Depends

from elevion.infrastructure.db.storage import DatabaseStorage, get_storage
from elevion.infrastructure.payments.stripe_service import StripeService, get_stripe_service
from elevion.infrastructure.services.analytics_service import AnalyticsService
from elevion.infrastructure.services.pricing_service import PricingService


StorageDep = Annotated[DatabaseStorage, Depends(get_storage)]
StripeDep = Annotated[StripeService, Depends(get_stripe_service)]


def get_analytics_service(storage: StorageDep) -> AnalyticsService:
    return AnalyticsService(storage)


def get_pricing_service(storage: StorageDep) -> PricingService:
    return PricingService(storage)


AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
PricingServiceDep = Annotated[PricingService, Depends(get_pricing_service)]
