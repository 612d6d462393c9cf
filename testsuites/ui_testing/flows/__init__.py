"""
================================================================================
UI Flows
================================================================================

Multi-page storefront journeys composed from the page objects.

Author: Automation Team
License: MIT
================================================================================
"""

from .storefront_checkout import (
    CheckoutRunSummary,
    ProductResult,
    StorefrontCheckoutFlow,
)

__all__ = [
    "CheckoutRunSummary",
    "ProductResult",
    "StorefrontCheckoutFlow",
]
