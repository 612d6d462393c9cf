"""UI test suite: Playwright framework, storefront page objects and flows."""
