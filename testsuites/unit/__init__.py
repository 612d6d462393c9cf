"""Browser-free unit tests for the storefront framework."""
