"""Command-line interface adapters.

Provides CLI commands for the storefront:
- home: Best-seller listing
- checkout-form / checkout: Address and payment step
- complete: Order confirmation
- sign-in / sign-out: Session identity
- invalidate: Drop the cached best-seller listing
"""
