"""Seller listing portal: entitlement resolution and listing route guards."""
