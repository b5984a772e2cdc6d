"""Pricing-service access and local file caching."""
