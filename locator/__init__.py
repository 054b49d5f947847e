"""
Device Locator Relay: root package.

This package contains the FastAPI app entry point (main.py), API routes,
the location-rendezvous domain logic, and infrastructure adapters
(MongoDB store, Firebase push delivery).
"""
