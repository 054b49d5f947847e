"""
API layer for the Device Locator.

Exposes the JSON endpoints under /api used by the mobile app (register,
receive-location, report-error) and the web page (devices, request-location,
get-status).
"""
