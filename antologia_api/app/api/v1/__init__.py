"""
Version 1 of the API.

This subpackage bundles all endpoints of the public API.  Breaking
changes should be introduced in a new version subpackage (e.g. ``v2``)
to preserve backwards compatibility.
"""
