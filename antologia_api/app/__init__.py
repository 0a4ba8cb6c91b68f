"""
Application package initializer.

This package contains the main entrypoint for the API and all of its
submodules: ``core`` (configuration, database, logging, errors),
``schemas`` (request and response models), ``services`` (data access per
entity plus lifecycle and bulk transfer) and ``api`` (versioned routes).
"""

from .main import app, create_app  # noqa: F401
