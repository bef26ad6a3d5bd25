"""Merchify SDK — mockup request handling.

Modules
-------
models
    Pydantic models for design elements, product selection and client options.
urls
    Canonical mockup URL construction and query-parameter helpers.
validation
    Request and option validation with developer-facing messages.
mockups
    ``MockupService``: cache-aware URL signing.
"""
