"""
Version 1 of the API routes.

This subpackage bundles the event and nudge endpoints.  They are
served under the prefix configured by ``settings.api_prefix``
(``/api/v3/app`` by default, the path existing clients already use).
"""
