"""
Application package.

The API is organised into ``core`` (configuration, logging, database,
errors), ``schemas`` (response models), ``services`` (collection
access and uploads) and ``api`` (versioned routers).  ``main`` wires
them into a FastAPI application.
"""
