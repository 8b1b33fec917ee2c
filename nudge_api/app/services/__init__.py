"""
Service layer abstraction.

Each service encapsulates the collection access for one resource.  The
services receive their database handle through the constructor so that
routes and tests decide which database they talk to.
"""
