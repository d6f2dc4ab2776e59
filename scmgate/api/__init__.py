"""scmgate HTTP API layer.

This package provides the Falcon Asynchronous Server Gateway Interface
(ASGI) application for the scmgate runtime HTTP surface.

Usage
-----
Create and run the application::

    from scmgate.api import create_app

    app = create_app()              # webhook normalisation only
    app = create_app(dependencies)  # with provider stats and signatures

Public API
----------
create_app
    Application factory that configures the Falcon ASGI app with health
    and webhook endpoints, plus ``/stats`` when a provider is wired in.
"""

from scmgate.api.app import AppDependencies, create_app

__all__ = ["AppDependencies", "create_app"]
