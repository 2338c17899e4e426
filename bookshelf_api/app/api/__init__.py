"""
API package containing the HTTP routes.

``router.py`` aggregates the domain routers defined in ``endpoints``;
``deps.py`` builds services for each request from the objects the
application factory stores on ``app.state``.
"""
