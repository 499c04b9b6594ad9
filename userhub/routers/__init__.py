"""
FastAPI routers grouped by resource (users, user statuses, binary contents).

Each module exposes an APIRouter included by the app factory. Routers pull
their services from ``app.state`` and leave error translation to the
handlers registered in ``userhub.app``.
"""
