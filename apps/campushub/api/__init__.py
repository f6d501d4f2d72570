"""API router registration helpers.

Routers are imported lazily inside `register_routes` so importing a single
route module (or the services behind it) has no side effects.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from campushub.api.admin.routes import router as admin_router
    from campushub.api.announcements.routes import router as announcements_router
    from campushub.api.auth.routes import router as auth_router
    from campushub.api.dashboard.routes import router as dashboard_router
    from campushub.api.events.routes import router as events_router
    from campushub.api.groups.routes import router as groups_router
    from campushub.api.messages.routes import router as messages_router
    from campushub.api.notifications.routes import router as notifications_router
    from campushub.api.realtime.routes import router as realtime_router
    from campushub.api.system.routes import router as system_router
    from campushub.api.users.routes import router as users_router

    routers = [
        system_router,
        auth_router,
        users_router,
        dashboard_router,
        announcements_router,
        groups_router,
        messages_router,
        events_router,
        notifications_router,
        realtime_router,
        admin_router,
    ]
    for router in routers:
        app.include_router(router)
