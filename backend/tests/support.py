"""Helpers shared by the test modules (imported as a plain module)."""
from farmdesk.core.security import create_access_token
from farmdesk.services.onboarding import register_identity

ADMIN_EMAIL = "owner@smilefarm.com"
WORKER_EMAIL = "worker@smilefarm.com"
PASSWORD = "secret123"


def bearer(email):
    return {"Authorization": f"Bearer {create_access_token(data={'sub': email})}"}


async def make_user(session_factory, email, password=PASSWORD):
    async with session_factory() as db:
        user = await register_identity(db, email, password)
        await db.commit()
        return user
