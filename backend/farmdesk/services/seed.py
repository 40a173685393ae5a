"""
Startup seeding: the default roles and the farm settings row.

Idempotent; existing rows are left as they are.
"""
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmdesk.core.config import logger, settings
from farmdesk.db.models import FarmSetting, Role
from farmdesk.permissions.role_map import DEFAULT_ROLE_PERMISSIONS
from farmdesk.sync.views import FarmInfo


def default_farm_info() -> dict:
    return FarmInfo(name=settings.FARM_NAME, email="contact@smilefarm.com").model_dump(by_alias=True)


async def seed_defaults(db: AsyncSession) -> dict:
    stats = {"roles_created": 0, "farm_settings_created": False}

    result = await db.execute(select(Role.name))
    existing = {name for (name,) in result.all()}

    for name, permissions in DEFAULT_ROLE_PERMISSIONS.items():
        if name in existing:
            continue
        db.add(Role(name=name, permissions=permissions))
        stats["roles_created"] += 1
        logger.info(f"[Seed] Created role: {name}")

    if await db.get(FarmSetting, 1) is None:
        db.add(FarmSetting(id=1, info=default_farm_info()))
        stats["farm_settings_created"] = True
        logger.info("[Seed] Created default farm settings")

    await db.commit()
    return stats
