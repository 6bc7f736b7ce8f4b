"""
Seed the director account and the default policy.

Reads the BOOTSTRAP_* variables (see roster.config). Safe to run repeatedly:
nothing is written once any account exists.

Usage:
    BOOTSTRAP_DIRECTOR_PASSWORD=... DATABASE_URL=... python scripts/seed_roster.py
"""
import asyncio
import logging

from roster.config import get_settings
from roster.crud.unit_of_work import unit_of_work_factory
from roster.database import build_engine, build_session_factory, init_models
from roster.main import configure_logging
from roster.use_cases.bootstrap import bootstrap_roster

logger = logging.getLogger("roster.seed")


async def seed_roster() -> None:
    settings = get_settings()
    configure_logging(settings)
    if not settings.bootstrap_director_password:
        raise SystemExit("BOOTSTRAP_DIRECTOR_PASSWORD must be set")

    engine = build_engine(settings.database_url, echo=settings.debug)
    try:
        await init_models(engine)
        factory = unit_of_work_factory(build_session_factory(engine))
        async with factory() as uow:
            account = await bootstrap_roster(
                uow,
                email=settings.bootstrap_director_email,
                password=settings.bootstrap_director_password,
                community_number=settings.bootstrap_community_number,
            )
        if account is None:
            print("Accounts already exist, nothing seeded.")
        else:
            print(
                f"Seeded director {account.email} linked to "
                f"{settings.community_id_prefix}-{settings.bootstrap_community_number}"
            )
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_roster())
