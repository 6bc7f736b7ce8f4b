import logging

from .config import Settings, get_settings
from .crud.unit_of_work import unit_of_work_factory
from .database import build_engine, build_session_factory, init_models, shares_connection
from .services.roster_service import RosterService

logger = logging.getLogger("roster")


def _resolve_log_level(value: str) -> int:
    level = logging.getLevelName(value.upper())
    return level if isinstance(level, int) else logging.INFO


def configure_logging(settings: Settings | None = None) -> None:
    settings = settings or get_settings()
    log_level = _resolve_log_level(settings.log_level)
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=log_level,
            format="%(asctime)s %(levelname)s %(name)s %(message)s",
        )
    logger.setLevel(log_level)


async def create_roster_service(settings: Settings | None = None) -> RosterService:
    """
    Build a ready roster: engine, tables, unit-of-work factory and service.

    The director is seeded when BOOTSTRAP_DIRECTOR_PASSWORD is set.
    """
    settings = settings or get_settings()
    engine = build_engine(settings.database_url, echo=settings.debug)
    await init_models(engine)
    service = RosterService(
        unit_of_work_factory(build_session_factory(engine)),
        settings=settings,
        exclusive=shares_connection(engine),
    )
    result = await service.bootstrap()
    if not result.ok:
        logger.error("bootstrap_failed error=%s", result.error)
    logger.info(
        "roster_ready app=%s database=%s",
        settings.app_name,
        engine.url.render_as_string(hide_password=True),
    )
    return service
