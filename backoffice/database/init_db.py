"""Create the schema and seed the option catalog."""

import logging

import backoffice.database.db as db_module
import backoffice.models  # noqa: F401
from backoffice.core.startup import bootstrap
from backoffice.models import Base
from backoffice.services.option_service import OptionService

logger = logging.getLogger(__name__)


def init_db(seed_catalog: bool = True) -> None:
    bootstrap()
    active_url = db_module.get_active_database_url()
    Base.metadata.create_all(bind=db_module.get_engine())
    logger.info(
        "database.tables.created",
        extra={
            "event": "database.tables.created",
            "database_url_scheme": active_url.split("://", 1)[0],
        },
    )

    if not seed_catalog:
        return
    with OptionService() as catalog:
        created = catalog.seed_catalog()
    logger.info(
        "database.option_catalog.seeded",
        extra={"event": "database.option_catalog.seeded", "created": created},
    )


if __name__ == "__main__":
    init_db()
