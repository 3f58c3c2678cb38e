import logging
from contextlib import closing

import psycopg2
from psycopg2.extensions import ISOLATION_LEVEL_AUTOCOMMIT
from campus_cinema.core.config import settings

logger = logging.getLogger(__name__)


def create_database():
    """Create the PostgreSQL database if it doesn't exist. No-op for other backends."""
    if not settings.uses_postgres:
        logger.info("DATABASE_URL is not PostgreSQL, skipping database creation.")
        return
    try:
        # Connect to the maintenance database to check for / create the target one
        with closing(psycopg2.connect(
            user=settings.POSTGRES_USER,
            password=settings.POSTGRES_PASSWORD,
            host=settings.POSTGRES_SERVER,
            port=settings.POSTGRES_PORT,
            dbname="postgres",
        )) as con:
            con.set_isolation_level(ISOLATION_LEVEL_AUTOCOMMIT)
            with con.cursor() as cur:
                cur.execute(
                    "SELECT 1 FROM pg_catalog.pg_database WHERE datname = %s",
                    (settings.POSTGRES_DB,),
                )
                if cur.fetchone():
                    logger.info("Database %s already exists.", settings.POSTGRES_DB)
                    return
                logger.info("Database %s does not exist. Creating...", settings.POSTGRES_DB)
                cur.execute(f'CREATE DATABASE "{settings.POSTGRES_DB}"')
                logger.info("Database %s created.", settings.POSTGRES_DB)
    except psycopg2.Error as e:
        # The server may refuse access to 'postgres' while the target database exists
        logger.error("Error creating database %s: %s", settings.POSTGRES_DB, e)


def init_db(engine) -> None:
    """Ensure the database exists and every table is created."""
    from campus_cinema.db.base import Base

    create_database()
    Base.metadata.create_all(bind=engine)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    from campus_cinema.db.session import engine

    init_db(engine)
