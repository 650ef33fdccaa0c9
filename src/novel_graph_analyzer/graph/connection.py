"""Neo4j connection management."""

import logging

from neo4j import Driver, GraphDatabase
from neo4j.exceptions import AuthError, ClientError, ServiceUnavailable

from ..config import get_settings

logger = logging.getLogger(__name__)


def get_driver() -> Driver | None:
    """Get a Neo4j driver instance."""
    settings = get_settings()

    try:
        return GraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_user, settings.neo4j_password),
        )
    except ValueError:
        logger.warning("Invalid Neo4j URI: %s", settings.neo4j_uri)
        return None


def check_neo4j_connection() -> bool:
    """Check if Neo4j is reachable and credentials are valid."""
    driver = get_driver()
    if not driver:
        return False

    try:
        with driver.session() as session:
            session.run("RETURN 1")
        return True
    except (ServiceUnavailable, AuthError):
        return False
    finally:
        driver.close()


def init_schema(driver: Driver) -> None:
    """Initialize graph schema (constraints and indexes)."""
    statements = [
        "CREATE CONSTRAINT entity_key IF NOT EXISTS FOR (e:Entity) REQUIRE e.key IS UNIQUE",
        "CREATE INDEX entity_name IF NOT EXISTS FOR (e:Entity) ON (e.name)",
        "CREATE INDEX entity_type IF NOT EXISTS FOR (e:Entity) ON (e.type)",
    ]

    with driver.session() as session:
        for statement in statements:
            try:
                session.run(statement)
            except ClientError:
                logger.debug("Schema statement skipped: %s", statement)
