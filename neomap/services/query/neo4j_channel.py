"""
Neo4j Query Channel
Runs map queries through the official neo4j driver

The driver's blocking session calls run in a small thread pool so they do
not block the event loop. Credentials come from the environment (a ``.env``
file is honoured).
"""
from __future__ import annotations

import asyncio
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, List, Mapping, Optional

from dotenv import load_dotenv
from neo4j import Driver, GraphDatabase

from ...config import settings as config

logger = logging.getLogger(__name__)


def create_driver(uri: Optional[str] = None, user: Optional[str] = None, password: Optional[str] = None) -> Driver:
    """
    Create a driver from explicit values or NEO4J_URI / NEO4J_USER / NEO4J_PASSWORD.

    Raises:
        ValueError: If the URI or password is missing
    """
    load_dotenv()
    uri = uri or os.getenv("NEO4J_URI")
    user = user or os.getenv("NEO4J_USER", "neo4j")
    password = password or os.getenv("NEO4J_PASSWORD")

    if not uri:
        raise ValueError("NEO4J_URI environment variable is required. Example: NEO4J_URI=bolt://localhost:7687")
    if not password:
        raise ValueError("NEO4J_PASSWORD environment variable is required. Set it in your .env file.")

    driver = GraphDatabase.driver(
        uri,
        auth=(user, password),
        keep_alive=True,
        connection_timeout=30,
        max_connection_lifetime=300,
    )
    logger.info(f"🔌 Neo4j driver created for {uri}")
    return driver


class Neo4jQueryChannel:
    def __init__(
        self,
        driver: Optional[Driver] = None,
        database: Optional[str] = None,
        max_workers: int = config.QUERY_WORKERS,
    ) -> None:
        self._driver = driver
        self.database = database or config.NEO4J_DATABASE
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="neomap_query")

    @property
    def driver(self) -> Driver:
        if self._driver is None:
            self._driver = create_driver()
        return self._driver

    def run_sync(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        with self.driver.session(database=self.database) as session:
            result = session.run(query, dict(parameters or {}))
            records = list(result)
        logger.info(f"📊 Query returned {len(records)} records")
        return records

    async def run(self, query: str, parameters: Optional[Mapping[str, Any]] = None) -> List[Any]:
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(self._pool, self.run_sync, query, parameters)
        except Exception as e:
            logger.error(f"❌ Query failed: {e}")
            raise

    def close(self) -> None:
        if self._driver is not None:
            self._driver.close()
            self._driver = None
            logger.info("✓ Neo4j driver closed")
        self._pool.shutdown(wait=False)
