"""
Unit-of-work helper shared by the services.

Opens a session and a database transaction from the injected
session factory, commits on success and rolls back on any
error. Transient storage failures (lock or statement timeouts,
dropped connections) are reported as Unavailable so callers
know the request may be retried.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session, sessionmaker

from savings_ledger.errors import Unavailable

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(session_factory: sessionmaker) -> Iterator[Session]:
    try:
        with session_factory.begin() as session:
            yield session
    except OperationalError as exc:
        logger.error("Storage unavailable: %s", exc.orig)
        raise Unavailable() from exc
    except DBAPIError as exc:
        if exc.connection_invalidated:
            logger.error("Storage connection lost: %s", exc.orig)
            raise Unavailable() from exc
        raise
