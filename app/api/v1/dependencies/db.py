"""DB session dependencies (composition root).

Read endpoints use get_db; write endpoints use get_db_transactional. Every
dependency of a request shares the same session, so a request runs in
exactly one transaction.
"""

from app.infrastructure.persistence.database import get_db, get_db_transactional

__all__ = ["get_db", "get_db_transactional"]
