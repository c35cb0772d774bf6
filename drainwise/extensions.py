import logging
from flask_sqlalchemy import SQLAlchemy
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from typing import Dict, Any

logger = logging.getLogger(__name__)

class MonitoredSQLAlchemy(SQLAlchemy):
    """Extended SQLAlchemy with connection pool monitoring."""

    def get_pool_stats(self) -> Dict[str, Any]:
        """Get current connection pool statistics."""
        pool = getattr(self.engine, 'pool', None)
        if pool is None:
            return {'pool_size': 0, 'checked_out': 0, 'overflow': 0}
        return {
            'pool_size': pool.size() if hasattr(pool, 'size') else 0,
            'checked_out': pool.checkedout() if hasattr(pool, 'checkedout') else 0,
            'overflow': pool.overflow() if hasattr(pool, 'overflow') else 0,
        }

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            # Execute a simple query to test connectivity
            result = self.session.execute(text("SELECT 1")).scalar()
            return result == 1
        except SQLAlchemyError as e:
            logger.error(f"Database health check failed: {e}")
            return False

db = MonitoredSQLAlchemy()
limiter = Limiter(key_func=get_remote_address)
