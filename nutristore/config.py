from dotenv import load_dotenv
import os

load_dotenv()


def engine_options(database_uri):
    """Return SQLAlchemy engine options suited to the configured database."""
    if database_uri.startswith(("postgresql", "postgres")):
        # Pooled connections for a hosted PostgreSQL server
        return {
            'pool_pre_ping': True,  # Test connection before use
            'pool_recycle': 300,    # Recycle connections every 5 minutes
            'pool_size': 5,
            'max_overflow': 10,
            'pool_timeout': 30,
            'connect_args': {
                'connect_timeout': 10,
            }
        }
    return {}


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("NUTRISTORE_DATABASE_URI", "sqlite:///nutristore.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = engine_options(SQLALCHEMY_DATABASE_URI)

    LOG_LEVEL = os.getenv("NUTRISTORE_LOG_LEVEL", "INFO").upper()
