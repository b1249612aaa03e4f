from .db import DEFAULT_DB_URL, make_engine
from .store import OptionStore, RecentCalculation, create_store

__all__ = ["DEFAULT_DB_URL", "OptionStore", "RecentCalculation", "create_store", "make_engine"]
