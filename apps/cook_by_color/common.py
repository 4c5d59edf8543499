import logging
from py4web import Session, Cache, Translator, DAL
from py4web.utils.dbstore import DBStore
from .settings import APP_NAME, DB_FOLDER, T_FOLDER, SESSION_SECRET, LOG_LEVEL

# Logging
logger = logging.getLogger("py4web:" + APP_NAME)
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(name)s - %(message)s"))
    logger.addHandler(handler)
logger.setLevel(LOG_LEVEL)

# Database
db = DAL('sqlite://storage.db', folder=DB_FOLDER)

# Session
session = Session(secret=SESSION_SECRET, storage=DBStore(db))

# Translations
T = Translator(T_FOLDER)

# Cache
cache = Cache(size=1000)
