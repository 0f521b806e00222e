import os

MONGO_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB_NAME", "operations_hub_test"),
}

CLOUDINARY_CONFIG = {}

MAX_UPLOAD_MB = 1

LOG_LEVEL = "WARNING"
LOG_FILE = None

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False
