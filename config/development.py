import os

MONGO_CONFIG = {
    "uri": os.getenv("MONGO_URI", "mongodb://localhost:27017"),
    "database": os.getenv("MONGO_DB_NAME", "operations_hub"),
}

CLOUDINARY_CONFIG = {
    "cloud_name": os.getenv("CLOUDINARY_CLOUD_NAME", ""),
    "api_key": os.getenv("CLOUDINARY_API_KEY", ""),
    "api_secret": os.getenv("CLOUDINARY_API_SECRET", ""),
}

MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "10"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FILE = os.getenv("LOG_FILE", "logs/operations_hub.log")

DEBUG = bool(int(os.getenv("DEBUG", "1")))

# Create indexes on startup (idempotent)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo shifts/inventory on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
