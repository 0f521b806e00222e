"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

import re

DEFAULT_PAGE = 1
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

DEFAULT_API_PORT = 5001
DEFAULT_CLIENT_TIMEOUT_SECONDS = 10

DEFAULT_MAX_UPLOAD_MB = 10
ALLOWED_UPLOAD_PATTERN = re.compile(r"jpeg|jpg|png|pdf|doc|docx|mp4|mov|avi|mp3")

BRIEFING_ATTACHMENT_FOLDER = "briefing-attachments"
TRAINING_ATTACHMENT_FOLDER = "training-attachments"

BRIEFING_ID_PREFIX = "BRI"
TRAINING_ID_PREFIX = "TRN"
DISPLAY_ID_WIDTH = 3

SHORT_ID_LENGTH = 6

DEFAULT_REORDER_LEVEL = 10
DEFAULT_MAX_ATTENDEES = 20

UPCOMING_MAINTENANCE_DAYS = 30
