"""
Configuration settings for the product catalog.

Centralized configuration for storage locations, file naming templates,
locale selection and logging.
"""

import os
from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
DATA_ROOT = Path(os.getenv("CATALOG_DATA_ROOT", PROJECT_ROOT / "data"))
REPORTS_ROOT = Path(os.getenv("CATALOG_REPORTS_ROOT", PROJECT_ROOT / "reports"))
TEMP_ROOT = Path(os.getenv("CATALOG_TEMP_ROOT", PROJECT_ROOT / "temp"))

# Locale
DEFAULT_LOCALE = os.getenv("CATALOG_LOCALE", "en-GB")  # Also the fallback tag

# Text records
RECORD_DELIMITER = "|"
FILE_ENCODING = "utf-8"

# File naming (data_root / reports_root / temp_root)
ITEM_FILE_PREFIX = "product"
ITEM_FILE = "product{id}.txt"
REPORT_FILE = "product{id}.txt"
REVIEWS_FILE = "reviews{id}.txt"
SNAPSHOT_FILE = "{timestamp}.tmp"
SNAPSHOT_SUFFIX = "tmp"
SNAPSHOT_VERSION = "1.0.0"

# Logging
LOG_LEVEL = "INFO"  # DEBUG, INFO, WARNING, ERROR
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = "catalog.log"
