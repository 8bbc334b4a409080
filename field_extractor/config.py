"""Configuration settings for the field extractor"""
import os
from dotenv import load_dotenv

load_dotenv()

# Schema file, keyed by document type
SCHEMA_FILE = os.getenv("FIELD_EXTRACTOR_SCHEMA_FILE", os.path.join("config", "schema.json"))

# Per-field trace output (off unless explicitly enabled)
TRACE_EXTRACTION = os.getenv("FIELD_EXTRACTOR_TRACE", "").strip().lower() in ("1", "true", "yes", "on")

# Logging
LOG_LEVEL = os.getenv("FIELD_EXTRACTOR_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
