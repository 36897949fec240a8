"""
Logging configuration.

LOG_LEVEL controls the application logger; WeasyPrint and fontTools are
kept at WARNING because they log every font lookup at INFO/DEBUG.
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("auditoiso")
logger.setLevel(LOG_LEVEL)

console_handler = logging.StreamHandler(sys.stdout)
console_handler.setLevel(LOG_LEVEL)
console_handler.setFormatter(logging.Formatter(
    "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S"
))

if not logger.handlers:
    logger.addHandler(console_handler)

for noisy in ("weasyprint", "fontTools"):
    logging.getLogger(noisy).setLevel(logging.WARNING)
