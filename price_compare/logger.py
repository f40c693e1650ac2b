# price_compare/logger.py

import logging
from logging.handlers import RotatingFileHandler
import os
import re
import sys
import json
from datetime import datetime, timezone

# api_key in query strings (?api_key=...) and in logged params dicts ('api_key': '...')
SECRET_PATTERNS = (
  re.compile(r"(api_key=)[^&\s'\"]+"),
  re.compile(r"""(['"]api_key['"]\s*:\s*['"])[^'"]*"""),
)
MASK = "***"

# APP_ENV -> (root level, file name, file level, max bytes, backups)
LOG_PROFILES = {
  "development": (logging.DEBUG, "app.log", logging.INFO, 5*1024*1024, 3),
  "testing": (logging.DEBUG, "test.log", logging.DEBUG, 1*1024*1024, 1),
  "production": (logging.INFO, "app.log", logging.INFO, 5*1024*1024, 3),
}


def redact(text: str) -> str:
  for pattern in SECRET_PATTERNS:
    text = pattern.sub(rf"\g<1>{MASK}", text)
  return text


class JsonFormatter(logging.Formatter):
  """
  One JSON object per line. The SerpApi key is masked wherever it shows up,
  including request URLs quoted in requests/urllib3 exception messages.
  """
  def format(self, record):
    log_record = {
      "timestamp": datetime.now(timezone.utc).isoformat(),
      "level": record.levelname,
      "logger": record.name,
      "message": redact(record.getMessage()),
      "file": record.pathname,
      "line": record.lineno,
      "function": record.funcName
    }

    if record.exc_info:
      log_record["exception"] = redact(self.formatException(record.exc_info))

    return json.dumps(log_record, ensure_ascii=False)


json_formatter = JsonFormatter()

def configure_logging():
  env = os.getenv("APP_ENV", "development")
  root_level, file_name, file_level, max_bytes, backups = LOG_PROFILES.get(env, LOG_PROFILES["production"])

  log_dir = os.getenv("LOG_DIR", "logs")
  os.makedirs(log_dir, exist_ok=True)

  logger = logging.getLogger()
  logger.setLevel(root_level)

  # uvicorn --reload and streamlit reruns import this again
  if logger.hasHandlers():
    logger.handlers.clear()

  console_handler = logging.StreamHandler(sys.stdout)
  console_handler.setFormatter(json_formatter)
  console_handler.setLevel(logging.ERROR)
  logger.addHandler(console_handler)

  file_handler = RotatingFileHandler(os.path.join(log_dir, file_name), maxBytes=max_bytes,
                                     backupCount=backups, encoding="utf-8")
  file_handler.setFormatter(json_formatter)
  file_handler.setLevel(file_level)
  logger.addHandler(file_handler)

  # connection pool chatter, one line per upstream call
  logging.getLogger("urllib3").setLevel(logging.WARNING)


def get_logger(name):
    return logging.getLogger(name)
