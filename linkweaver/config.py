import os
import logging
from pathlib import Path
from typing import Optional

try:
	from dotenv import load_dotenv
except ImportError:
	logging.warning("python-dotenv not available; using environment variables only")
else:
	loaded = load_dotenv()
	if not loaded and Path(".env").exists():
		raise RuntimeError(".env file present but failed to load")

DEFAULT_USER_AGENT = (
	"Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
	"(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


def get_str_env(name: str, default: str) -> str:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	return raw


def get_optional_str_env(name: str) -> Optional[str]:
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return None
	return raw


def get_int_env(name: str, default: int) -> int:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return int(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_float_env(name: str, default: float) -> float:
	raw = os.getenv(name)
	if raw is None or raw == "":
		return default
	try:
		return float(raw)
	except ValueError:
		logging.exception("Invalid %s: %r", name, raw)
		return default


def get_bool_env(name: str, default: bool) -> bool:
	raw = os.getenv(name)
	if raw is None or raw.strip() == "":
		return default
	value = raw.strip().lower()
	if value in ("1", "true", "yes", "on"):
		return True
	if value in ("0", "false", "no", "off"):
		return False
	logging.error("Invalid %s: %r", name, raw)
	return default


USER_AGENT = get_str_env("USER_AGENT", DEFAULT_USER_AGENT)
HTTP_TIMEOUT = get_float_env("HTTP_TIMEOUT", 5.0)
VERIFY_TLS = get_bool_env("LINKWEAVER_VERIFY_TLS", True)
MAX_RATE = get_float_env("LINKWEAVER_MAX_RATE", 5.0)
RATE_COOLDOWN_SECONDS = get_float_env("LINKWEAVER_RATE_COOLDOWN_SECONDS", 10.0)
MAX_THROTTLE_RETRIES = get_int_env("LINKWEAVER_MAX_THROTTLE_RETRIES", 10)
HOST_RULES_PATH = get_optional_str_env("LINKWEAVER_HOST_RULES_PATH")


def log_level() -> str:
	return (os.getenv("LINKWEAVER_LOG_LEVEL", "WARNING") or "WARNING").strip().upper()
