# core/config.py
import json
import os
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

from .logger import get_logger

logger = get_logger(__name__)

CONFIG_PATH = os.getenv("CONFIG_PATH", "config.json")

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)

IMAGE_FIELDS = ("images", "image")
SITE_FIELDS = ("vendor", "host")
OUTPUT_FORMATS = ("html", "text")


@dataclass
class Settings:
    github_owner: str = ""
    github_repo: str = ""
    github_label: str = "source"
    github_api: str = "https://api.github.com"

    sources_location: str = "sources.json"
    page_url: str = ""
    add_url: str = ""
    add_param: str = "add"

    issue_max_pages: int = 4
    issue_per_page: int = 50
    collection_max_pages: int = 6
    collection_page_limit: int = 50

    descriptor_delay_ms: int = 120
    issue_page_delay_ms: int = 200
    collection_page_delay_ms: int = 250

    request_timeout: float = 30.0
    fetch_attempts: int = 1
    user_agent: str = DEFAULT_USER_AGENT

    currency_symbol: str = "$"
    image_precedence: List[str] = field(default_factory=lambda: list(IMAGE_FIELDS))
    site_precedence: List[str] = field(default_factory=lambda: list(SITE_FIELDS))

    output_path: str = ""
    output_format: str = "html"
    catalog_title: str = "My Shared Catalog"

    def __post_init__(self):
        self.image_precedence = [f for f in self.image_precedence if f in IMAGE_FIELDS]
        self.site_precedence = [f for f in self.site_precedence if f in SITE_FIELDS]
        if self.output_format not in OUTPUT_FORMATS:
            logger.warning(
                "Unknown output_format '%s'; falling back to html.", self.output_format
            )
            self.output_format = "html"
        self.fetch_attempts = max(1, int(self.fetch_attempts))


def _coerce(value: str, default: Any) -> Any:
    if isinstance(default, bool):
        return value.strip().lower() in ("1", "true", "yes")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    if isinstance(default, list):
        return [p.strip() for p in value.replace(";", ",").split(",") if p.strip()]
    return value.strip()


def settings_from_env(environ: Dict[str, str] | None = None) -> Dict[str, Any]:
    """
    Collect overrides from environment variables named after the upper-cased
    field (GITHUB_OWNER, ISSUE_MAX_PAGES, IMAGE_PRECEDENCE="image,images", ...).
    """
    env = os.environ if environ is None else environ
    defaults = Settings()
    out: Dict[str, Any] = {}
    for f in fields(Settings):
        raw = env.get(f.name.upper())
        if raw is None:
            continue
        try:
            out[f.name] = _coerce(raw, getattr(defaults, f.name))
        except ValueError:
            logger.error("Ignoring invalid value for %s: %r", f.name.upper(), raw)
    return out


def load_settings(
    path: str = CONFIG_PATH, environ: Dict[str, str] | None = None
) -> Settings:
    values = settings_from_env(environ)

    if not os.path.exists(path):
        logger.debug("No config file at %s; using environment only.", path)
        return Settings(**values)

    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = json.load(f)
    except (OSError, ValueError) as e:
        logger.error("Failed to load config at %s: %s", path, e)
        raise SystemExit(1)

    if not isinstance(cfg, dict):
        logger.error("Config at %s must be a JSON object.", path)
        raise SystemExit(1)

    known = {f.name for f in fields(Settings)}
    for key, value in cfg.items():
        if key not in known:
            logger.warning("Unknown config key '%s' in %s; ignoring.", key, path)
            continue
        values[key] = value

    try:
        return Settings(**values)
    except (TypeError, ValueError) as e:
        logger.error("Invalid config at %s: %s", path, e)
        raise SystemExit(1)
