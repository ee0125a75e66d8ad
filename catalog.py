import os
import sys
import time
from typing import Callable, List

from core.config import CONFIG_PATH, Settings, load_settings
from core.http import build_session
from core.logger import get_logger
from core.models import Item
from core.pipeline import aggregate
from core.report_html import build_html_catalog, build_plaintext_catalog
from fetchers import collect_sources

logger = get_logger(__name__)


def render(items: List[Item], settings: Settings) -> str:
    if settings.output_format == "text":
        return build_plaintext_catalog(items, title=settings.catalog_title)
    return build_html_catalog(items, title=settings.catalog_title)


def write_output(content: str, path: str) -> None:
    if not path:
        sys.stdout.write(content)
        return
    out_dir = os.path.dirname(path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info("Catalog written to %s", path)


def build_catalog(
    settings: Settings, sleep: Callable[[float], None] = time.sleep
) -> List[Item]:
    with build_session(settings) as session:
        entries = collect_sources(session, settings, sleep=sleep)
        logger.info("Collected %d source entries.", len(entries))
        return aggregate(entries, session, settings, sleep=sleep)


def run_once(settings: Settings) -> int:
    items = build_catalog(settings)
    write_output(render(items, settings), settings.output_path)
    logger.info("Rendered %d items.", len(items))
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(run_once(load_settings(CONFIG_PATH)))
    except Exception as e:
        logger.exception("Fatal catalog error: %s", e)
        raise SystemExit(2)
