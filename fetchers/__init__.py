# fetchers/__init__.py
import time
from typing import Any, Callable, List

import requests

from core.config import Settings
from core.logger import get_logger

from . import github_issues
from . import query_param
from . import static

logger = get_logger(__name__)

# merge order: static entries, issue links, then the added URL
SOURCES = {
    "static": lambda session, settings, sleep: static.load_static_sources(session, settings),
    "issues": github_issues.load_issue_links,
    "param": lambda session, settings, sleep: query_param.load_param_source(settings),
}


def collect_sources(
    session: requests.Session,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> List[Any]:
    merged: List[Any] = []
    for name, loader in SOURCES.items():
        try:
            entries = loader(session, settings, sleep)
        except Exception as e:
            logger.exception("Source '%s' failed: %s", name, e)
            continue
        logger.debug("Source '%s' contributed %d entries.", name, len(entries))
        merged.extend(entries)
    return merged
