# fetchers/github_issues.py
import time
from typing import Callable, List
from urllib.parse import quote

import requests

from core.config import Settings
from core.http import FetchError, get_json
from core.logger import get_logger
from core.urls import extract_urls

logger = get_logger(__name__)

GITHUB_HEADERS = {"Accept": "application/vnd.github+json"}


def issues_api_url(settings: Settings, page: int = 1) -> str:
    base = (
        f"{settings.github_api.rstrip('/')}/repos/{settings.github_owner}/"
        f"{settings.github_repo}/issues?state=open&per_page={settings.issue_per_page}"
        f"&page={page}"
    )
    if settings.github_label:
        return f"{base}&labels={quote(settings.github_label, safe='')}"
    return base


def load_issue_links(
    session: requests.Session,
    settings: Settings,
    sleep: Callable[[float], None] = time.sleep,
) -> List[str]:
    """
    URLs found in the titles and bodies of open issues, first-seen order,
    without duplicates. Paging stops at the first failed or empty page.
    """
    if not (settings.github_owner and settings.github_repo):
        logger.debug("GitHub owner/repo not configured; skipping issue sources.")
        return []

    urls: List[str] = []
    for page in range(1, settings.issue_max_pages + 1):
        try:
            data = get_json(
                session, issues_api_url(settings, page), settings, headers=GITHUB_HEADERS
            )
        except FetchError as e:
            logger.warning("GitHub issues page %d failed: %s", page, e)
            break

        if not isinstance(data, list) or not data:
            break

        for issue in data:
            if not isinstance(issue, dict):
                continue
            urls.extend(extract_urls(issue.get("title")))
            urls.extend(extract_urls(issue.get("body")))

        sleep(settings.issue_page_delay_ms / 1000.0)

    unique = list(dict.fromkeys(urls))
    logger.info(
        "GitHub issues %s/%s: %d links", settings.github_owner, settings.github_repo, len(unique)
    )
    return unique
