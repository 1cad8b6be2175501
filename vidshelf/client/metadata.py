"""
Best-effort video metadata without an API key.

Lookups try noembed.com, then YouTube's oEmbed endpoint, then fall back to
placeholder values. They never raise.
"""
import asyncio
from datetime import date

import requests
from pydantic import BaseModel

from vidshelf.logger import logger
from vidshelf.models import Video
from .urls import is_valid_youtube_url, extract_video_id, thumbnail_url, watch_url, split_urls

NOEMBED_URL = "https://noembed.com/embed"
OEMBED_URL = "https://www.youtube-nocookie.com/oembed"
BULK_BATCH_SIZE = 3


class VideoDetails(BaseModel):
    title: str
    thumbnail_url: str
    duration: str = "Unknown"
    channel_title: str = "Unknown Channel"
    published_at: str


class BulkResult(BaseModel):
    videos: list[Video] = []
    success: int = 0
    failed: int = 0
    duplicates: int = 0


def placeholder_details(video_id: str) -> VideoDetails:
    return VideoDetails(
        title=f"Video {video_id}",
        thumbnail_url=thumbnail_url(video_id),
        published_at=date.today().isoformat(),
    )


def _from_oembed(video_id: str, data: dict) -> VideoDetails:
    fallback = placeholder_details(video_id)
    return VideoDetails(
        title=data.get("title") or fallback.title,
        thumbnail_url=data.get("thumbnail_url") or fallback.thumbnail_url,
        channel_title=data.get("author_name") or fallback.channel_title,
        published_at=fallback.published_at,
    )


def fetch_video_details(video_id: str, session: requests.Session | None = None,
                        timeout: float = 10.0) -> VideoDetails:
    http = session or requests
    params = {"url": watch_url(video_id)}
    for endpoint, extra in ((NOEMBED_URL, {}), (OEMBED_URL, {"format": "json"})):
        try:
            response = http.get(endpoint, params={**extra, **params}, timeout=timeout)
            if response.ok:
                data = response.json()
                # noembed answers 200 with an error field for unknown videos
                if isinstance(data, dict) and not data.get("error"):
                    return _from_oembed(video_id, data)
        except (requests.RequestException, ValueError) as e:
            logger.debug("Metadata lookup via %s failed for %s: %s", endpoint, video_id, e)
    logger.info("Using placeholder metadata for video %s", video_id)
    return placeholder_details(video_id)


def video_from_url(url: str, session: requests.Session | None = None) -> Video:
    """Build a Video for a pasted link.

    Raises:
        ValueError: If the URL is not a YouTube URL or has no video ID
    """
    url = url.strip()
    if not is_valid_youtube_url(url):
        raise ValueError(f"Not a valid YouTube URL: {url}")
    video_id = extract_video_id(url)
    if not video_id:
        raise ValueError(f"Could not extract video ID from URL: {url}")
    details = fetch_video_details(video_id, session)
    return Video(
        id=video_id,
        title=details.title,
        thumbnail_url=details.thumbnail_url,
        duration=details.duration,
        channel_title=details.channel_title,
        published_at=details.published_at,
        source_url=url,
    )


async def videos_from_text(text: str, known_ids: set[str] | None = None,
                           session: requests.Session | None = None) -> BulkResult:
    """Resolve every YouTube link in pasted text, preserving input order.

    Links are fetched a few at a time. IDs already known, or repeated within
    the text, are counted as duplicates and skipped.
    """
    seen = set(known_ids or ())
    result = BulkResult()
    urls = [url for url in split_urls(text) if is_valid_youtube_url(url)]

    for start in range(0, len(urls), BULK_BATCH_SIZE):
        batch = urls[start:start + BULK_BATCH_SIZE]
        outcomes = await asyncio.gather(
            *(asyncio.to_thread(video_from_url, url, session) for url in batch),
            return_exceptions=True,
        )
        for url, outcome in zip(batch, outcomes):
            if isinstance(outcome, BaseException):
                logger.info("Could not add %s: %s", url, outcome)
                result.failed += 1
            elif outcome.id in seen:
                result.duplicates += 1
            else:
                seen.add(outcome.id)
                result.videos.append(outcome)
                result.success += 1
    return result
