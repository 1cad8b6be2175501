import re
from urllib.parse import urlparse, parse_qs, quote

# https://www.youtube.com/watch?v=yzhuCV99Fao&t=319
# https://youtu.be/yzhuCV99Fao?t=319
# https://www.youtube.com/embed/yzhuCV99Fao
# https://www.youtube.com/v/yzhuCV99Fao
# https://www.youtube.com/shorts/yzhuCV99Fao
VIDEO_ID_PATTERNS = [
    re.compile(r'(?:https?://)?(?:www\.)?(?:youtube\.com|youtu\.be)/watch\?v=([^&\n?#]+)'),
    re.compile(r'(?:https?://)?(?:www\.)?(?:youtube\.com|youtu\.be)/embed/([^&\n?#]+)'),
    re.compile(r'(?:https?://)?(?:www\.)?youtu\.be/([^&\n?#]+)'),
    re.compile(r'(?:https?://)?(?:www\.)?youtube\.com/v/([^&\n?#]+)'),
    re.compile(r'(?:https?://)?(?:www\.)?youtube\.com/shorts/([^&\n?#]+)'),
]

HOST_PATTERN = re.compile(r'(^|\.)(youtube\.com|youtu\.be)$')

URL_SEPARATORS = re.compile(r'[\n,\s]+')


def is_valid_youtube_url(url: str) -> bool:
    """Check that the URL points at a YouTube host"""
    try:
        hostname = urlparse(url.strip()).hostname
    except ValueError:
        return False
    return bool(hostname and HOST_PATTERN.search(hostname))


def extract_video_id(url: str) -> str | None:
    """Get the video ID from a YouTube URL in any of the supported shapes.

    Returns None when no ID can be found.
    """
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(url)
        if match:
            return match.group(1)
    try:
        query_params = parse_qs(urlparse(url).query)
    except ValueError:
        return None
    if query_params.get('v'):
        return query_params['v'][0]
    return None


def thumbnail_url(video_id: str) -> str:
    return f"https://img.youtube.com/vi/{quote(video_id, safe='')}/hqdefault.jpg"


def watch_url(video_id: str) -> str:
    return f"https://www.youtube.com/watch?v={quote(video_id, safe='')}"


def split_urls(text: str) -> list[str]:
    """Split pasted text on newlines, spaces and commas, keeping input order."""
    return [part for part in URL_SEPARATORS.split(text) if part.strip()]
