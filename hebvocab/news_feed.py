"""
RSS headline fetching for news-based reading practice
"""
import html
import re
from dataclasses import dataclass
from typing import List, Optional

import requests

from hebvocab.errors import FeedError

USER_AGENT = "hebvocab/0.1 (RSS reader)"

_item_re = re.compile(r"<item[\s\S]*?</item>", re.IGNORECASE)
_cdata_re = re.compile(r"^<!\[CDATA\[(.*)\]\]>$", re.DOTALL)
_tag_re = re.compile(r"<[^>]*>")
_space_re = re.compile(r"\s+")
_image_block_re = re.compile(r"<image[^>]*>([\s\S]*?)</image>", re.IGNORECASE)


@dataclass
class NewsItem:
    """A headline from the feed"""
    title: str
    link: str
    pub_date: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


def _strip_html(value: str) -> str:
    return _space_re.sub(" ", _tag_re.sub(" ", value)).strip()


def get_tag_value(item_xml: str, tag: str) -> str:
    """Text content of the first <tag> in item_xml, with CDATA, entities and markup removed"""
    match = re.search(rf"<{re.escape(tag)}[^>]*>([\s\S]*?)</{re.escape(tag)}>", item_xml, re.IGNORECASE)
    if not match or not match.group(1):
        return ""
    raw = _cdata_re.sub(r"\1", match.group(1).strip())
    return _strip_html(html.unescape(raw))


def get_attribute_value(xml: str, tag: str, attr: str) -> str:
    match = re.search(rf"<{re.escape(tag)}[^>]*{attr}=[\"']([^\"']+)[\"'][^>]*>", xml, re.IGNORECASE)
    return match.group(1) if match else ""


def get_image_url(item_xml: str) -> str:
    """Pick an image from media:content, media:thumbnail, an image enclosure or <image><url>"""
    for tag in ("media:content", "media:thumbnail"):
        url = get_attribute_value(item_xml, tag, "url")
        if url:
            return url

    enclosure_url = get_attribute_value(item_xml, "enclosure", "url")
    enclosure_type = get_attribute_value(item_xml, "enclosure", "type")
    if enclosure_url and enclosure_type.lower().startswith("image/"):
        return enclosure_url

    image_block = _image_block_re.search(item_xml)
    if image_block:
        return get_tag_value(image_block.group(1), "url")

    return ""


def parse_feed(xml: str, max_items: int = 5) -> List[NewsItem]:
    """
    Extract headlines from RSS XML

    Args:
        xml: Raw feed body
        max_items: Number of <item> elements to look at

    Returns:
        NewsItem list; items missing a title or link are dropped
    """
    items = []
    for item_xml in _item_re.findall(xml or "")[:max_items]:
        title = get_tag_value(item_xml, "title")
        link = get_tag_value(item_xml, "link")
        if not title or not link:
            continue

        items.append(NewsItem(
            title=title,
            link=link,
            pub_date=get_tag_value(item_xml, "pubDate") or None,
            description=get_tag_value(item_xml, "description") or None,
            image_url=get_image_url(item_xml) or None,
        ))
    return items


def fetch_headlines(feed_url: str, max_items: int = 5, timeout: int = 10) -> List[NewsItem]:
    """
    Download and parse a feed

    Raises:
        FeedError: on connection failure or non-2xx response
    """
    try:
        response = requests.get(feed_url, headers={"User-Agent": USER_AGENT}, timeout=timeout)
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        raise FeedError(f"Failed to fetch RSS feed {feed_url}: {e}") from e

    return parse_feed(response.text, max_items)

