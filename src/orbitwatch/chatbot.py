"""Keyword-driven chat replies backed by the NASA API client."""
from __future__ import annotations

import re
from datetime import date, timedelta
from typing import Literal, Optional

from orbitwatch.ingest.nasa_api import NASAAPIClient

Intent = Literal["media", "mars", "neo", "eonet", "apod"]

MEDIA_KIND = re.compile(r"image|video|audio")
MEDIA_SUBJECT = re.compile(
    r"nasa|space|planet|galaxy|telescope|moon|mars|earth|satellite|apollo|hubble|james webb|black hole"
    r"|star|comet|asteroid|rover|launch|rocket|shuttle|station"
)
MEDIA_TOPIC = re.compile(r"(?:image|images|video|audio|photo|picture) (?:of|about)? ([\w\s]+)", re.IGNORECASE)
ROVER_NAME = re.compile(r"(curiosity|opportunity|spirit)", re.IGNORECASE)
SOL_NUMBER = re.compile(r"sol\s*(\d+)", re.IGNORECASE)

# NASA's feed covers a week when no range is given
NEO_FEED_DAYS = 7


def detect_intent(message: str) -> Intent:
    """Pick the first matching topic; anything unrecognised falls back to APOD."""
    lower = message.lower()
    if MEDIA_KIND.search(lower) and MEDIA_SUBJECT.search(lower):
        return "media"
    if "mars" in lower or "rover" in lower:
        return "mars"
    if any(word in lower for word in ("asteroid", "neo", "comet")):
        return "neo"
    if any(word in lower for word in ("event", "wildfire", "storm", "volcano")):
        return "eonet"
    return "apod"


def media_topic(message: str) -> str:
    match = MEDIA_TOPIC.search(message)
    topic = match.group(1).strip() if match else ""
    if not topic:
        topic = " ".join(message.strip().split(" ")[-3:])
    return topic


def _first(items: Optional[list]) -> dict:
    return items[0] if items else {}


def _media_reply(client: NASAAPIClient, message: str) -> str:
    topic = media_topic(message)
    data = client.search_images(topic, media_type=None)
    items = (data.get("collection") or {}).get("items") or []
    if not items:
        return f'Sorry, I couldn\'t find any NASA media results for "{topic}".'
    first = items[0]
    details = _first(first.get("data"))
    title = details.get("title") or "NASA Media"
    description = details.get("description") or ""
    link = _first(first.get("links")).get("href") or ""
    return f'Here is a result for "{topic}": {title}. {description} {link}'


def _mars_reply(client: NASAAPIClient, message: str) -> str:
    rover_match = ROVER_NAME.search(message)
    sol_match = SOL_NUMBER.search(message)
    rover = rover_match.group(1).lower() if rover_match else "curiosity"
    sol = sol_match.group(1) if sol_match else "1000"
    photos = client.mars_sol_photos(rover, int(sol)).get("photos") or []
    if photos:
        return f"Found {len(photos)} photos from {rover.capitalize()} on sol {sol}. Here is one: {photos[0]['img_src']}"
    return f"No photos found for {rover.capitalize()} on sol {sol}. Try another sol or rover!"


def _neo_reply(client: NASAAPIClient, today: date) -> str:
    end = today + timedelta(days=NEO_FEED_DAYS)
    data = client.neo_feed(today.isoformat(), end.isoformat())
    return f"There are {data.get('element_count')} near-Earth objects in the current feed."


def _eonet_reply(client: NASAAPIClient) -> str:
    events = client.eonet_events().get("events") or []
    return f"There are currently {len(events)} natural events being tracked by NASA."


def _apod_reply(client: NASAAPIClient) -> str:
    data = client.apod()
    return f"Astronomy Picture of the Day: {data.get('title')}. {data.get('explanation')}"


def reply_to(message: str, client: NASAAPIClient, today: Optional[date] = None) -> str:
    """Answer a chat message with one upstream lookup. Upstream errors propagate."""
    intent = detect_intent(message)
    if intent == "media":
        return _media_reply(client, message)
    if intent == "mars":
        return _mars_reply(client, message)
    if intent == "neo":
        return _neo_reply(client, today or date.today())
    if intent == "eonet":
        return _eonet_reply(client)
    return _apod_reply(client)
