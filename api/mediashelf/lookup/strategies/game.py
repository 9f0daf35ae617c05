"""Game lookups: barcode to retail product, cleaned product title to IGDB."""

from __future__ import annotations

import logging
import re
from typing import Sequence

from mediashelf.lookup.base import GameMetadata, GameMetadataClient, LookupStrategy, ProductLookupClient
from mediashelf.schema.lookup import GameLookupResponse
from mediashelf.schema.media import MediaType

logger = logging.getLogger("mediashelf.lookup.game")

EDITION_RE = re.compile(
    r"Game of the Year|GOTY|Deluxe|Definitive|Collector'?s|Complete|Ultimate|Limited|Standard",
    re.IGNORECASE,
)
PLATFORM_TOKEN_RE = re.compile(
    r"\b(PS5|PS4|PS3|PlayStation \d|PlayStation|Xbox Series X\|S|Xbox Series X|Xbox One|Xbox 360|Xbox|"
    r"Nintendo Switch|Switch|Wii U|Wii|Nintendo 3DS|3DS|Nintendo DS|DS)\b",
    re.IGNORECASE,
)
FORMAT_QUALIFIER_RE = re.compile(r"\s*(\([^)]*(Disc|Cartridge|Digital)[^)]*\)|\[[^\]]*(Disc|Cartridge|Digital)[^\]]*\])", re.IGNORECASE)
FORMAT_SUFFIX_RE = re.compile(r"\s*-\s*(Disc|Cartridge|Digital).*$", re.IGNORECASE)
RELEASE_SUFFIX_RE = re.compile(
    r"\s*-\s*(Pre-Played|Pre-Owned|Used|Greatest Hits|Platinum Hits|Player'?s Choice|Nintendo Selects|Essentials).*$",
    re.IGNORECASE,
)
SKU_RE = re.compile(r"\b[A-Z0-9]{3,}-[A-Z0-9]{2,}\b")
QUALIFIER_RE = re.compile(r"\s*(\([^)]*\)|\[[^\]]*\])")

PLATFORM_HINTS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern, re.IGNORECASE), platform)
    for pattern, platform in (
        (r"\bPS5\b|PlayStation 5", "PlayStation 5"),
        (r"\bPS4\b|PlayStation 4", "PlayStation 4"),
        (r"\bPS3\b|PlayStation 3", "PlayStation 3"),
        (r"Xbox Series X\|S|Series X", "Xbox Series X|S"),
        (r"Xbox One", "Xbox One"),
        (r"Xbox 360", "Xbox 360"),
        (r"Nintendo Switch|\bSwitch\b", "Nintendo Switch"),
        (r"Wii U", "Wii U"),
        (r"\bWii\b", "Wii"),
        (r"\b3DS\b", "Nintendo 3DS"),
        (r"\bDS\b", "Nintendo DS"),
    )
)

# Ordered: the first family whose marker appears in the platform name decides.
PLATFORM_FORMATS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("dreamcast",), "GD-ROM"),
    (("switch", "3ds", " ds", "game boy", "nintendo 64", "snes", "nes", "genesis", "game gear"), "Cartridge"),
    (("playstation 5", "playstation 4", "xbox series", "xbox one", "playstation 3"), "Blu-ray Disc"),
    (("playstation 2", "xbox 360", "xbox", "wii"), "DVD"),
    (("playstation", "saturn", "sega cd", "pc", "windows", "mac", "linux"), "CD-ROM"),
)


def clean_game_title(raw_title: str) -> tuple[str, str]:
    """Return ``(search title, edition)`` for a retail game title."""
    title = (raw_title or "").strip()
    if not title:
        return "", ""

    edition_match = EDITION_RE.search(title)
    edition = edition_match.group(0) if edition_match else ""

    title = PLATFORM_TOKEN_RE.sub("", title)
    title = FORMAT_QUALIFIER_RE.sub("", title)
    title = FORMAT_SUFFIX_RE.sub("", title)
    title = RELEASE_SUFFIX_RE.sub("", title)
    title = SKU_RE.sub("", title)
    if edition:
        title = re.sub(re.escape(edition) + r"(\s*Edition)?", "", title, flags=re.IGNORECASE)
    title = QUALIFIER_RE.sub("", title)
    title = re.sub(r"\s+", " ", title).strip(" -:,")
    return title, edition


def extract_game_format(raw_title: str) -> str:
    if re.search(r"Cartridge", raw_title or "", re.IGNORECASE):
        return "Cartridge"
    if re.search(r"Disc|Blu-?ray|DVD", raw_title or "", re.IGNORECASE):
        return "Disc"
    if re.search(r"Digital", raw_title or "", re.IGNORECASE):
        return "Digital"
    return ""


def detect_platform(title: str, *hints: str | None) -> str:
    """Match platform hints against the title first, then category/brand/model."""
    for text in (title or "", " ".join(hint for hint in hints if hint)):
        for pattern, platform in PLATFORM_HINTS:
            if pattern.search(text):
                return platform
    return ""


def derive_format_from_platforms(platforms: Sequence[str], detected_platform: str) -> str:
    """Map the matching (or first) IGDB platform to its usual physical media."""
    if not platforms:
        return ""
    chosen = platforms[0]
    if detected_platform:
        wanted = detected_platform.lower()
        for name in platforms:
            lowered = name.lower()
            if wanted in lowered or lowered in wanted:
                chosen = name
                break
    name = f" {chosen.lower()}"
    for markers, format_name in PLATFORM_FORMATS:
        if any(marker in name for marker in markers):
            return format_name
    return "DVD"


def _match_score(candidate: str, wanted: str) -> float:
    candidate = candidate.lower()
    wanted = wanted.lower()
    if not candidate or not wanted:
        return 0.0
    if candidate == wanted:
        return 1.0
    if wanted in candidate:
        return 0.9
    candidate_words = re.split(r"[\s\-:.]+", candidate)
    wanted_words = [word for word in re.split(r"[\s\-:.]+", wanted) if word]
    if not wanted_words:
        return 0.0
    matched = sum(
        1 for word in wanted_words if any(word in other or other in word for other in candidate_words if other)
    )
    return matched / len(wanted_words)


def find_best_match(results: Sequence[GameMetadata], title: str) -> GameMetadata | None:
    """Pick the highest scoring candidate; below half a match fall back to the first."""
    if not results:
        return None
    best = max(results, key=lambda result: _match_score(result.title, title))
    return best if _match_score(best.title, title) >= 0.5 else results[0]


def _pick_rating(ratings: Sequence[str]) -> str:
    for rating in ratings:
        if "esrb" in rating.lower():
            return rating
    return ratings[0] if ratings else ""


class GameLookupStrategy(LookupStrategy[GameLookupResponse]):
    media_type = MediaType.GAMES
    identifier_kinds = frozenset({"upc", "ean"})

    def __init__(self, products: ProductLookupClient, games: GameMetadataClient) -> None:
        self._products = products
        self._games = games

    async def lookup(self, identifier_kind: str, value: str) -> GameLookupResponse | None:
        if not self.supports_identifier_kind(identifier_kind):
            return None
        product = await self._products.lookup_barcode(value)
        if product is None or not product.title.strip():
            logger.warning("No product title found for %s %s", identifier_kind, value)
            return None

        title, edition = clean_game_title(product.title)
        format_name = extract_game_format(product.title)
        platform = detect_platform(product.title, product.category, product.brand, product.model)
        logger.info(
            "Barcode %s resolved to %r; searching for %r (edition=%r, platform=%r)",
            value,
            product.title,
            title,
            edition,
            platform,
        )

        match = find_best_match(await self._games.search_games(title), title)
        if match is None:
            logger.warning("No game metadata found for %r", title)
            return None

        if not format_name:
            format_name = derive_format_from_platforms(match.platforms, platform)
        return GameLookupResponse(
            title=f"{match.title} ({edition})" if edition else match.title,
            platform=platform,
            genres=list(match.genres),
            developers=list(match.developers),
            publishers=list(match.publishers),
            release_date=match.release_date,
            rating=_pick_rating(match.ratings),
            description=match.summary,
            format=format_name,
            image_url=match.image_url,
        )
