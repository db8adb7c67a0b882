"""
Analyse des reponses des stations (JSON ou XML).

Les stations exposent le meme contenu sous deux formats :
- JSON : {"page", "pagecount", "total", "list": [{vod_id, vod_name, ...}]}
- XML : <rss><list page pagecount pagesize recordcount><video>...</video></list></rss>
  avec les chaines de lecture dans <dl><dd flag="ligne">...</dd></dl>

Les noms de champs varient d'une station a l'autre (vod_name/name,
vod_content/des/blurb, type_id/tid...) : ils sont ramenes a ProviderItem.
Une reponse illisible est levee en ResponseParseError.
"""

import json
import xml.etree.ElementTree as ET
from typing import Any, Optional

from src.core.ports.api_clients import ProviderItem, ProviderPage
from src.utils.constants import ROUTE_SEPARATOR

FORMAT_JSON = "json"
FORMAT_XML = "xml"
FORMAT_AUTO = "auto"

# Champ ProviderItem -> alias possibles, par ordre de preference
FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "vod_id": ("vod_id", "id"),
    "name": ("vod_name", "name"),
    "year": ("vod_year", "year"),
    "area": ("vod_area", "area"),
    "actor": ("vod_actor", "actor"),
    "director": ("vod_director", "director"),
    "writer": ("vod_writer", "writer"),
    "content": ("vod_content", "des", "blurb", "vod_blurb"),
    "pic": ("vod_pic", "pic"),
    "play_from": ("vod_play_from", "play_from"),
    "play_url": ("vod_play_url", "play_url"),
    "type_id": ("type_id", "tid"),
    "type_name": ("type_name", "type"),
    "remarks": ("vod_remarks", "note", "remarks"),
}

# Champs dont une liste amont correspond a plusieurs lignes de lecture
_ROUTE_FIELDS = ("play_from", "play_url")


class ResponseParseError(Exception):
    """Reponse d'une station illisible."""

    pass


def detect_format(text: str) -> str:
    """Devine le format d'une reponse ("xml" si elle commence par une balise)."""
    return FORMAT_XML if text.lstrip().startswith("<") else FORMAT_JSON


def _first(data: dict[str, Any], aliases: tuple[str, ...]) -> Any:
    for alias in aliases:
        value = data.get(alias)
        if value not in (None, ""):
            return value
    return None


def _as_text(value: Any, list_separator: str = ",") -> str:
    if value is None:
        return ""
    # Objet JSON conserve tel quel, decoupe ensuite par split_provider_routes
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, list):
        return list_separator.join(_as_text(part) for part in value if part not in (None, ""))
    return str(value).strip()


def _as_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


def item_from_mapping(data: dict[str, Any]) -> Optional[ProviderItem]:
    """
    Construit un ProviderItem a partir d'un dictionnaire aux noms variables.

    Returns:
        None si l'identifiant ou le titre est absent
    """
    values = {name: _first(data, aliases) for name, aliases in FIELD_ALIASES.items()}
    vod_id = _as_text(values.pop("vod_id"))
    name = _as_text(values.pop("name"))
    if not vod_id or not name:
        return None

    type_id = _as_int(values.pop("type_id"))
    return ProviderItem(
        vod_id=vod_id,
        name=name,
        type_id=type_id if type_id else None,
        **{
            key: _as_text(value, ROUTE_SEPARATOR if key in _ROUTE_FIELDS else ",")
            for key, value in values.items()
        },
    )


def parse_json(text: str) -> ProviderPage:
    """Analyse une reponse JSON."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"JSON invalide: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseError("Reponse JSON inattendue (objet attendu)")

    raw_items = data.get("list") or []
    items = [
        item
        for item in (item_from_mapping(raw) for raw in raw_items if isinstance(raw, dict))
        if item is not None
    ]
    return ProviderPage(
        page=_as_int(data.get("page"), 1) or 1,
        page_count=_as_int(_first(data, ("pagecount", "page_count")), 1) or 1,
        total=_as_int(_first(data, ("total", "recordcount")), 0) or 0,
        items=items,
    )


def _video_to_mapping(video: ET.Element) -> dict[str, Any]:
    data: dict[str, Any] = {}
    for child in video:
        if child.tag == "dl":
            continue
        data[child.tag] = (child.text or "").strip()

    # Une ligne de lecture par <dd>, libellee par son attribut flag
    flags: list[str] = []
    routes: list[str] = []
    for position, dd in enumerate(video.iterfind("dl/dd"), start=1):
        content = (dd.text or "").strip()
        if not content:
            continue
        flags.append(dd.get("flag") or str(position))
        routes.append(content)
    if routes:
        data["vod_play_url"] = ROUTE_SEPARATOR.join(routes)
        data["vod_play_from"] = ROUTE_SEPARATOR.join(flags)
    return data


def parse_xml(text: str) -> ProviderPage:
    """Analyse une reponse XML."""
    try:
        root = ET.fromstring(text.strip())
    except ET.ParseError as e:
        raise ResponseParseError(f"XML invalide: {e}") from e

    listing = root if root.tag == "list" else root.find("list")
    attributes = dict(root.attrib)
    if listing is not None:
        attributes.update(listing.attrib)

    videos = root.iter("video")
    items = [
        item
        for item in (item_from_mapping(_video_to_mapping(video)) for video in videos)
        if item is not None
    ]
    return ProviderPage(
        page=_as_int(attributes.get("page"), 1) or 1,
        page_count=_as_int(attributes.get("pagecount"), 1) or 1,
        total=_as_int(attributes.get("recordcount"), 0) or 0,
        items=items,
    )


def parse_response(text: str, response_format: str = FORMAT_AUTO) -> ProviderPage:
    """
    Analyse une reponse de station.

    Args:
        text: Corps de la reponse
        response_format: "json", "xml" ou "auto"

    Returns:
        ProviderPage normalisee

    Raises:
        ResponseParseError: Si le corps est illisible
    """
    actual = detect_format(text) if response_format == FORMAT_AUTO else response_format
    if actual == FORMAT_XML:
        return parse_xml(text)
    return parse_json(text)
