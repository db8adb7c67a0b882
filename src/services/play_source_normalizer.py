"""
Normalisation des sources de lecture.

Convertit les chaines de lecture brutes des stations
("第1集$http://a.com/1.m3u8#第2集$http://a.com/2.m3u8") en liste
structuree d'episodes, avec passage force en https.

Regles :
- segments separes par "#", nom et URL separes par le PREMIER "$"
- sans "$" ou avec un nom vide, le nom est "Episode {index}" (index a partir de 1)
- "http://" est remplace par "https://" sans condition
- un segment dont l'URL est vide ou sans schema reconnu est ignore
- une source sans episode valide est absente du resultat

Le passage force en https est un risque accepte : une station qui ne sert
pas https echouera a la lecture.

Toutes les fonctions sont pures et ne levent jamais d'exception sur une
entree malformee.
"""

import json
from collections.abc import Mapping

from src.core.value_objects.playback import (
    Episode,
    PlaySources,
    RawPlaybackStrings,
    StructuredPlaybackMap,
    detect_playback_field,
)
from src.utils.constants import (
    DEFAULT_EPISODE_NAME,
    EPISODE_SEPARATOR,
    INSECURE_SCHEME,
    NAME_URL_SEPARATOR,
    RECOGNIZED_SCHEMES,
    ROUTE_SEPARATOR,
    SECURE_SCHEME,
)


def upgrade_to_https(url: str) -> str:
    """Remplace le prefixe http:// par https:// (remplacement litteral)."""
    if url and url.startswith(INSECURE_SCHEME):
        return SECURE_SCHEME + url[len(INSECURE_SCHEME):]
    return url


def is_playable_url(url: str) -> bool:
    """Verifie qu'une URL (deja passee en https) est exploitable."""
    if not url:
        return False
    return any(
        url.startswith(scheme) and len(url) > len(scheme)
        for scheme in RECOGNIZED_SCHEMES
    )


def _default_name(index: int) -> str:
    return DEFAULT_EPISODE_NAME.format(index=index)


def parse_episodes(raw: str) -> list[Episode]:
    """
    Decoupe une chaine de lecture brute en episodes.

    Args:
        raw: Chaine "nom$url#nom$url#..."

    Returns:
        Liste des episodes valides (vide si aucun)
    """
    if not raw or not isinstance(raw, str):
        return []

    episodes: list[Episode] = []
    for position, segment in enumerate(raw.split(EPISODE_SEPARATOR), start=1):
        segment = segment.strip()
        if not segment:
            continue

        name, separator, url = segment.partition(NAME_URL_SEPARATOR)
        if not separator:
            # Pas de "$" : tout le segment est l'URL
            name, url = "", segment

        name = name.strip() or _default_name(position)
        url = upgrade_to_https(url.strip())

        if is_playable_url(url):
            episodes.append(Episode(name=name, url=url))

    return episodes


def normalize_play_sources(raw_sources: Mapping[str, object]) -> PlaySources:
    """
    Normalise un dictionnaire source -> chaine brute.

    Args:
        raw_sources: Libelle de source -> chaine de lecture brute

    Returns:
        Libelle de source -> episodes (sources vides omises)
    """
    result: PlaySources = {}
    for label, raw in raw_sources.items():
        if not isinstance(raw, str):
            continue
        episodes = parse_episodes(raw)
        if episodes:
            result[str(label)] = episodes
    return result


def sanitize_episodes(items: list) -> list[Episode]:
    """
    Revalide une liste d'episodes deja structuree ({name, url}).

    Applique les memes regles que parse_episodes pour garantir
    l'invariant https sur les donnees relues du stockage.
    """
    episodes: list[Episode] = []
    for position, item in enumerate(items, start=1):
        if isinstance(item, Episode):
            name, url = item.name, item.url
        elif isinstance(item, Mapping):
            name = str(item.get("name") or "")
            url = str(item.get("url") or "")
        else:
            continue
        url = upgrade_to_https(url.strip())
        if is_playable_url(url):
            episodes.append(Episode(name=name.strip() or _default_name(position), url=url))
    return episodes


def ensure_structured(stored: object) -> PlaySources:
    """
    Point unique de conversion vers la forme structuree.

    Accepte toute valeur stockee (chaine delimitee, JSON brut ou structure,
    dict deja decode) et retourne des sources normalisees.
    """
    playback = detect_playback_field(stored)

    if isinstance(playback, RawPlaybackStrings):
        return normalize_play_sources(playback.sources)

    if isinstance(playback, StructuredPlaybackMap):
        result: PlaySources = {}
        for label, items in playback.sources.items():
            episodes = sanitize_episodes(items)
            if episodes:
                result[label] = episodes
        return result

    return {}


def serialize_play_sources(play_sources: PlaySources) -> str:
    """Serialise des sources structurees en JSON pour le stockage."""
    return json.dumps(
        {
            label: [episode.to_dict() for episode in episodes]
            for label, episodes in play_sources.items()
        },
        ensure_ascii=False,
    )


def split_provider_routes(provider: str, play_url: str, play_from: str = "") -> dict[str, str]:
    """
    Decoupe le champ de lecture d'une station en chaines brutes par ligne.

    Formats acceptes :
    - chaine simple "ep$url#ep$url" -> {provider: chaine}
    - plusieurs lignes separees par "$$$", libellees par play_from
      -> {"provider-ligne": chaine}
    - objet JSON {ligne: chaine} -> {"provider-ligne": chaine}

    Args:
        provider: Nom de la station
        play_url: Champ vod_play_url brut
        play_from: Champ vod_play_from brut ("ligne1$$$ligne2")

    Returns:
        Libelle de source -> chaine brute
    """
    if not play_url or not isinstance(play_url, str):
        return {}

    text = play_url.strip()
    if text.startswith("{"):
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            decoded = None
        if isinstance(decoded, dict):
            return {
                f"{provider}-{route}": value
                for route, value in decoded.items()
                if isinstance(value, str) and value
            }

    routes = text.split(ROUTE_SEPARATOR)
    if len(routes) == 1:
        return {provider: text}

    labels = play_from.split(ROUTE_SEPARATOR) if play_from else []
    result: dict[str, str] = {}
    for index, route in enumerate(routes):
        if not route.strip():
            continue
        route_name = labels[index].strip() if index < len(labels) else ""
        result[f"{provider}-{route_name or index + 1}"] = route
    return result
