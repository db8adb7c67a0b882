"""
Objets valeur pour les sources de lecture.

Un champ de lecture stocke peut avoir deux formes :
- RawPlaybackStrings : forme historique, chaine delimitee "ep$url#ep$url"
  (nue ou dans un objet JSON {source: chaine})
- StructuredPlaybackMap : forme normalisee {source: [{name, url}, ...]}

La forme est detectee a la lecture par inspection de la premiere valeur
(detect_playback_field). Seule la forme structuree circule dans le domaine,
la conversion se fait dans src/services/play_source_normalizer.py.
"""

import json
from dataclasses import dataclass, field
from typing import Union

# Libelle utilise quand une chaine historique n'est rattachee a aucune source
DEFAULT_SOURCE_LABEL = "default"


@dataclass(frozen=True)
class Episode:
    """
    Episode d'une source de lecture.

    Attributs :
        name : Nom affiche (ex: "第1集", "Episode 3")
        url : URL de lecture (toujours en https:// une fois normalisee)
    """

    name: str
    url: str

    def to_dict(self) -> dict[str, str]:
        """Serialise l'episode pour le stockage JSON."""
        return {"name": self.name, "url": self.url}


# Sources de lecture normalisees : libelle de source -> episodes
PlaySources = dict[str, list[Episode]]


@dataclass(frozen=True)
class RawPlaybackStrings:
    """Forme historique : libelle de source -> chaine delimitee brute."""

    sources: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class StructuredPlaybackMap:
    """Forme normalisee : libelle de source -> liste de dicts {name, url}."""

    sources: dict[str, list[dict]] = field(default_factory=dict)


PlaybackField = Union[RawPlaybackStrings, StructuredPlaybackMap]


def detect_playback_field(stored: object) -> PlaybackField:
    """
    Detecte la forme d'un champ de lecture stocke.

    Accepte une chaine (JSON ou chaine delimitee nue) ou un dict deja decode.
    La forme est determinee par la premiere valeur : une liste indique la
    forme structuree, une chaine la forme historique.

    Args:
        stored: Valeur lue depuis le stockage

    Returns:
        RawPlaybackStrings ou StructuredPlaybackMap (vide si illisible)
    """
    if stored is None:
        return StructuredPlaybackMap()

    if isinstance(stored, str):
        text = stored.strip()
        if not text:
            return StructuredPlaybackMap()
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            # Chaine delimitee nue
            return RawPlaybackStrings({DEFAULT_SOURCE_LABEL: text})
        if isinstance(decoded, str):
            return RawPlaybackStrings({DEFAULT_SOURCE_LABEL: decoded})
        stored = decoded

    if not isinstance(stored, dict) or not stored:
        return StructuredPlaybackMap()

    first_value = next(iter(stored.values()))
    if isinstance(first_value, list):
        return StructuredPlaybackMap(
            {str(label): value for label, value in stored.items() if isinstance(value, list)}
        )

    return RawPlaybackStrings(
        {str(label): value for label, value in stored.items() if isinstance(value, str)}
    )
