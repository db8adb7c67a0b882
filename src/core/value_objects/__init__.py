"""
Objets valeur immutables representant des concepts du domaine sans identite.

Les objets valeur sont definis par leurs attributs plutot que par une identite.
Ils sont immutables et peuvent etre librement partages et compares par valeur.

Exports :
- Episode : Couple {name, url} d'une source de lecture
- PlaySources : Alias libelle de source -> liste d'episodes
- RawPlaybackStrings / StructuredPlaybackMap : Formes stockees du champ de lecture
- detect_playback_field : Detection de la forme d'un champ stocke
- AggregationConfig : Tables de categories et de priorites fournisseurs
"""

from src.core.value_objects.aggregation_config import AggregationConfig
from src.core.value_objects.playback import (
    DEFAULT_SOURCE_LABEL,
    Episode,
    PlaybackField,
    PlaySources,
    RawPlaybackStrings,
    StructuredPlaybackMap,
    detect_playback_field,
)

__all__ = [
    "AggregationConfig",
    "DEFAULT_SOURCE_LABEL",
    "Episode",
    "PlaybackField",
    "PlaySources",
    "RawPlaybackStrings",
    "StructuredPlaybackMap",
    "detect_playback_field",
]
