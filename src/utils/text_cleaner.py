"""
Nettoyage des champs texte recus des stations.

- strip_html : retire les balises et entites HTML des resumes
- normalize_area : ramene les alias de region a un nom standard
- clean_image_url : valide et passe en https l'URL d'une affiche
"""

import re

from bs4 import BeautifulSoup

from src.utils.constants import AREA_NORMALIZATION, INSECURE_SCHEME, SECURE_SCHEME
from src.utils.helpers import strip_invisible_chars

_WHITESPACE_RE = re.compile(r"\s+")
_AREA_SEPARATORS_RE = re.compile(r"[,，/、]")


def strip_html(text: str) -> str:
    """
    Retire le balisage HTML d'un texte et reduit les espaces.

    "<p>Un&nbsp;film</p>" -> "Un film"
    """
    if not text:
        return ""
    if "<" not in text and "&" not in text:
        return _WHITESPACE_RE.sub(" ", strip_invisible_chars(text)).strip()
    soup = BeautifulSoup(text, "html.parser")
    plain = soup.get_text(" ")
    return _WHITESPACE_RE.sub(" ", strip_invisible_chars(plain)).strip()


def normalize_area(area: str) -> str:
    """
    Normalise un nom de region.

    Seule la premiere region d'une liste est conservee ("大陆,香港" -> "中国大陆").
    Une region inconnue est retournee telle quelle.
    """
    if not area:
        return ""
    first = _AREA_SEPARATORS_RE.split(area.strip())[0].strip()
    return AREA_NORMALIZATION.get(first, first)


def clean_image_url(url: str) -> str:
    """
    Nettoie l'URL d'une affiche.

    Les URLs protocole-relatives ("//img...") et http sont passees en https ;
    toute autre valeur sans schema http(s) est rejetee ("").
    """
    if not url:
        return ""
    url = url.strip()
    if url.startswith("//"):
        url = SECURE_SCHEME + url[2:]
    if url.startswith(INSECURE_SCHEME):
        url = SECURE_SCHEME + url[len(INSECURE_SCHEME):]
    if not url.startswith(SECURE_SCHEME) or len(url) <= len(SECURE_SCHEME):
        return ""
    return url
