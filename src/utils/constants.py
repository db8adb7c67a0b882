"""
Constantes globales pour VodAgg.

Ce module contient les constantes utilisees dans l'application:
- Schemas d'URL reconnus pour la lecture
- Categories par defaut (ID fournisseur -> nom)
- Priorite par defaut d'un fournisseur
- Normalisation des noms de region
- Seuils des tranches de score qualite
"""

# Schemas d'URL
INSECURE_SCHEME = "http://"
SECURE_SCHEME = "https://"
RECOGNIZED_SCHEMES = (SECURE_SCHEME,)

# Separateurs de la chaine de lecture brute
EPISODE_SEPARATOR = "#"
NAME_URL_SEPARATOR = "$"
ROUTE_SEPARATOR = "$$$"

# Nom d'episode synthetise (index a partir de 1)
DEFAULT_EPISODE_NAME = "Episode {index}"

# Categories des stations de type CMS (type_id -> nom)
DEFAULT_CATEGORIES: dict[int, str] = {
    1: "电影",
    2: "电视剧",
    3: "综艺",
    4: "动漫",
    5: "短剧",
    6: "体育",
    7: "纪录片",
    8: "预告片",
}

# Priorite d'un fournisseur absent de la configuration
DEFAULT_PROVIDER_PRIORITY = 50

# Alias de region -> nom standard
AREA_NORMALIZATION: dict[str, str] = {
    # Chine continentale
    "大陆": "中国大陆",
    "内地": "中国大陆",
    "国产": "中国大陆",
    "中国": "中国大陆",
    # Hong Kong
    "香港": "中国香港",
    "港": "中国香港",
    # Taiwan
    "台湾": "中国台湾",
    "台": "中国台湾",
    # Coree du Sud
    "韩": "韩国",
    "南韩": "韩国",
    # Autres
    "日": "日本",
    "美": "美国",
    "英": "英国",
    "泰": "泰国",
}

# Tranches de score qualite (bornes inferieures incluses)
SCORE_EXCELLENT = 80
SCORE_GOOD = 60
SCORE_FAIR = 40
MAX_QUALITY_SCORE = 110
