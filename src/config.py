"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe VODAGG_,
et peut optionnellement être fournie via un fichier .env.

Les stations et les catégories sont des structures JSON :
    VODAGG_PROVIDERS='[{"name": "station_a", "api_url": "https://a.example/api.php/provide/vod/", "priority": 80}]'
    VODAGG_CATEGORIES='{"1": "电影", "2": "电视剧"}'

Le webhook d'alerte est optionnel - les alertes sont désactivées si non fourni.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.value_objects.aggregation_config import AggregationConfig
from src.utils.constants import DEFAULT_CATEGORIES, DEFAULT_PROVIDER_PRIORITY

# Trouver le fichier .env à la racine du projet (parent de src/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class ProviderSettings(BaseModel):
    """Déclaration d'une station de ressources."""

    name: str
    api_url: str
    priority: int = Field(default=DEFAULT_PROVIDER_PRIORITY, ge=0)
    response_format: Literal["json", "xml", "auto"] = "auto"
    enabled: bool = True


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe VODAGG_.
    Exemple : VODAGG_LOG_LEVEL=DEBUG

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="VODAGG_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Bases de données (stockage principal et index de recherche séparés)
    database_url: str = Field(default="sqlite:///data/vodagg.db")
    search_database_url: str = Field(default="sqlite:///data/vodagg_search.db")

    # Stations et catégories
    providers: list[ProviderSettings] = Field(default_factory=list)
    categories: dict[int, str] = Field(default_factory=lambda: dict(DEFAULT_CATEGORIES))

    # Collecte
    request_delay_ms: int = Field(default=500, ge=0)
    request_timeout_s: float = Field(default=15.0, gt=0)
    max_retries: int = Field(default=3, ge=1)

    # Verification des liens de lecture
    link_check_timeout_s: float = Field(default=5.0, gt=0)
    link_check_limit: int = Field(default=100, ge=1)
    link_recheck_days: int = Field(default=7, ge=0)

    # Fusion et index de recherche
    merge_window: int = Field(default=50, ge=1)
    search_rebuild_batch_size: int = Field(default=500, ge=1)
    rebuild_index_after_merge: bool = Field(default=True)

    # Santé (seuils en pourcentage / points de score)
    health_period_hours: int = Field(default=24, ge=1)
    health_valid_rate_warning: float = Field(default=80.0, ge=0, le=100)
    health_valid_rate_critical: float = Field(default=60.0, ge=0, le=100)
    health_score_warning: float = Field(default=60.0, ge=0)
    health_score_critical: float = Field(default=40.0, ge=0)
    alert_webhook_url: Optional[str] = Field(default=None)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/vodagg.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("log_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        """Étend ~ vers le répertoire home dans les chemins."""
        return Path(v).expanduser()

    @property
    def alerts_enabled(self) -> bool:
        """Vérifie si le webhook d'alerte est configuré."""
        return bool(self.alert_webhook_url)

    def enabled_providers(self) -> list[ProviderSettings]:
        """Stations actives."""
        return [provider for provider in self.providers if provider.enabled]

    def get_provider(self, name: str) -> Optional[ProviderSettings]:
        """Retourne la station de ce nom, ou None."""
        return next((p for p in self.providers if p.name == name), None)

    def aggregation_config(self) -> AggregationConfig:
        """Construit la configuration explicite passée aux services."""
        return AggregationConfig(
            categories=dict(self.categories),
            provider_priorities={p.name: p.priority for p in self.providers},
        )
