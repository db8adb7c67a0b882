"""
Surveillance de la sante du stockage principal.

Calcule un instantane de metriques (volumes, qualite, fraicheur,
repartition par fournisseur et par categorie) et le compare a des seuils
pour produire un statut healthy / warning / critical.

Le moniteur ne fait que lire le stockage principal.
"""

from collections import Counter
from dataclasses import asdict, dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from loguru import logger

from src.core.entities.record import CanonicalRecord
from src.core.ports.repositories import IRecordRepository
from src.utils.constants import (
    MAX_QUALITY_SCORE,
    SCORE_EXCELLENT,
    SCORE_FAIR,
    SCORE_GOOD,
)

UNKNOWN_CATEGORY = "inconnue"


class HealthStatus(str, Enum):
    """Statut de sante global."""

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class HealthThresholds:
    """
    Seuils d'alerte.

    Attributs:
        valid_rate_warning: Taux de validite (%) en dessous duquel alerter
        valid_rate_critical: Taux de validite (%) critique
        score_warning: Score moyen en dessous duquel alerter
        score_critical: Score moyen critique
    """

    valid_rate_warning: float = 80.0
    valid_rate_critical: float = 60.0
    score_warning: float = 60.0
    score_critical: float = 40.0


@dataclass
class MetricsSnapshot:
    """
    Instantane des metriques du stockage principal.

    Attributs:
        total: Nombre d'enregistrements
        valid: Enregistrements valides
        invalid: Enregistrements invalides
        average_score: Score qualite moyen (arrondi)
        excellent: Score >= 80
        good: Score 60-79
        fair: Score 40-59
        poor: Score < 40
        new_in_period: Crees pendant la periode
        updated_in_period: Modifies pendant la periode (crees avant)
        new_this_week: Crees pendant les 7 derniers jours
        by_provider: Nombre d'enregistrements par fournisseur
        by_category: Nombre d'enregistrements par categorie
        period_hours: Duree de la periode observee
        generated_at: Date du calcul
    """

    total: int = 0
    valid: int = 0
    invalid: int = 0
    average_score: int = 0
    excellent: int = 0
    good: int = 0
    fair: int = 0
    poor: int = 0
    new_in_period: int = 0
    updated_in_period: int = 0
    new_this_week: int = 0
    by_provider: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)
    period_hours: int = 24
    generated_at: Optional[datetime] = None

    @property
    def valid_rate(self) -> float:
        """Taux de validite en pourcentage (0 si le stockage est vide)."""
        if self.total == 0:
            return 0.0
        return self.valid / self.total * 100

    def percent(self, count: int) -> float:
        """Part d'un compteur dans le total, en pourcentage."""
        if self.total == 0:
            return 0.0
        return count / self.total * 100

    def to_dict(self) -> dict:
        """Representation serialisable en JSON."""
        data = asdict(self)
        data["valid_rate"] = round(self.valid_rate, 1)
        data["generated_at"] = (
            self.generated_at.isoformat() if self.generated_at else None
        )
        return data


@dataclass
class HealthReport:
    """
    Resultat de l'evaluation de sante.

    Attributs:
        status: Statut global
        issues: Problemes detectes (lisibles)
        snapshot: Metriques evaluees
    """

    status: HealthStatus
    issues: list[str]
    snapshot: MetricsSnapshot

    @property
    def is_healthy(self) -> bool:
        return self.status == HealthStatus.HEALTHY

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "issues": list(self.issues),
            "metrics": self.snapshot.to_dict(),
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def build_snapshot(
    records: list[CanonicalRecord],
    now: Optional[datetime] = None,
    period: timedelta = timedelta(hours=24),
) -> MetricsSnapshot:
    """
    Calcule les metriques a partir d'une liste d'enregistrements.

    Args:
        records: Contenu du stockage principal
        now: Instant de reference (defaut: maintenant, UTC naif)
        period: Fenetre des compteurs de fraicheur

    Returns:
        MetricsSnapshot
    """
    now = now or _utcnow()
    period_start = now - period
    week_start = now - timedelta(days=7)

    snapshot = MetricsSnapshot(
        total=len(records),
        period_hours=int(period.total_seconds() // 3600),
        generated_at=now,
    )
    providers: Counter = Counter()
    categories: Counter = Counter()
    score_sum = 0

    for record in records:
        if record.is_valid:
            snapshot.valid += 1
        else:
            snapshot.invalid += 1

        score = record.quality_score
        score_sum += score
        if score >= SCORE_EXCELLENT:
            snapshot.excellent += 1
        elif score >= SCORE_GOOD:
            snapshot.good += 1
        elif score >= SCORE_FAIR:
            snapshot.fair += 1
        else:
            snapshot.poor += 1

        created = record.created_at
        updated = record.updated_at
        if created is not None and created > period_start:
            snapshot.new_in_period += 1
        elif updated is not None and updated > period_start:
            snapshot.updated_in_period += 1
        if created is not None and created > week_start:
            snapshot.new_this_week += 1

        for provider in record.contributing_providers:
            providers[provider] += 1
        categories[record.category or UNKNOWN_CATEGORY] += 1

    if records:
        snapshot.average_score = round(score_sum / len(records))
    snapshot.by_provider = dict(providers.most_common())
    snapshot.by_category = dict(categories.most_common())
    return snapshot


def check_health(
    snapshot: MetricsSnapshot, thresholds: HealthThresholds = HealthThresholds()
) -> HealthReport:
    """
    Evalue un instantane par rapport aux seuils.

    Le statut ne fait que s'aggraver : un critere critique ne peut pas
    etre ramene a warning par un critere suivant.
    """
    issues: list[str] = []
    status = HealthStatus.HEALTHY

    def escalate(level: HealthStatus) -> None:
        nonlocal status
        if level == HealthStatus.CRITICAL or status == HealthStatus.HEALTHY:
            status = level

    if snapshot.total == 0:
        issues.append("Stockage principal vide : aucun enregistrement")
        return HealthReport(HealthStatus.CRITICAL, issues, snapshot)

    valid_rate = snapshot.valid_rate
    if valid_rate < thresholds.valid_rate_warning:
        issues.append(
            f"Taux de validite trop bas : {valid_rate:.1f}% "
            f"(recommande > {thresholds.valid_rate_warning:.0f}%)"
        )
        escalate(HealthStatus.WARNING)
    if valid_rate < thresholds.valid_rate_critical:
        escalate(HealthStatus.CRITICAL)

    if snapshot.average_score < thresholds.score_warning:
        issues.append(
            f"Score qualite moyen trop bas : {snapshot.average_score} "
            f"(recommande > {thresholds.score_warning:.0f})"
        )
        escalate(HealthStatus.WARNING)
    if snapshot.average_score < thresholds.score_critical:
        escalate(HealthStatus.CRITICAL)

    if snapshot.new_in_period == 0:
        issues.append(
            f"Aucun nouvel enregistrement depuis {snapshot.period_hours}h, "
            "la collecte ne tourne peut-etre pas"
        )
        escalate(HealthStatus.WARNING)

    return HealthReport(status, issues, snapshot)


def format_report(snapshot: MetricsSnapshot) -> str:
    """Rapport texte des metriques."""
    lines = [
        "Rapport de sante VodAgg",
        "=======================",
        "",
        "Volumes",
        "-------",
        f"Total : {snapshot.total}",
        f"Valides : {snapshot.valid} ({snapshot.percent(snapshot.valid):.1f}%)",
        f"Invalides : {snapshot.invalid} ({snapshot.percent(snapshot.invalid):.1f}%)",
        "",
        "Qualite",
        "-------",
        f"Score moyen : {snapshot.average_score}/{MAX_QUALITY_SCORE}",
        f"Excellent (80+) : {snapshot.excellent} ({snapshot.percent(snapshot.excellent):.1f}%)",
        f"Bon (60-79) : {snapshot.good} ({snapshot.percent(snapshot.good):.1f}%)",
        f"Moyen (40-59) : {snapshot.fair} ({snapshot.percent(snapshot.fair):.1f}%)",
        f"Faible (<40) : {snapshot.poor} ({snapshot.percent(snapshot.poor):.1f}%)",
        "",
        "Fraicheur",
        "---------",
        f"Nouveaux ({snapshot.period_hours}h) : {snapshot.new_in_period}",
        f"Mis a jour ({snapshot.period_hours}h) : {snapshot.updated_in_period}",
        f"Nouveaux (7j) : {snapshot.new_this_week}",
        "",
        "Fournisseurs",
        "------------",
    ]
    lines.extend(f"{name} : {count}" for name, count in snapshot.by_provider.items())
    lines.extend(["", "Categories", "----------"])
    lines.extend(f"{name} : {count}" for name, count in snapshot.by_category.items())
    if snapshot.generated_at:
        lines.extend(["", f"Genere le : {snapshot.generated_at:%Y-%m-%d %H:%M:%S} UTC"])
    return "\n".join(lines)


class HealthMonitor:
    """
    Moniteur de sante du stockage principal.

    Les erreurs de lecture du stockage sont propagees a l'appelant.
    """

    def __init__(
        self,
        record_repo: IRecordRepository,
        thresholds: HealthThresholds = HealthThresholds(),
        period_hours: int = 24,
    ) -> None:
        """
        Initialise le moniteur.

        Args:
            record_repo: Repository du stockage principal
            thresholds: Seuils d'alerte
            period_hours: Fenetre des compteurs de fraicheur
        """
        self._record_repo = record_repo
        self._thresholds = thresholds
        self._period = timedelta(hours=period_hours)

    def snapshot(self, now: Optional[datetime] = None) -> MetricsSnapshot:
        """Calcule l'instantane des metriques."""
        return build_snapshot(self._record_repo.list_all(), now, self._period)

    def check(self, now: Optional[datetime] = None) -> HealthReport:
        """Calcule les metriques et evalue la sante."""
        report = check_health(self.snapshot(now), self._thresholds)
        logger.info(
            "Bilan de sante",
            status=report.status.value,
            issues=len(report.issues),
            total=report.snapshot.total,
        )
        return report
