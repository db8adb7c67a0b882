"""
Container d'injection de dependances via dependency-injector.

Fournit une gestion centralisee des dependances pour la CLI.
Inclut les repositories SQLModel des deux stockages et les services
d'agregation.
"""

from dependency_injector import containers, providers

from .adapters.api.alert_notifier import AlertNotifier
from .adapters.api.link_checker import HttpLinkChecker
from .adapters.api.provider_client import ProviderClient
from .config import Settings
from .infrastructure.persistence.database import (
    get_search_session,
    get_session,
    init_db,
)
from .infrastructure.persistence.repositories import (
    SQLModelRecordRepository,
    SQLModelSearchIndex,
)
from .services.batch_runner import MergeBatchRunner
from .services.duplicate_grouper import DuplicateGrouperService
from .services.health_monitor import HealthMonitor, HealthThresholds
from .services.ingestion import IngestionService
from .services.link_validator import LinkValidator
from .services.merge_resolver import MergeResolver
from .services.search_sync import SearchIndexSynchronizer, SearchService


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Initialise les deux bases une fois
        runner = container.merge_batch_runner()
        summary = runner.run()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)
    aggregation_config = providers.Singleton(
        lambda settings: settings.aggregation_config(), config
    )

    # Database - Resource pour initialisation unique
    database = providers.Resource(init_db)

    # Sessions - nouvelle session a chaque appel, une par stockage
    session = providers.Factory(lambda: next(get_session()))
    search_session = providers.Factory(lambda: next(get_search_session()))

    # Repositories - Factory pour nouvelle instance avec session fraiche
    record_repository = providers.Factory(
        SQLModelRecordRepository,
        session=session,
    )
    search_index = providers.Factory(
        SQLModelSearchIndex,
        session=search_session,
    )

    # Services d'agregation - Factory car dependent de repositories
    search_synchronizer = providers.Factory(
        SearchIndexSynchronizer,
        record_repo=record_repository,
        search_index=search_index,
        batch_size=config.provided.search_rebuild_batch_size,
    )
    search_service = providers.Factory(
        SearchService,
        record_repo=record_repository,
        search_index=search_index,
    )
    duplicate_grouper = providers.Factory(
        DuplicateGrouperService,
        record_repo=record_repository,
    )
    merge_resolver = providers.Factory(
        MergeResolver,
        record_repo=record_repository,
        config=aggregation_config,
    )
    ingestion_service = providers.Factory(
        IngestionService,
        record_repo=record_repository,
        config=aggregation_config,
        synchronizer=search_synchronizer,
    )

    # Lot de fusion
    # Utiliser: container.merge_batch_runner(synchronizer=None) pour ne pas reindexer
    merge_batch_runner = providers.Factory(
        MergeBatchRunner,
        grouper=duplicate_grouper,
        resolver=merge_resolver,
        synchronizer=search_synchronizer,
        window=config.provided.merge_window,
    )

    # Sante
    health_thresholds = providers.Singleton(
        HealthThresholds,
        valid_rate_warning=config.provided.health_valid_rate_warning,
        valid_rate_critical=config.provided.health_valid_rate_critical,
        score_warning=config.provided.health_score_warning,
        score_critical=config.provided.health_score_critical,
    )
    health_monitor = providers.Factory(
        HealthMonitor,
        record_repo=record_repository,
        thresholds=health_thresholds,
        period_hours=config.provided.health_period_hours,
    )
    alert_notifier = providers.Singleton(
        AlertNotifier,
        webhook_url=config.provided.alert_webhook_url,
    )

    # Clients de station
    # Utiliser: container.provider_client(name=..., api_url=..., response_format=...)
    provider_client = providers.Factory(
        ProviderClient,
        request_delay_ms=config.provided.request_delay_ms,
        timeout=config.provided.request_timeout_s,
        max_retries=config.provided.max_retries,
    )

    # Verification des liens de lecture
    link_checker = providers.Factory(
        HttpLinkChecker,
        timeout=config.provided.link_check_timeout_s,
    )
    link_validator = providers.Factory(
        LinkValidator,
        record_repo=record_repository,
        checker=link_checker,
        recheck_days=config.provided.link_recheck_days,
    )
