"""
https://python-dependency-injector.ets-labs.org/index.html
https://python-dependency-injector.ets-labs.org/examples/fastapi-sqlalchemy.html
"""

from dependency_injector import containers, providers

from src.platform.config.core_setting import Settings
from src.platform.consistency.read_after_write_poller import PollProfile
from src.platform.database.orm_db_setting import Database
from src.service.registration.app.service.order_state_reconciler import OrderStateReconciler
from src.service.registration.driven_adapter.message_queue.in_memory_command_bus import (
    InMemoryCommandBus,
)
from src.service.registration.driven_adapter.repo.conference_query_repo_impl import (
    ConferenceQueryRepoImpl,
)
from src.service.registration.driven_adapter.repo.in_memory_conference_query_repo import (
    InMemoryConferenceReadModel,
)
from src.service.registration.driven_adapter.repo.in_memory_order_query_repo import (
    InMemoryOrderReadModel,
)
from src.service.registration.driven_adapter.repo.order_query_repo_impl import OrderQueryRepoImpl


class Container(containers.DeclarativeContainer):
    # Configuration
    config_service = providers.Singleton(Settings)

    # Database (engine is created lazily on first session)
    database = providers.Singleton(Database, url=config_service.provided.DATABASE_URL_ASYNC)

    # Read models: in-memory for local runs, SQL projections otherwise
    in_memory_order_read_model = providers.Singleton(InMemoryOrderReadModel)
    in_memory_conference_read_model = providers.Singleton(InMemoryConferenceReadModel)

    order_query_repo = providers.Selector(
        config_service.provided.READ_MODEL_BACKEND,
        memory=in_memory_order_read_model,
        sql=providers.Singleton(OrderQueryRepoImpl, session_factory=database.provided.session),
    )
    conference_query_repo = providers.Selector(
        config_service.provided.READ_MODEL_BACKEND,
        memory=in_memory_conference_read_model,
        sql=providers.Singleton(
            ConferenceQueryRepoImpl, session_factory=database.provided.session
        ),
    )

    # Command bus
    command_dispatcher = providers.Singleton(
        InMemoryCommandBus,
        retained_envelopes=config_service.provided.COMMAND_BUS_RETAINED_ENVELOPES,
    )

    # Read-after-write polling
    draft_order_poll_profile = providers.Singleton(
        PollProfile,
        name='draft_order',
        max_wait=config_service.provided.DRAFT_ORDER_WAIT_TIMEOUT_SECONDS,
        interval=config_service.provided.DRAFT_ORDER_POLL_INTERVAL_SECONDS,
    )
    priced_order_poll_profile = providers.Singleton(
        PollProfile,
        name='priced_order',
        max_wait=config_service.provided.PRICED_ORDER_WAIT_TIMEOUT_SECONDS,
        interval=config_service.provided.PRICED_ORDER_POLL_INTERVAL_SECONDS,
    )
    order_state_reconciler = providers.Singleton(
        OrderStateReconciler,
        order_query_repo=order_query_repo,
        draft_order_profile=draft_order_poll_profile,
        priced_order_profile=priced_order_poll_profile,
    )

    max_selection_quantity = config_service.provided.MAX_SEAT_SELECTION_QUANTITY


container = Container()


def setup() -> None:
    container.config_service()


def cleanup() -> None:
    container.reset_singletons()
