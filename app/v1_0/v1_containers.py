from dependency_injector import containers, providers
from app.core.settings import Settings
from app.storage.database import Database
from app.v1_0.repositories import CustomerRepository
from app.v1_0.services import CustomerService, HealthService

class APIContainer(containers.DeclarativeContainer):
    settings = providers.Dependency(instance_of=Settings)
    database = providers.Dependency(instance_of=Database)

    customer_repository = providers.Singleton(CustomerRepository)

    customer_service = providers.Singleton(
        CustomerService,
        customer_repository = customer_repository,
        default_h1b_status = settings.provided.DEFAULT_H1B_STATUS,
        page_size = settings.provided.PAGE_SIZE,
    )
    health_service = providers.Factory(
        HealthService,
        database = database,
    )
