from dependency_injector import containers, providers
from app.core.settings import settings as app_settings
from app.storage.database import Database
from app.v1_0.v1_containers import APIContainer

class ApplicationContainer(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
                "app.v1_0.routers.customer_router",
                "app.v1_0.routers.health_router",
            ]
    )
    settings = providers.Object(app_settings)
    database = providers.Singleton(Database.from_settings, settings)

    api_container = providers.Container(
        APIContainer,
        settings = settings,
        database = database,
    )
