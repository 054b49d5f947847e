# Local application imports
from .base_container import BaseContainer
from .providers import (
    DatabaseProvider,
    LocationProvider,
    PushProvider,
    RepositoryProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.
    
    Registration order is important:
    1. Database connections (DatabaseProvider)
    2. Repositories (RepositoryProvider) - depends on database
    3. Push transport (PushProvider)
    4. Location services (LocationProvider) - depend on repositories and push
    """
    
    def __init__(self) -> None:
        super().__init__()
        self.setup()
    
    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: database → repositories → push → location services
        """
        DatabaseProvider.register(self)
        RepositoryProvider.register(self)
        PushProvider.register(self)
        LocationProvider.register(self)


# Global container instance (singleton pattern)
_container: DIContainer | None = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)
    
    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the global container; the next get_container() rebuilds it"""
    global _container
    _container = None
