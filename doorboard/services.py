"""
Wiring: build one set of API clients for a dashboard session.
"""
from dataclasses import dataclass

from .auth import AuthSession
from .board import BoardViewModel
from .client import ApiClient, CustomersApi, OrdersApi
from .config import Config


@dataclass
class Services:
    client: ApiClient
    auth: AuthSession
    orders: OrdersApi
    customers: CustomersApi
    config: Config

    def board(self, **kwargs) -> BoardViewModel:
        """A fresh board view model using the configured page size."""
        kwargs.setdefault("page_size", self.config.board_page_size)
        return BoardViewModel(self.orders, **kwargs)


def connect(config: Config) -> Services:
    """Create the client stack; the AuthSession starts signed out."""
    client = ApiClient(config.api_url, timeout=config.request_timeout)
    auth = AuthSession.start(client)
    return Services(
        client=client,
        auth=auth,
        orders=OrdersApi(client),
        customers=CustomersApi(client),
        config=config,
    )
