"""
Request descriptor: a snapshot of the client's defaults plus per-call overrides.
"""

import time
from typing import Optional, TYPE_CHECKING

from .assembler import BodySupplier, WireRequest
from .executor import Executor
from .params import ParameterStore

if TYPE_CHECKING:
    from .http_client import Client
    from .response import Response


class Request(ParameterStore):
    """
    Запрос, созданный через ``client.r()``.

    Получает глубокую копию параметров клиента: изменения запроса не
    затрагивают клиента, и наоборот. Один Request используется одним
    потоком.

    Attributes:
        client: Клиент-владелец (base_url, логгер, транспорт, retry)
        path: Путь, подставляется в execute()
        get_body: Supplier тела; если задан, перекрывает body и form
        context: Контекст отмены (объект с ``is_set()``)
        wire: Собранный WireRequest после execute()
        started_at: Момент создания (time.time())

    Example:
        >>> response = (
        ...     client.r()
        ...     .set_method("POST")
        ...     .set_query_param("page", "2")
        ...     .set_body_json({"name": "alice"})
        ...     .execute("/users")
        ... )
    """

    def __init__(self, client: 'Client', **params):
        self.client = client
        self._init_params(**params)
        self.path = ""
        self.get_body: Optional[BodySupplier] = None
        self.context = None
        self.wire: Optional[WireRequest] = None
        self.started_at = time.time()

    def _owner(self) -> 'Client':
        return self.client

    def set_context(self, context):
        """
        Устанавливает контекст отмены.

        Подходит любой объект с методом ``is_set()``, например
        threading.Event.
        """
        self.context = context
        return self

    def set_body_supplier(self, supplier: BodySupplier):
        """Тело из supplier'а; вызывается заново перед каждой попыткой."""
        self.get_body = supplier
        return self

    def execute(self, path: str = "") -> 'Response':
        """
        Выполнить запрос.

        Args:
            path: Путь относительно base_url или абсолютный URL

        Raises:
            ConfigurationError: Запрос не собирается (URL, метод)
            TooManyRetriesError: Все попытки упали на транспорте
        """
        self.path = path
        return Executor(self.client).execute(self)

    def __repr__(self) -> str:
        return f"<Request [{self.method} {self.path}]>"
