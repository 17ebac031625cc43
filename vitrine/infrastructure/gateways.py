import logging
from typing import Any, Callable, Mapping, Optional, Tuple

import requests
from django.conf import settings

from vitrine.core.entities import Principal
from vitrine.core.exceptions import ParseError, RequestError
from vitrine.core.ports import IAuthGateway, IRequestClient
from vitrine.infrastructure.mappers import PrincipalMapper

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'http://localhost:5001/api'
DEFAULT_ERROR_MESSAGE = 'Something went wrong'


# ====================================================================
# GATEWAYS: Implementações concretas que se comunicam com o backend REST.
# ====================================================================

class StorefrontApiClient(IRequestClient):
    """
    Cliente HTTP do backend da loja.
    Anexa o token Bearer da sessão em toda chamada e converte falhas em RequestError,
    usando o campo `message` do corpo JSON quando o servidor manda um.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        http: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or getattr(settings, 'VITRINE_API_URL', DEFAULT_API_URL)).rstrip('/')
        self.token_provider = token_provider or (lambda: None)
        self.http = http or requests.Session()

    def _headers(self) -> dict:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        token = self.token_provider()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return DEFAULT_ERROR_MESSAGE
        if isinstance(data, dict) and data.get('message'):
            return str(data['message'])
        return DEFAULT_ERROR_MESSAGE

    def _request(self, method: str, endpoint: str, params=None, body=None) -> Any:
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s params=%s", method, url, params)

        try:
            response = self.http.request(method, url, params=params, json=body, headers=self._headers())
        except requests.exceptions.RequestException as e:
            logger.error("Falha de conexão em %s %s: %s", method, url, e)
            raise RequestError(f"Erro de conexão com o servidor: {e}")

        if not response.ok:
            message = self._error_message(response)
            logger.warning("%s %s respondeu %s: %s", method, url, response.status_code, message)
            raise RequestError(message, status_code=response.status_code)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            raise ParseError(f"Resposta de {endpoint} não é JSON válido.")

    def get(self, endpoint: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("GET", endpoint, params=params)

    def post(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("POST", endpoint, body=body if body is not None else {})

    def put(self, endpoint: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        return self._request("PUT", endpoint, body=body if body is not None else {})

    def delete(self, endpoint: str) -> Any:
        return self._request("DELETE", endpoint)


class HttpAuthGateway(IAuthGateway):
    """Login e cadastro no backend; devolve o token e o principal."""

    def __init__(self, client: IRequestClient):
        self.client = client

    def _session_from(self, data) -> Tuple[str, Principal]:
        if not isinstance(data, dict) or not data.get('token'):
            raise ParseError("Resposta de autenticação sem token.")
        return data['token'], PrincipalMapper.to_entity(data.get('user'))

    def login(self, email: str, password: str) -> Tuple[str, Principal]:
        data = self.client.post('/auth/login', {'email': email, 'password': password})
        return self._session_from(data)

    def register(self, name: str, email: str, password: str) -> Tuple[str, Principal]:
        data = self.client.post('/auth/register', {'name': name, 'email': email, 'password': password})
        return self._session_from(data)
