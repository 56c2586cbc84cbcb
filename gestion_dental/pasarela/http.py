"""
Pasarela HTTP: cliente de la API de colecciones de otra instancia del sistema.
"""
import logging
from typing import Dict, Optional, Tuple

import requests
from django.conf import settings

from .base import PasarelaColecciones
from .excepciones import ErrorPasarela, ErrorTransitorioIO, ErrorValidacionRegistro, RegistroNoEncontrado
from .filtros import parsear_expansion

logger = logging.getLogger(__name__)

ESTADOS_TRANSITORIOS = {408, 429, 500, 502, 503, 504}
ESTADOS_VALIDACION = {400, 405, 409, 422}


def _get_api_config() -> Tuple[str, Dict[str, str], int]:
    """
    Obtiene la configuración de la API remota.

    Returns:
        tuple: (api_url, headers, timeout)
    """
    api_url = getattr(settings, 'PASARELA_API_URL', 'http://localhost:8001/api')
    api_token = getattr(settings, 'PASARELA_API_TOKEN', '')
    timeout = getattr(settings, 'PASARELA_TIMEOUT', 10)

    headers = {
        'Content-Type': 'application/json',
    }

    if api_token:
        headers['Authorization'] = f'Token {api_token}'

    return api_url.rstrip('/'), headers, timeout


def _mensaje_error(response_data: Dict, status_code: int) -> str:
    if isinstance(response_data, dict):
        return (
            response_data.get('detail')
            or response_data.get('message')
            or response_data.get('error')
            or f"Error {status_code}"
        )
    return f"Error {status_code}"


class PasarelaHTTP(PasarelaColecciones):

    def __init__(self, api_url: Optional[str] = None, token: Optional[str] = None, timeout: Optional[int] = None):
        base_url, headers, default_timeout = _get_api_config()
        self.api_url = (api_url or base_url).rstrip('/')
        self.headers = headers
        if token:
            self.headers['Authorization'] = f'Token {token}'
        self.timeout = timeout or default_timeout

    def _url(self, coleccion: str, id=None) -> str:
        url = f"{self.api_url}/colecciones/{coleccion}/registros/"
        if id is not None:
            url += f"{id}/"
        return url

    def _make_request(self, method: str, url: str, data: Optional[Dict] = None, params: Optional[Dict] = None):
        """
        Realiza una petición HTTP y clasifica los errores.

        Returns:
            dict o list: Cuerpo JSON de la respuesta (None para 204)

        Raises:
            ErrorTransitorioIO: Timeout, error de conexión, 5xx o 429
            ErrorValidacionRegistro: 400/422 y similares
            RegistroNoEncontrado: 404
        """
        try:
            logger.info(f"Realizando petición {method} a {url}")
            if data:
                logger.debug(f"Datos: {data}")
            if params:
                logger.debug(f"Parámetros: {params}")

            response = requests.request(
                method=method,
                url=url,
                json=data,
                params=params,
                headers=self.headers,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout as e:
            error_msg = "Timeout al conectar con la pasarela de persistencia"
            logger.error(error_msg)
            raise ErrorTransitorioIO(error_msg) from e
        except requests.exceptions.ConnectionError as e:
            error_msg = "No se pudo conectar con la pasarela de persistencia. Verifica que esté ejecutándose."
            logger.error(error_msg)
            raise ErrorTransitorioIO(error_msg) from e
        except requests.exceptions.RequestException as e:
            error_msg = f"Error de conexión: {str(e)}"
            logger.error(error_msg)
            raise ErrorTransitorioIO(error_msg) from e

        logger.info(f"Respuesta: {response.status_code}")

        if response.status_code == 204:
            return None

        # Intentar parsear JSON
        try:
            response_data = response.json()
        except ValueError:
            response_data = {"detail": response.text}

        if response.status_code in (200, 201):
            return response_data

        error_msg = _mensaje_error(response_data, response.status_code)
        errores = response_data.get('errores', {}) if isinstance(response_data, dict) else {}
        logger.warning(f"Error en API ({response.status_code}): {error_msg}")

        if response.status_code == 404:
            raise RegistroNoEncontrado(error_msg)
        if response.status_code in ESTADOS_TRANSITORIOS or response.status_code >= 500:
            raise ErrorTransitorioIO(error_msg)
        if response.status_code in ESTADOS_VALIDACION:
            raise ErrorValidacionRegistro(error_msg, errores=errores)
        raise ErrorPasarela(error_msg, errores=errores)

    def listar(self, coleccion, filtro=None, orden=None, expandir=None):
        params = {}
        if filtro:
            params['filter'] = filtro
        if orden:
            params['sort'] = orden
        campos = parsear_expansion(expandir)
        if campos:
            params['expand'] = ','.join(campos)
        respuesta = self._make_request('GET', self._url(coleccion), params=params or None)
        return respuesta.get('items', []) if isinstance(respuesta, dict) else []

    def obtener(self, coleccion, id, expandir=None):
        campos = parsear_expansion(expandir)
        params = {'expand': ','.join(campos)} if campos else None
        return self._make_request('GET', self._url(coleccion, id), params=params)

    def crear(self, coleccion, campos):
        return self._make_request('POST', self._url(coleccion), data=campos)

    def actualizar(self, coleccion, id, campos):
        return self._make_request('PATCH', self._url(coleccion, id), data=campos)

    def eliminar(self, coleccion, id):
        self._make_request('DELETE', self._url(coleccion, id))
        return True
