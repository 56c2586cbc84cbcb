"""
Traducción de errores de dominio y de la pasarela a respuestas HTTP.
"""
import functools
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError
from rest_framework import status
from rest_framework.response import Response

from .excepciones import ErrorPasarela, ErrorTransitorioIO, ErrorValidacionRegistro, RegistroNoEncontrado

logger = logging.getLogger(__name__)


def _mensajes_validacion(error):
    if hasattr(error, 'message_dict'):
        return error.message_dict
    return {'non_field_errors': list(error.messages)}


def respuesta_error(error):
    """
    Construye la respuesta de error correspondiente a una excepción.

    Returns:
        Response o None si la excepción no es de las conocidas
    """
    if isinstance(error, ValidationError):
        errores = _mensajes_validacion(error)
        detalle = '; '.join(m for mensajes in errores.values() for m in mensajes)
        return Response(
            {"success": False, "detail": detalle, "errores": errores},
            status=status.HTTP_400_BAD_REQUEST
        )
    if isinstance(error, ErrorValidacionRegistro):
        return Response(
            {"success": False, "detail": error.mensaje, "errores": error.errores},
            status=status.HTTP_400_BAD_REQUEST
        )
    if isinstance(error, (RegistroNoEncontrado, ObjectDoesNotExist)):
        return Response(
            {"success": False, "detail": str(error) or "No encontrado"},
            status=status.HTTP_404_NOT_FOUND
        )
    if isinstance(error, ErrorTransitorioIO):
        return Response(
            {"success": False, "detail": error.mensaje, "reintentable": True},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    if isinstance(error, ErrorPasarela):
        return Response(
            {"success": False, "detail": error.mensaje},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
    return None


def manejar_errores(vista):
    """Decorador para vistas de API: convierte las excepciones conocidas en respuestas"""
    @functools.wraps(vista)
    def envoltorio(request, *args, **kwargs):
        try:
            return vista(request, *args, **kwargs)
        except (ValidationError, ObjectDoesNotExist, ErrorPasarela) as e:
            logger.warning(f"Error en {vista.__name__}: {e}")
            return respuesta_error(e)
    return envoltorio
