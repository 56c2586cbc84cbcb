from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from .orm import PasarelaDjango
from .respuestas import manejar_errores


@api_view(['GET', 'POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_registros(request, coleccion):
    """
    Lista o crea registros de una colección.

    Parámetros GET:
    - filter: Expresión de filtro (ej: paciente = 3 && estado != "rechazado")
    - sort: Campos separados por coma, '-' para descendente
    - expand: Relaciones a incluir

    Retorna:
    - 200: { "items": [...] }
    - 201: Registro creado
    - 400: Filtro o registro inválido
    - 503: Base de datos no disponible
    """
    pasarela = PasarelaDjango()

    if request.method == 'POST':
        registro = pasarela.crear(coleccion, request.data)
        return Response(registro, status=status.HTTP_201_CREATED)

    items = pasarela.listar(
        coleccion,
        filtro=request.GET.get('filter'),
        orden=request.GET.get('sort'),
        expandir=request.GET.get('expand'),
    )
    return Response({"items": items})


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_registro(request, coleccion, id):
    """
    Obtiene, actualiza parcialmente o elimina un registro.

    Retorna:
    - 200: Registro
    - 204: Registro eliminado
    - 404: El registro no existe
    """
    pasarela = PasarelaDjango()

    if request.method == 'PATCH':
        return Response(pasarela.actualizar(coleccion, id, request.data))

    if request.method == 'DELETE':
        pasarela.eliminar(coleccion, id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    return Response(pasarela.obtener(coleccion, id, expandir=request.GET.get('expand')))
