from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from pasarela.base import obtener_pasarela
from pasarela.respuestas import manejar_errores
from .derivaciones import calcular_estadisticas, nic_por_sitio
from .dientes import clase_anatomica, validar_numero
from .geometria import geometria_diente
from .mediciones import CARAS, Cartilla
from .servicios import ServicioPeriodontograma


def _servicio(paciente_id):
    """Verifica que el paciente exista y retorna el servicio"""
    pasarela = obtener_pasarela()
    pasarela.obtener('patients', paciente_id)
    return ServicioPeriodontograma(pasarela)


def _aplicar_cambios(cartilla, data):
    for medicion in data.get('mediciones') or []:
        cartilla.establecer(
            medicion.get('diente'),
            medicion.get('cara'),
            medicion.get('punto'),
            medicion.get('tipo'),
            medicion.get('valor'),
        )
    for diente in data.get('dientes') or []:
        numero = diente.get('diente')
        if 'ausente' in diente and bool(diente['ausente']) != cartilla.diente(numero)['ausente']:
            cartilla.alternar_ausente(numero)
        if 'movilidad' in diente:
            cartilla.establecer_movilidad(numero, diente['movilidad'])
        if 'furcacion' in diente:
            cartilla.establecer_furcacion(numero, diente['furcacion'])


@api_view(['GET', 'PUT'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_periodontograma_paciente(request, paciente_id):
    """
    Obtiene o guarda el periodontograma de un paciente.

    PUT espera JSON (todas las claves son opcionales):
    {
      "datos": {...},                      cartilla completa (reemplaza la guardada)
      "mediciones": [
        {"diente": 16, "cara": "vestibular", "punto": "mesial",
         "tipo": "profundidad_sondaje", "valor": 5}
      ],
      "dientes": [{"diente": 18, "ausente": true, "movilidad": 2}],
      "observaciones": "..."
    }

    Los valores fuera de rango se ajustan al límite permitido.

    Retorna:
    - 200: { "data": { "paciente", "datos", "estadisticas" } }
    - 400: Diente, cara, punto o tipo inválido
    - 404: El paciente no existe
    """
    servicio = _servicio(paciente_id)

    if request.method == 'PUT':
        data = request.data
        if 'datos' in data:
            cartilla = Cartilla(data.get('datos') or {})
        else:
            cartilla = servicio.cargar(paciente_id)
        _aplicar_cambios(cartilla, data)
        servicio.guardar(paciente_id, cartilla, observaciones=data.get('observaciones'))
    else:
        cartilla = servicio.cargar(paciente_id)

    return Response({
        "success": True,
        "data": {
            "paciente": paciente_id,
            "datos": cartilla.a_dict(),
            "estadisticas": calcular_estadisticas(cartilla),
        }
    }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_estadisticas_periodontograma(request, paciente_id):
    """
    Retorna:
    - 200: { "porc_sangrado", "porc_placa", "porc_bolsas", "total_sitios" }
    """
    cartilla = _servicio(paciente_id).cargar(paciente_id)
    return Response({"success": True, "data": calcular_estadisticas(cartilla)})


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_geometria_diente(request, paciente_id, numero):
    """
    Coordenadas del gráfico de un diente y su NIC por punto.

    Parámetros GET:
    - cara: vestibular (por defecto) o lingual
    """
    numero = validar_numero(numero)
    cara = request.GET.get('cara', CARAS[0])
    cartilla = _servicio(paciente_id).cargar(paciente_id)
    datos_diente = cartilla.diente(numero)

    geometria = geometria_diente(numero, datos_diente, cara)
    geometria['clase'] = clase_anatomica(numero)
    geometria['nic'] = nic_por_sitio(datos_diente[cara])
    return Response({"success": True, "data": geometria})
