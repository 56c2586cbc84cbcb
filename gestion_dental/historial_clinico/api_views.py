from django.core.exceptions import ValidationError
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework import status, permissions

from pasarela.base import obtener_pasarela
from pasarela.respuestas import manejar_errores
from .medicamentos import HistorialMedicamentos
from .odontograma import PLANIFICADO
from .servicios import ServicioOdontograma


def _odontograma_json(seleccion):
    return {
        "datos": seleccion.a_dict(),
        "colores": {str(numero): color for numero, color in seleccion.colores().items()},
        "items_presupuesto": [dict(item, precio=str(item['precio'])) for item in seleccion.items_presupuesto()],
        "total": str(seleccion.total()),
    }


def _tratamiento(pasarela, valor):
    """Un tratamiento puede venir como id del catálogo o como dict"""
    if isinstance(valor, dict):
        return valor
    if valor in (None, ''):
        raise ValidationError("Falta el tratamiento")
    return pasarela.obtener('tratamientos_dentales', valor)


def _aplicar_acciones(seleccion, acciones, pasarela):
    for accion in acciones:
        tipo = accion.get('accion')
        diente = accion.get('diente')
        if tipo == 'seleccionar':
            seleccion.seleccionar(diente)
        elif tipo == 'deseleccionar':
            seleccion.deseleccionar(diente)
        elif tipo == 'asignar':
            seleccion.asignar_tratamiento(
                diente,
                _tratamiento(pasarela, accion.get('tratamiento')),
                fecha=accion.get('fecha'),
                estado=accion.get('estado', PLANIFICADO),
            )
        elif tipo == 'estado':
            seleccion.cambiar_estado(diente, accion.get('estado'))
        elif tipo == 'quitar':
            seleccion.quitar_tratamiento(diente)
        else:
            raise ValidationError(f"Acción desconocida: {tipo!r}")


@api_view(['GET', 'PUT'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_odontograma_paciente(request, paciente_id):
    """
    Obtiene o modifica el odontograma de un paciente.

    PUT espera JSON:
    {
      "acciones": [
        {"accion": "asignar", "diente": 16, "tratamiento": 3},
        {"accion": "estado", "diente": 16, "estado": "completado"},
        {"accion": "deseleccionar", "diente": 21}
      ]
    }
    Acciones: seleccionar, deseleccionar, asignar, estado, quitar.

    Retorna:
    - 200: { "data": { "datos", "colores", "items_presupuesto", "total" } }
    """
    pasarela = obtener_pasarela()
    pasarela.obtener('patients', paciente_id)
    servicio = ServicioOdontograma(pasarela)
    seleccion = servicio.cargar(paciente_id)

    if request.method == 'PUT':
        _aplicar_acciones(seleccion, request.data.get('acciones') or [], pasarela)
        if seleccion.modificado:
            servicio.guardar(paciente_id, seleccion)

    return Response({"success": True, "data": _odontograma_json(seleccion)})


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_presupuesto_desde_odontograma(request, paciente_id):
    """
    Crea un presupuesto pendiente con los tratamientos del odontograma.

    Espera JSON (opcional): { "tipo_plan", "duracion", "tasa_interes", "notas" }

    Retorna:
    - 201: Presupuesto creado
    - 400: No hay tratamientos o el plan es inválido
    """
    pasarela = obtener_pasarela()
    pasarela.obtener('patients', paciente_id)
    servicio = ServicioOdontograma(pasarela)
    data = request.data

    presupuesto = servicio.generar_presupuesto(
        paciente_id,
        servicio.cargar(paciente_id),
        tipo_plan=data.get('tipo_plan', 'contado'),
        duracion=data.get('duracion', 1),
        tasa_interes=data.get('tasa_interes', 0),
        notas=data.get('notas', ''),
    )
    return Response({"success": True, "data": presupuesto}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_crear_consulta(request, paciente_id):
    """
    Registra una consulta, actualiza la última visita del paciente y anota los
    medicamentos indicados en el historial.

    Espera JSON:
    {
      "motivo": "Dolor en molar",
      "diagnostico": "...",
      "plan_tratamiento": "...",
      "medicamentos": [{"nombre": "Ibuprofeno", "dosis": "400 mg", "frecuencia": "8 h", "duracion": "3 días"}],
      "notas": "..."
    }
    """
    pasarela = obtener_pasarela()
    pasarela.obtener('patients', paciente_id)
    campos = dict(request.data)
    campos['paciente'] = paciente_id
    consulta = pasarela.crear('consultas', campos)

    historial = HistorialMedicamentos(pasarela)
    historial.cargar()
    for medicamento in consulta.get('medicamentos') or []:
        historial.registrar(medicamento)

    return Response({"success": True, "data": consulta}, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([permissions.AllowAny])
@manejar_errores
def api_sugerencias_medicamentos(request):
    """
    Parámetros GET:
    - q: Texto a buscar en el nombre (opcional)
    - limite: Máximo de resultados (por defecto 10)
    """
    try:
        limite = int(request.GET.get('limite', 10))
    except ValueError:
        raise ValidationError("El límite debe ser un número entero")
    historial = HistorialMedicamentos(obtener_pasarela())
    return Response({
        "success": True,
        "data": historial.sugerencias(request.GET.get('q', ''), limite=limite),
    })
