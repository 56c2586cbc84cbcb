"""
Pasarela sobre el ORM de Django.
"""
import logging
from contextlib import contextmanager

from django.core.exceptions import FieldError, ObjectDoesNotExist, ValidationError
from django.db import IntegrityError, InterfaceError, OperationalError, transaction
from django.db.models import ProtectedError
from django.forms.models import model_to_dict

from .base import PasarelaColecciones
from .colecciones import coleccion_de_modelo, obtener_serializer
from .excepciones import ErrorTransitorioIO, ErrorValidacionRegistro, RegistroNoEncontrado
from .filtros import filtro_a_q, parsear_expansion, parsear_orden

logger = logging.getLogger(__name__)


@contextmanager
def _errores_bd(coleccion):
    """Clasifica los errores de la base de datos y de la consulta"""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Error de base de datos en la colección '{coleccion}': {e}")
        raise ErrorTransitorioIO(f"La base de datos no está disponible: {e}") from e
    except (FieldError, IntegrityError, ValueError, TypeError, ValidationError) as e:
        logger.warning(f"Consulta inválida en la colección '{coleccion}': {e}")
        raise ErrorValidacionRegistro(f"Consulta inválida: {e}") from e


class PasarelaDjango(PasarelaColecciones):

    def _serializar(self, instancia, serializer_class, expandir=None):
        registro = dict(serializer_class(instancia).data)
        campos = parsear_expansion(expandir)
        if campos:
            registro['expand'] = {campo: self._expandir(instancia, campo) for campo in campos}
        return registro

    def _relaciones(self, instancia):
        """Nombres expandibles: claves foráneas y relaciones inversas del modelo"""
        nombres = set()
        for campo in instancia._meta.get_fields():
            if not campo.is_relation:
                continue
            if campo.auto_created and not campo.concrete:
                nombres.add(campo.get_accessor_name())
            else:
                nombres.add(campo.name)
        return nombres

    def _expandir(self, instancia, campo):
        if campo not in self._relaciones(instancia):
            raise ErrorValidacionRegistro(f"No se puede expandir '{campo}': no es una relación")
        try:
            relacionado = getattr(instancia, campo)
        except ObjectDoesNotExist:
            return None
        if relacionado is None:
            return None
        if hasattr(relacionado, 'all'):
            return [self._serializar_relacionado(obj) for obj in relacionado.all()]
        return self._serializar_relacionado(relacionado)

    def _serializar_relacionado(self, instancia):
        coleccion = coleccion_de_modelo(type(instancia))
        if coleccion:
            return dict(obtener_serializer(coleccion)(instancia).data)
        return model_to_dict(instancia)

    def _instancia(self, coleccion, id):
        modelo = obtener_serializer(coleccion).Meta.model
        try:
            return modelo.objects.get(pk=id)
        except (modelo.DoesNotExist, ValueError, TypeError, ValidationError):
            raise RegistroNoEncontrado(f"No existe el registro {id!r} en '{coleccion}'")

    def listar(self, coleccion, filtro=None, orden=None, expandir=None):
        serializer_class = obtener_serializer(coleccion)
        modelo = serializer_class.Meta.model
        with _errores_bd(coleccion):
            queryset = modelo.objects.filter(filtro_a_q(filtro))
            campos_orden = parsear_orden(orden)
            if campos_orden:
                queryset = queryset.order_by(*campos_orden)
            return [self._serializar(obj, serializer_class, expandir) for obj in queryset]

    def obtener(self, coleccion, id, expandir=None):
        serializer_class = obtener_serializer(coleccion)
        with _errores_bd(coleccion):
            instancia = self._instancia(coleccion, id)
            return self._serializar(instancia, serializer_class, expandir)

    def _guardar(self, coleccion, serializer):
        if not serializer.is_valid():
            errores = {campo: [str(e) for e in lista] for campo, lista in serializer.errors.items()}
            logger.warning(f"Registro inválido para '{coleccion}': {errores}")
            raise ErrorValidacionRegistro("El registro no es válido", errores=errores)
        with _errores_bd(coleccion), transaction.atomic():
            instancia = serializer.save()
        return dict(type(serializer)(instancia).data)

    def crear(self, coleccion, campos):
        serializer_class = obtener_serializer(coleccion)
        registro = self._guardar(coleccion, serializer_class(data=campos))
        logger.info(f"Registro {registro.get('id')} creado en '{coleccion}'")
        return registro

    def actualizar(self, coleccion, id, campos):
        serializer_class = obtener_serializer(coleccion)
        with _errores_bd(coleccion):
            instancia = self._instancia(coleccion, id)
        return self._guardar(coleccion, serializer_class(instancia, data=campos, partial=True))

    def eliminar(self, coleccion, id):
        with _errores_bd(coleccion):
            instancia = self._instancia(coleccion, id)
            try:
                instancia.delete()
            except ProtectedError as e:
                raise ErrorValidacionRegistro(f"El registro {id!r} está en uso y no se puede eliminar") from e
        logger.info(f"Registro {id} eliminado de '{coleccion}'")
        return True
