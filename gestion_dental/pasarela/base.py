"""
Contrato de la pasarela de persistencia (colecciones con CRUD y consultas).
"""
from django.conf import settings


class PasarelaColecciones:
    """
    Interfaz común de los backends de persistencia.

    Los registros se intercambian como dicts. Los errores se informan con las
    excepciones de `pasarela.excepciones`.
    """

    def listar(self, coleccion, filtro=None, orden=None, expandir=None):
        """
        Lista registros de una colección.

        Args:
            coleccion: Nombre de la colección (ej: 'presupuestos')
            filtro: Expresión de filtro (ej: 'paciente = 3 && estado != "rechazado"')
            orden: Campos separados por coma, '-' para descendente
            expandir: Relaciones a incluir en 'expand'

        Returns:
            list: Registros como dicts
        """
        raise NotImplementedError

    def obtener(self, coleccion, id, expandir=None):
        raise NotImplementedError

    def crear(self, coleccion, campos):
        raise NotImplementedError

    def actualizar(self, coleccion, id, campos):
        """Actualización parcial: solo se modifican los campos enviados"""
        raise NotImplementedError

    def eliminar(self, coleccion, id):
        raise NotImplementedError

    def primero(self, coleccion, filtro=None, orden=None):
        """Primer registro que cumple el filtro, o None"""
        registros = self.listar(coleccion, filtro=filtro, orden=orden)
        return registros[0] if registros else None


def obtener_pasarela(backend=None):
    """
    Construye la pasarela configurada en PASARELA_BACKEND ('orm' o 'http').
    """
    backend = backend or getattr(settings, 'PASARELA_BACKEND', 'orm')
    if backend == 'http':
        from .http import PasarelaHTTP
        return PasarelaHTTP()
    if backend == 'orm':
        from .orm import PasarelaDjango
        return PasarelaDjango()
    raise ValueError(f"Backend de pasarela desconocido: {backend!r}")
