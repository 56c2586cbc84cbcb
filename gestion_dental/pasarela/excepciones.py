"""
Errores de la pasarela de persistencia.

`reintentable` indica si el llamador puede repetir la operación tal cual.
La pasarela no reintenta por su cuenta.
"""


class ErrorPasarela(Exception):
    reintentable = False

    def __init__(self, mensaje, errores=None):
        super().__init__(mensaje)
        self.mensaje = mensaje
        self.errores = errores or {}


class ErrorTransitorioIO(ErrorPasarela):
    """Fallo de red o de base de datos que puede resolverse reintentando"""
    reintentable = True


class ErrorValidacionRegistro(ErrorPasarela):
    """El registro, el filtro o los parámetros enviados son inválidos"""


class RegistroNoEncontrado(ErrorPasarela):
    pass


class ColeccionDesconocida(ErrorValidacionRegistro):
    pass
