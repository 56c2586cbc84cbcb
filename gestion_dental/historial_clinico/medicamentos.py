"""
Historial de medicamentos indicados, usado para autocompletar recetas.

Se guarda como un parámetro de configuración (colección 'config'). Se carga
una vez al inicio y cada registro nuevo se escribe de inmediato.
"""
import logging

from django.conf import settings

from pasarela.base import obtener_pasarela

logger = logging.getLogger(__name__)

CLAVE_HISTORIAL = 'historial_medicamentos'
CAMPOS_MEDICAMENTO = ('nombre', 'dosis', 'frecuencia', 'duracion')


def normalizar_medicamento(medicamento):
    """Acepta un nombre o un dict; retorna el dict con los cuatro campos o None sin nombre"""
    if isinstance(medicamento, str):
        medicamento = {'nombre': medicamento}
    nombre = str(medicamento.get('nombre') or '').strip()
    if not nombre:
        return None
    normalizado = {campo: str(medicamento.get(campo) or '').strip() for campo in CAMPOS_MEDICAMENTO}
    normalizado['nombre'] = nombre
    return normalizado


class HistorialMedicamentos:
    """
    Lista de medicamentos usados, el más reciente primero, sin nombres
    repetidos (sin distinguir mayúsculas) y con un máximo de
    HISTORIAL_MEDICAMENTOS_LIMITE entradas.
    """

    def __init__(self, pasarela=None, limite=None):
        self.pasarela = pasarela or obtener_pasarela()
        self.limite = limite or getattr(settings, 'HISTORIAL_MEDICAMENTOS_LIMITE', 50)
        self.medicamentos = []
        self._registro_id = None
        self._cargado = False

    def cargar(self):
        registro = self.pasarela.primero('config', filtro=f'clave = "{CLAVE_HISTORIAL}"')
        self.medicamentos = []
        self._registro_id = None
        if registro:
            self._registro_id = registro['id']
            valor = registro.get('valor')
            if isinstance(valor, list):
                for medicamento in valor:
                    if isinstance(medicamento, (dict, str)):
                        normalizado = normalizar_medicamento(medicamento)
                        if normalizado:
                            self.medicamentos.append(normalizado)
            else:
                logger.warning("Historial de medicamentos con formato inesperado; se reinicia")
        self._cargado = True
        return list(self.medicamentos)

    def buscar(self, nombre):
        nombre = (nombre or '').strip().lower()
        for medicamento in self.medicamentos:
            if medicamento['nombre'].lower() == nombre:
                return medicamento
        return None

    def registrar(self, medicamento):
        """
        Agrega un medicamento al inicio del historial si su nombre no existe.

        Returns:
            bool: True si el historial cambió (y se guardó)
        """
        if not self._cargado:
            self.cargar()

        normalizado = normalizar_medicamento(medicamento)
        if normalizado is None or self.buscar(normalizado['nombre']):
            return False

        self.medicamentos = [normalizado] + self.medicamentos[:self.limite - 1]
        self._guardar()
        return True

    def _guardar(self):
        if self._registro_id:
            self.pasarela.actualizar('config', self._registro_id, {'valor': self.medicamentos})
        else:
            registro = self.pasarela.crear('config', {
                'clave': CLAVE_HISTORIAL,
                'valor': self.medicamentos,
                'descripcion': 'Medicamentos indicados recientemente (autocompletado de recetas)',
            })
            self._registro_id = registro['id']
        logger.info(f"Historial de medicamentos guardado ({len(self.medicamentos)} entradas)")

    def sugerencias(self, texto='', limite=None):
        """Medicamentos cuyo nombre contiene `texto`, en orden de uso reciente"""
        if not self._cargado:
            self.cargar()
        texto = (texto or '').strip().lower()
        resultado = [m for m in self.medicamentos if texto in m['nombre'].lower()]
        return resultado[:limite] if limite else resultado
