# ==============================================================================
# REPOSITORIO BASE - Funcionalidad común para acceso a archivos JSON
# ==============================================================================

import json
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional


class BaseRepository(ABC):
    """
    Clase base abstracta para todos los repositorios.
    Proporciona lectura/escritura de archivos JSON con un lock global
    para serializar el acceso entre hilos del servidor.

    Al migrar a SQL:
    - Esta clase se reemplazará por una conexión a base de datos
    - Los métodos de lectura/escritura se convertirán en queries
    - Los locks se reemplazarán por transacciones y restricciones UNIQUE
    """

    # Lock global para evitar escrituras concurrentes a archivos
    _file_lock = threading.RLock()

    def __init__(self, file_path: str):
        """
        Inicializa el repositorio con la ruta al archivo JSON.

        Args:
            file_path: Ruta absoluta al archivo JSON de datos
        """
        self.file_path = file_path
        self._ensure_file_exists()

    def _ensure_file_exists(self) -> None:
        """Crea el archivo (y su carpeta) con datos vacíos si no existe."""
        folder = os.path.dirname(self.file_path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        if not os.path.exists(self.file_path):
            self._write_raw(self._empty_data())

    @abstractmethod
    def _empty_data(self) -> Any:
        """Retorna la estructura vacía (dict, list) de este repositorio."""
        pass

    def _read_raw(self) -> Any:
        """
        Lee los datos crudos del archivo JSON.

        Un archivo inexistente equivale a datos vacíos. Un archivo corrupto
        NO se oculta: el error sube a la capa de servicios tal cual.

        Raises:
            json.JSONDecodeError: Si el archivo tiene JSON inválido
            OSError: Si hay error de lectura
        """
        with self._file_lock:
            try:
                with open(self.file_path, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except FileNotFoundError:
                return self._empty_data()

    def _write_raw(self, data: Any) -> None:
        """
        Escribe datos al archivo JSON.

        Args:
            data: Datos a serializar y escribir

        Raises:
            OSError: Si hay error de escritura
        """
        with self._file_lock:
            # Escribir a archivo temporal primero para atomicidad
            temp_path = self.file_path + '.tmp'
            try:
                with open(temp_path, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(temp_path, self.file_path)
            except Exception:
                # Limpiar archivo temporal si algo falla
                if os.path.exists(temp_path):
                    os.remove(temp_path)
                raise

    def clear(self) -> None:
        """Elimina todos los registros."""
        self._write_raw(self._empty_data())


class DictRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como diccionario.
    El identificador es la clave del diccionario.

    Ejemplo: products.json -> {"iPhone13": {...}, "XPS15": {...}}
    """

    def _empty_data(self) -> Dict:
        return {}

    def get_all(self) -> Dict[str, Any]:
        """Obtiene todos los registros."""
        data = self._read_raw()
        return data if isinstance(data, dict) else {}

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un registro por su ID.

        Returns:
            Copia de los datos del registro o None si no existe
        """
        record = self.get_all().get(record_id)
        return dict(record) if record is not None else None

    def save_all(self, data: Dict[str, Any]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self._write_raw(data)

    def insert(self, record_id: str, record_data: Dict[str, Any]) -> bool:
        """
        Inserta un registro nuevo.

        La comprobación y la escritura ocurren bajo el mismo lock, así que
        de dos inserciones concurrentes con el mismo ID solo una gana.

        Returns:
            True si se insertó, False si el ID ya existía
        """
        with self._file_lock:
            data = self.get_all()
            if record_id in data:
                return False
            data[record_id] = record_data
            self._write_raw(data)
            return True

    def update(self, record_id: str, updates: Dict[str, Any]) -> bool:
        """
        Mezcla `updates` en un registro existente.

        Returns:
            True si se actualizó, False si no existía
        """
        with self._file_lock:
            data = self.get_all()
            if record_id not in data:
                return False
            data[record_id].update(updates)
            self._write_raw(data)
            return True

    def delete(self, record_id: str) -> bool:
        """
        Elimina un registro.

        Returns:
            True si se eliminó, False si no existía
        """
        with self._file_lock:
            data = self.get_all()
            if data.pop(record_id, None) is None:
                return False
            self._write_raw(data)
            return True


class ListRepository(BaseRepository):
    """
    Repositorio base para datos almacenados como lista.

    Ejemplo: audit.json -> [{...}, {...}]
    """

    def _empty_data(self) -> List:
        return []

    def get_all(self) -> List[Dict[str, Any]]:
        """Obtiene todos los registros."""
        data = self._read_raw()
        return data if isinstance(data, list) else []

    def save_all(self, data: List[Dict[str, Any]]) -> None:
        """Guarda todos los registros (reemplazo completo)."""
        self._write_raw(data)

    def find_all_by(self, field: str, value: Any) -> List[Dict[str, Any]]:
        """Busca todos los registros cuyo `field` coincide con `value`."""
        return [r for r in self.get_all() if r.get(field) == value]
