# ==============================================================================
# REPOSITORIO DE AUDITORÍA
# ==============================================================================
# Encapsula todo el acceso a audit.json
# La auditoría se almacena como lista: [{log1}, {log2}, ...]
# ==============================================================================

import os
from datetime import datetime
from typing import Any, Dict, List, Optional

from ezelectronics.repositories.base import ListRepository


class AuditRepository(ListRepository):
    """
    Repositorio para el log de auditoría.

    Formato de datos en audit.json (más reciente primero):
    [
        {
            "type": "VENTA",
            "user": "manager1",
            "message": "Venta de 4 x X1 - Stock restante: 6",
            "timestamp": "2024-01-05 10:00:00",
            "related_id": "X1",
            "details": {...}
        }
    ]
    """

    # Límite de registros para evitar archivos muy grandes
    MAX_LOGS = 10000

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde vive audit.json
        """
        super().__init__(os.path.join(base_path, 'audit.json'))

    def load(self) -> List[Dict[str, Any]]:
        """
        Carga todos los logs de auditoría.

        Returns:
            Lista de logs (más recientes primero)
        """
        return sorted(
            self.get_all(),
            key=lambda x: x.get('timestamp', ''),
            reverse=True
        )

    def save(self, logs: List[Dict[str, Any]]) -> None:
        """Guarda los logs, conservando solo los últimos MAX_LOGS."""
        self.save_all(logs[:self.MAX_LOGS])

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Registra un nuevo evento de auditoría.

        Args:
            log_type: Tipo de evento (USUARIO, PRODUCTO, STOCK, VENTA, CARRITO, RESEÑA, SISTEMA)
            user: Usuario que realizó la acción
            message: Mensaje descriptivo humanizado
            related_id: ID relacionado (username, modelo)
            details: Detalles adicionales
        """
        log_entry = {
            'type': log_type,
            'user': user or 'sistema',
            'message': message,
            'timestamp': datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
            'related_id': related_id,
            'details': details or {}
        }

        with self._file_lock:
            logs = self.get_all()
            logs.insert(0, log_entry)
            self.save(logs)

    def filter_by_type(self, log_type: str) -> List[Dict[str, Any]]:
        """Obtiene solo los logs de un tipo."""
        return self.find_all_by('type', log_type)
