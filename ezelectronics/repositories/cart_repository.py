# ==============================================================================
# REPOSITORIO DE CARRITOS
# ==============================================================================
# Encapsula todo el acceso a carts.json
# Los carritos se almacenan como lista: [{carrito1}, {carrito2}, ...]
# Cada cliente tiene como máximo un carrito con paid=false (el actual).
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from ezelectronics.repositories.base import ListRepository


class CartRepository(ListRepository):
    """
    Repositorio para carritos actuales y pagados.

    Formato de datos en carts.json:
    [
        {
            "customer": "alice",
            "paid": false,
            "paymentDate": null,
            "total": 998.0,
            "products": [
                {"model": "X1", "quantity": 2, "category": "Smartphone", "price": 499.0}
            ]
        }
    ]
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde vive carts.json
        """
        super().__init__(os.path.join(base_path, 'carts.json'))

    def load(self) -> List[Dict[str, Any]]:
        """Carga todos los carritos (actuales y pagados)."""
        return self.get_all()

    @staticmethod
    def _current_index(carts: List[Dict[str, Any]], username: str) -> Optional[int]:
        for i, cart in enumerate(carts):
            if cart.get('customer') == username and not cart.get('paid'):
                return i
        return None

    def get_current_cart(self, username: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene el carrito sin pagar de un cliente.

        Returns:
            Datos del carrito o None si el cliente no tiene carrito actual
        """
        carts = self.get_all()
        index = self._current_index(carts, username)
        return dict(carts[index]) if index is not None else None

    def save_current_cart(self, username: str, cart_data: Dict[str, Any]) -> None:
        """Reemplaza (o crea) el carrito sin pagar del cliente."""
        record = dict(cart_data, customer=username, paid=False, paymentDate=None)
        with self._file_lock:
            carts = self.get_all()
            index = self._current_index(carts, username)
            if index is None:
                carts.append(record)
            else:
                carts[index] = record
            self.save_all(carts)

    def mark_paid(self, username: str, cart_data: Dict[str, Any]) -> bool:
        """
        Guarda el carrito actual del cliente como pagado.

        Args:
            cart_data: Snapshot del carrito ya validado (con paymentDate)

        Returns:
            True si se guardó, False si el cliente ya no tenía carrito actual
        """
        with self._file_lock:
            carts = self.get_all()
            index = self._current_index(carts, username)
            if index is None:
                return False
            carts[index] = dict(cart_data, customer=username, paid=True)
            self.save_all(carts)
            return True

    def get_paid_carts(self, username: str) -> List[Dict[str, Any]]:
        """Historial de carritos pagados de un cliente (en orden de pago)."""
        return [c for c in self.find_all_by('customer', username) if c.get('paid')]

    def delete_all(self) -> bool:
        """Elimina todos los carritos de todos los clientes."""
        self.clear()
        return True
