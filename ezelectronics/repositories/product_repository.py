# ==============================================================================
# REPOSITORIO DE PRODUCTOS
# ==============================================================================
# Encapsula todo el acceso a products.json
# El inventario se almacena como diccionario: {model: {datos_producto}}
# ==============================================================================

import os
from typing import Any, Dict, List, Optional

from ezelectronics.repositories.base import DictRepository


class ProductRepository(DictRepository):
    """
    Repositorio para gestión del inventario de productos.

    Formato de datos en products.json:
    {
        "iPhone13": {
            "model": "iPhone13",
            "category": "Smartphone",
            "quantity": 10,
            "details": "",
            "sellingPrice": 999.0,
            "arrivalDate": "2024-01-01",
            "sellingDate": null
        }
    }
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde vive products.json
        """
        super().__init__(os.path.join(base_path, 'products.json'))

    def load(self) -> Dict[str, Dict[str, Any]]:
        """Carga el inventario completo {model: datos}."""
        return self.get_all()

    def get_product(self, model: str) -> Optional[Dict[str, Any]]:
        """
        Obtiene un producto por su modelo.

        Returns:
            Datos del producto o None si no existe
        """
        return self.get_by_id(model)

    def product_exists(self, model: str) -> bool:
        return model in self.load()

    def create_product(self, model: str, data: Dict[str, Any]) -> bool:
        """
        Crea un nuevo producto.

        Returns:
            True si se creó, False si el modelo ya existía
        """
        return self.insert(model, data)

    def adjust_quantities(
        self,
        deltas: Dict[str, int],
        stamp_when_empty: Optional[str] = None
    ) -> Optional[Dict[str, int]]:
        """
        Suma `delta` a la cantidad de cada modelo, todo o nada.

        La lectura, la comprobación y la escritura ocurren bajo el mismo
        lock: dos ventas concurrentes nunca pisan el descuento de la otra.

        Args:
            deltas: {model: delta}; negativo para ventas, positivo para llegadas
            stamp_when_empty: sellingDate a guardar en los modelos que una
                venta deja exactamente en 0

        Returns:
            {model: nueva_cantidad}, o None si algún modelo no existe o
            quedaría con cantidad negativa (en ese caso no se escribe nada)
        """
        with self._file_lock:
            data = self.get_all()
            result = {}
            for model, delta in deltas.items():
                record = data.get(model)
                if record is None:
                    return None
                new_quantity = record.get('quantity', 0) + delta
                if new_quantity < 0:
                    return None
                result[model] = new_quantity

            for model, new_quantity in result.items():
                data[model]['quantity'] = new_quantity
                if new_quantity == 0 and deltas[model] < 0 and stamp_when_empty:
                    data[model]['sellingDate'] = stamp_when_empty
            self._write_raw(data)
            return result

    def delete_product(self, model: str) -> bool:
        """
        Elimina un producto.

        Returns:
            True si se eliminó, False si no existía
        """
        return self.delete(model)

    def delete_all(self) -> bool:
        """Elimina todo el inventario."""
        self.clear()
        return True

    def list_products(
        self,
        category: Optional[str] = None,
        model: Optional[str] = None,
        available_only: bool = False
    ) -> List[Dict[str, Any]]:
        """
        Lista productos con filtros opcionales.

        Args:
            category: Solo productos de esta categoría
            model: Solo el producto con este modelo
            available_only: Solo productos con cantidad > 0

        Returns:
            Lista de productos (cada uno incluye su 'model')
        """
        results = []
        for key, data in self.load().items():
            if model is not None and key != model:
                continue
            if category is not None and data.get('category') != category:
                continue
            if available_only and data.get('quantity', 0) <= 0:
                continue
            product = dict(data)
            product['model'] = key
            results.append(product)
        return results
