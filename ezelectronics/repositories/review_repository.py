# ==============================================================================
# REPOSITORIO DE RESEÑAS
# ==============================================================================
# Encapsula todo el acceso a reviews.json
# Las reseñas se almacenan como lista: [{reseña1}, {reseña2}, ...]
# Restricción: una reseña por (model, user).
# ==============================================================================

import os
from typing import Any, Dict, List

from ezelectronics.repositories.base import ListRepository


class ReviewRepository(ListRepository):
    """
    Repositorio para reseñas de productos.

    Formato de datos en reviews.json:
    [
        {
            "model": "X1",
            "user": "alice",
            "score": 5,
            "date": "2024-06-01",
            "comment": "Muy bueno"
        }
    ]
    """

    def __init__(self, base_path: str):
        """
        Args:
            base_path: Carpeta donde vive reviews.json
        """
        super().__init__(os.path.join(base_path, 'reviews.json'))

    def load(self) -> List[Dict[str, Any]]:
        return self.get_all()

    def get_product_reviews(self, model: str) -> List[Dict[str, Any]]:
        """Reseñas de un modelo, en orden de creación."""
        return self.find_all_by('model', model)

    def review_exists(self, model: str, user: str) -> bool:
        return any(r.get('user') == user for r in self.get_product_reviews(model))

    def add_review(self, model: str, user: str, data: Dict[str, Any]) -> bool:
        """
        Agrega una reseña.

        Returns:
            True si se agregó, False si el usuario ya tenía reseña del modelo
        """
        record = dict(data, model=model, user=user)
        with self._file_lock:
            reviews = self.get_all()
            if any(r.get('model') == model and r.get('user') == user for r in reviews):
                return False
            reviews.append(record)
            self.save_all(reviews)
            return True

    def delete_review(self, model: str, user: str) -> bool:
        """
        Elimina la reseña de un usuario sobre un modelo.

        Returns:
            True si se eliminó, False si no existía
        """
        with self._file_lock:
            reviews = self.get_all()
            remaining = [
                r for r in reviews
                if not (r.get('model') == model and r.get('user') == user)
            ]
            if len(remaining) == len(reviews):
                return False
            self.save_all(remaining)
            return True

    def delete_reviews_of_product(self, model: str) -> int:
        """
        Elimina todas las reseñas de un modelo.

        Returns:
            Cantidad de reseñas eliminadas
        """
        with self._file_lock:
            reviews = self.get_all()
            remaining = [r for r in reviews if r.get('model') != model]
            self.save_all(remaining)
            return len(reviews) - len(remaining)

    def delete_all(self) -> bool:
        self.clear()
        return True
