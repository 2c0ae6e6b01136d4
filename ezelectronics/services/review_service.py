# ==============================================================================
# SERVICIO DE RESEÑAS
# ==============================================================================
# Un cliente puede dejar una sola reseña (puntuación 1-5 y comentario) por
# modelo. Cualquier usuario autenticado las lee; Admin y Manager pueden
# borrar las de un modelo o todas.
# ==============================================================================

from datetime import date
from typing import Callable, List

from ezelectronics.errors import (
    ExistingReviewError,
    InvalidScoreError,
    NoReviewProductError,
    ProductNotFoundError,
)
from ezelectronics.models import ProductReview, User
from ezelectronics.repositories.interfaces import IProductRepository, IReviewRepository
from ezelectronics.services.audit_service import AuditService
from ezelectronics.services.authorization import Operation, check_permission

MIN_SCORE = 1
MAX_SCORE = 5


def validate_score(score: int) -> int:
    """
    Raises:
        InvalidScoreError: Si no es un entero entre MIN_SCORE y MAX_SCORE
    """
    if isinstance(score, bool) or not isinstance(score, int) or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidScoreError(
            f'La puntuación debe ser un entero entre {MIN_SCORE} y {MAX_SCORE} (recibido: {score!r})'
        )
    return score


class ReviewService:
    """Servicio para reseñas de productos."""

    def __init__(
        self,
        review_repo: IReviewRepository,
        product_repo: IProductRepository,
        audit_service: AuditService = None,
        clock: Callable[[], date] = date.today
    ):
        self.review_repo = review_repo
        self.product_repo = product_repo
        self.audit_service = audit_service
        self.clock = clock

    def _require_product(self, model: str) -> None:
        if not self.product_repo.product_exists(model):
            raise ProductNotFoundError(f'El producto "{model}" no existe')

    def add_review(self, actor: User, model: str, score: int, comment: str) -> ProductReview:
        """
        Agrega la reseña del cliente sobre `model`, con fecha de hoy.

        Returns:
            La reseña creada

        Raises:
            UnauthorizedUserError: Si el actor no es Customer
            InvalidScoreError: Si la puntuación no está entre 1 y 5
            ProductNotFoundError: Si el modelo no existe
            ExistingReviewError: Si el cliente ya reseñó el modelo
        """
        check_permission(actor, Operation.WRITE_REVIEW)
        validate_score(score)
        self._require_product(model)
        if self.review_repo.review_exists(model, actor.username):
            raise ExistingReviewError(f'Ya existe una reseña de "{actor.username}" para "{model}"')

        review = ProductReview(model, actor.username, score, self.clock(), comment)
        if not self.review_repo.add_review(model, actor.username, review.to_dict()):
            raise ExistingReviewError(f'Ya existe una reseña de "{actor.username}" para "{model}"')

        if self.audit_service:
            self.audit_service.log_review_added(actor.username, model, score)
        return review

    def get_product_reviews(self, actor: User, model: str) -> List[ProductReview]:
        """
        Reseñas de un modelo.

        Raises:
            ProductNotFoundError: Si el modelo no existe
        """
        check_permission(actor, Operation.VIEW_REVIEWS)
        self._require_product(model)
        return [ProductReview.from_dict(r) for r in self.review_repo.get_product_reviews(model)]

    def delete_review(self, actor: User, model: str) -> bool:
        """
        Elimina la reseña propia sobre `model`.

        Raises:
            ProductNotFoundError: Si el modelo no existe
            NoReviewProductError: Si el cliente no tenía reseña del modelo
        """
        check_permission(actor, Operation.WRITE_REVIEW)
        self._require_product(model)
        if not self.review_repo.delete_review(model, actor.username):
            raise NoReviewProductError(f'"{actor.username}" no tiene reseña para "{model}"')

        if self.audit_service:
            self.audit_service.log_review_deleted(actor.username, model)
        return True

    def delete_reviews_of_product(self, actor: User, model: str) -> bool:
        """Elimina todas las reseñas de un modelo (Admin o Manager)."""
        check_permission(actor, Operation.MANAGE_REVIEWS)
        self._require_product(model)
        removed = self.review_repo.delete_reviews_of_product(model)

        if self.audit_service:
            self.audit_service.log_review_deleted(actor.username, model, removed)
        return True

    def delete_all_reviews(self, actor: User) -> bool:
        """Elimina todas las reseñas de todos los modelos (Admin o Manager)."""
        check_permission(actor, Operation.MANAGE_REVIEWS)
        result = self.review_repo.delete_all()
        if self.audit_service:
            self.audit_service.log_reviews_cleared(actor.username)
        return result
