# ==============================================================================
# SERVICIO DE AUDITORÍA
# ==============================================================================
# Centraliza el registro de auditoría.
# Formatea mensajes humanizados y categoriza eventos.
# ==============================================================================

from typing import Any, Dict, List, Optional

from ezelectronics.models import AuditType
from ezelectronics.repositories.interfaces import IAuditRepository


class AuditService:
    """
    Servicio para registro y consulta de auditoría.

    Centraliza:
    - Registro de eventos con mensajes humanizados
    - Categorización (USUARIO, PRODUCTO, STOCK, VENTA, CARRITO, RESEÑA, SISTEMA)
    - Consulta de logs filtrados

    Solo se registran operaciones que llegaron a persistirse.
    """

    def __init__(self, audit_repo: IAuditRepository):
        """
        Args:
            audit_repo: Repositorio de auditoría
        """
        self.audit_repo = audit_repo

    # =========================================================================
    # REGISTRO DE EVENTOS
    # =========================================================================

    def log(
        self,
        log_type: str,
        user: str,
        message: str,
        related_id: str = '',
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Registra un evento de auditoría genérico."""
        value = log_type.value if isinstance(log_type, AuditType) else log_type
        self.audit_repo.log(value, user, message, related_id, details)

    # --- Usuarios -------------------------------------------------------------

    def log_user_login(self, username: str) -> None:
        self.log(AuditType.SISTEMA, username, f"Inicio de sesión de {username}", username)

    def log_user_logout(self, username: str) -> None:
        self.log(AuditType.SISTEMA, username, f"Cierre de sesión de {username}", username)

    def log_user_created(self, username: str, role: str) -> None:
        self.log(
            AuditType.USUARIO,
            username,
            f"Usuario {username} registrado con rol {role}",
            username,
            {'role': role}
        )

    def log_user_updated(self, actor: str, username: str, fields: Dict[str, Any]) -> None:
        self.log(
            AuditType.USUARIO,
            actor,
            f"Perfil de {username} actualizado por {actor}",
            username,
            {'fields': sorted(fields.keys())}
        )

    def log_user_deleted(self, actor: str, username: str, role: str) -> None:
        self.log(
            AuditType.USUARIO,
            actor,
            f"Usuario {username} ({role}) eliminado por {actor}",
            username,
            {'role': role}
        )

    def log_users_cleared(self, actor: str, count: int) -> None:
        self.log(
            AuditType.USUARIO,
            actor,
            f"{count} usuarios no-Admin eliminados por {actor}",
            '',
            {'count': count}
        )

    # --- Productos ------------------------------------------------------------

    def log_product_registered(self, user: str, model: str, quantity: int, arrival_date: str) -> None:
        self.log(
            AuditType.PRODUCTO,
            user,
            f"Producto {model} registrado: {quantity} unidades (llegada {arrival_date})",
            model,
            {'quantity': quantity, 'arrival_date': arrival_date}
        )

    def log_stock_add(self, user: str, model: str, delta: int, new_quantity: int, change_date: str) -> None:
        """Registra una entrada de stock."""
        self.log(
            AuditType.STOCK,
            user,
            f"Entrada de stock: +{delta} {model} - Nuevo stock: {new_quantity}",
            model,
            {'delta': delta, 'new_quantity': new_quantity, 'date': change_date}
        )

    def log_sale(self, user: str, model: str, quantity: int, new_quantity: int, selling_date: str) -> None:
        """Registra una venta."""
        message = f"Venta de {quantity} x {model} - Stock restante: {new_quantity}"
        if new_quantity == 0:
            message += " - AGOTADO"
        self.log(
            AuditType.VENTA,
            user,
            message,
            model,
            {'quantity': quantity, 'new_quantity': new_quantity, 'date': selling_date}
        )

    def log_product_deleted(self, user: str, model: str) -> None:
        self.log(AuditType.PRODUCTO, user, f"Producto {model} eliminado", model)

    def log_products_cleared(self, user: str) -> None:
        self.log(AuditType.PRODUCTO, user, "Inventario completo eliminado")

    # --- Carritos -------------------------------------------------------------

    def log_cart_paid(self, user: str, total: float, lines: Dict[str, int], payment_date: str) -> None:
        """Registra el pago de un carrito."""
        units = sum(lines.values())
        self.log(
            AuditType.CARRITO,
            user,
            f"Carrito de {user} pagado: {units} unidades - Total: {total:.2f}",
            user,
            {'total': total, 'products': lines, 'date': payment_date}
        )

    def log_carts_cleared(self, user: str) -> None:
        self.log(AuditType.CARRITO, user, "Todos los carritos eliminados")

    # --- Reseñas --------------------------------------------------------------

    def log_review_added(self, user: str, model: str, score: int) -> None:
        self.log(
            AuditType.RESENA,
            user,
            f"Reseña de {user} para {model}: {score}/5",
            model,
            {'score': score}
        )

    def log_review_deleted(self, actor: str, model: str, count: int = 1) -> None:
        self.log(
            AuditType.RESENA,
            actor,
            f"{count} reseña(s) de {model} eliminada(s) por {actor}",
            model,
            {'count': count}
        )

    def log_reviews_cleared(self, actor: str) -> None:
        self.log(AuditType.RESENA, actor, "Todas las reseñas eliminadas")

    # =========================================================================
    # CONSULTAS
    # =========================================================================

    def get_logs(self, log_type: Optional[str] = None, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Obtiene logs de auditoría (más recientes primero).

        Args:
            log_type: Filtra por tipo de evento
            limit: Cantidad máxima de registros
        """
        if log_type:
            value = log_type.value if isinstance(log_type, AuditType) else log_type
            logs = self.audit_repo.filter_by_type(value)
        else:
            logs = self.audit_repo.load()
        if limit is not None:
            logs = logs[:limit]
        return logs
