# ==============================================================================
# EXCEPCIONES DEL DOMINIO
# ==============================================================================
# Jerarquía de errores de la aplicación:
#   - ValidationError         → datos inválidos, la operación se aborta entera
#   - InsufficientStockError  → una línea de venta supera el stock disponible
#   - NotFoundError           → id inexistente al editar/eliminar
#   - SyncError               → fallo de red o del almacén externo
# ==============================================================================


class InventarioError(Exception):
    """Error base de la aplicación."""
    pass


class ValidationError(InventarioError):
    """Borrador inválido: falta un campo obligatorio o un valor no es aceptable."""
    pass


class InsufficientStockError(ValidationError):
    """
    Stock insuficiente para una línea de venta.

    Attributes:
        product_id: ID del producto que falló
        product_name: Nombre del producto (vacío si fue eliminado)
        available: Stock disponible (ya ajustado en ediciones)
        requested: Cantidad solicitada
    """

    def __init__(self, product_id: str, product_name: str, available: int, requested: int):
        self.product_id = product_id
        self.product_name = product_name
        self.available = available
        self.requested = requested
        super().__init__(
            f"Stock insuficiente para {product_name or product_id}. "
            f"Disponible: {available}, Solicitado: {requested}"
        )


class NotFoundError(InventarioError):
    """El registro a editar o eliminar no existe."""
    pass


class SyncError(InventarioError):
    """Fallo al leer o escribir en el almacén tabular externo."""
    pass
