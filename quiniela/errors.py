class QuinielaError(Exception):
    """Base error surfaced to the request handler that triggered it."""

    status_code = 500
    default_message = "Error interno del servidor"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {"status": "error", "msg": self.message}


class ValidationError(QuinielaError):
    status_code = 400
    default_message = "Datos inválidos"


class AuthenticationError(QuinielaError):
    status_code = 401
    default_message = "PIN requerido"

    def __init__(self, message=None, status_code=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class NotFoundError(QuinielaError):
    status_code = 404
    default_message = "No encontrado"


class ConflictError(QuinielaError):
    status_code = 409
    default_message = "Este nickname ya está registrado"


class LockedError(QuinielaError):
    status_code = 403
    default_message = "Las predicciones están cerradas"


class StorageError(QuinielaError):
    status_code = 500
    default_message = "Error al guardar en la base de datos"


class TransportError(QuinielaError):
    """A live subscriber can no longer be written to. Never leaves the broadcaster."""

    default_message = "Conexión cerrada"
