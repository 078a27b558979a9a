"""
Erreurs métier de l'intégration Nuvemshop.

Chaque erreur porte le code HTTP sous lequel l'API la renvoie ; les
handlers de `app.main` les convertissent en enveloppe
`{success, data, message}`.
"""
from typing import Dict, List, Optional


class DescriptionAppError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


# --- Erreurs d'entrée / ressources locales ---

class ValidationFailedError(DescriptionAppError):
    status_code = 422

    def __init__(self, errors: Dict[str, List[str]], message: str = "Validation failed"):
        super().__init__(message)
        self.errors = errors


class NotFoundError(DescriptionAppError):
    status_code = 404


# --- Installation (échange du code OAuth) ---

class AuthError(DescriptionAppError):
    status_code = 400


class RemoteRejectedError(AuthError):
    """Le endpoint de token n'a pas répondu en 2xx."""

    def __init__(self, status: int, body: str):
        super().__init__(f"Authorization failed: {body}")
        self.status = status
        self.body = body


class TokenMissingError(AuthError):
    def __init__(self):
        super().__init__("Authorization failed: access token not received")


class StoreIdMissingError(AuthError):
    def __init__(self):
        super().__init__("Authorization failed: store id not provided")


class AuthInternalError(AuthError):
    status_code = 500

    def __init__(self, cause: Exception):
        super().__init__(f"Internal error: {cause}")


# --- Appels à l'API catégories ---

class ApiError(DescriptionAppError):
    status_code = 400


class NoStoreConfiguredError(ApiError):
    def __init__(self, store_id: Optional[str] = None, status_code: Optional[int] = None):
        if store_id:
            message = f"Store {store_id} not found. Install the app for this store first."
        else:
            message = "No store configured. Install the app first."
        super().__init__(message, status_code)
        self.store_id = store_id


class RemoteError(ApiError):
    """Nuvemshop a répondu hors 2xx ; le corps est renvoyé tel quel pour le diagnostic."""

    def __init__(self, status: int, body: str, action: str = "Nuvemshop request failed"):
        super().__init__(f"{action}: {body}")
        self.status = status
        self.body = body


class InternalError(ApiError):
    status_code = 500

    def __init__(self, cause: Exception):
        super().__init__(f"Internal error: {cause}")
