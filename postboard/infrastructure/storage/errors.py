"""
Errores del storage de imágenes.

El adaptador S3 traduce excepciones de botocore a esta jerarquía; las capas
superiores solo conocen StorageError (=> 503 en la API).
"""


class StorageError(Exception):
    pass


class StorageConfigurationError(StorageError):
    """Bucket o credenciales faltantes."""


class StoragePermissionError(StorageError):
    def __init__(self, message: str = "Sin permisos sobre el bucket de imágenes."):
        super().__init__(message)


class StorageUnavailableError(StorageError):
    def __init__(self, message: str = "Storage de imágenes no disponible."):
        super().__init__(message)
