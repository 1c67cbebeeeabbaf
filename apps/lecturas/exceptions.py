"""Excepciones del módulo de lecturas"""


class ReadingError(Exception):
    """Error base de lecturas"""


class ReadingValidationError(ReadingError, ValueError):
    """Datos de entrada inválidos o incompletos (se rechaza antes de tocar Firestore)"""


class ReadingNotFound(ReadingError, LookupError):
    """La lectura solicitada no existe en el conjunto vigente"""


class MalformedReading(ReadingError, ValueError):
    """Una lectura individual no se puede interpretar (ej: timestamp inválido)"""
