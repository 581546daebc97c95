"""Исключения пакета crackscan."""


class CrackScanError(Exception):
    """Базовая ошибка анализа трещин."""
    pass


class InvalidInputError(CrackScanError, ValueError):
    """Размеры изображения не согласуются с буфером пикселей."""
    pass
