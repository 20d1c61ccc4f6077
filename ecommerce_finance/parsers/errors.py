"""
Veri içe aktarma hataları.
"""


class ImportDataError(ValueError):
    """İçe aktarılan dosya okunamadı veya beklenen biçimde değil."""


class WorkbookError(ImportDataError):
    pass


class SnapshotError(ImportDataError):
    pass
