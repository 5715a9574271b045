class BillExtractionException(Exception):
    """Exceção base para o motor de extração de faturas."""
    pass

class ConversionError(BillExtractionException):
    """Levantada quando a conversão PDF -> texto não produz texto utilizável."""
    pass

class ExtractionError(BillExtractionException):
    """Levantada quando o extrator especializado falha para um documento."""
    pass

class PdfParseError(BillExtractionException):
    """Levantada quando os caminhos especializado e genérico falharam."""
    pass
