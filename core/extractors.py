from abc import ABC, abstractmethod

from core.models import ExtractedBillRecord


# A Interface Base
class BaseBillExtractor(ABC):
    """Contrato que todo extrator de fatura (especializado ou genérico) deve implementar."""

    name = "base"

    @classmethod
    def can_handle(cls, text: str) -> bool:
        """Retorna True se o extrator reconhece o layout do texto. Por padrão aceita tudo."""
        return True

    @abstractmethod
    def extract(self, text: str) -> ExtractedBillRecord:
        """Recebe o texto bruto do PDF e retorna o registro normalizado."""
        pass
