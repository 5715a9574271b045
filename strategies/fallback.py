import logging
from typing import List, Optional

from core.exceptions import ConversionError
from core.interfaces import TextExtractionStrategy
from .native import NativePdfStrategy
from .ocr import TesseractOcrStrategy

logger = logging.getLogger(__name__)


class SmartExtractionStrategy(TextExtractionStrategy):
    """
    Estratégia composta (Composite) que gerencia tentativas de leitura.

    Implementa um padrão de **Fallback**:
    1.  Tenta a estratégia nativa (rápida).
    2.  Se falhar, aciona a estratégia de OCR (lenta e robusta).

    Args:
        strategies: Estratégias em ordem de prioridade. Se None, usa
            nativa e depois OCR.
    """
    def __init__(self, strategies: Optional[List[TextExtractionStrategy]] = None):
        self.strategies = strategies if strategies is not None else [
            NativePdfStrategy(),      # 1. Tenta ser rápido
            TesseractOcrStrategy(),   # 2. Se falhar, usa força bruta
        ]

    def extract(self, pdf_bytes: bytes) -> str:
        """
        Tenta extrair texto usando as estratégias em ordem de prioridade.

        Args:
            pdf_bytes (bytes): Conteúdo binário do PDF.

        Returns:
            str: Texto extraído pela primeira estratégia bem-sucedida.

        Raises:
            ConversionError: Se todas as estratégias falharem.
        """
        errors = []
        for strategy in self.strategies:
            try:
                text = strategy.extract(pdf_bytes)
            except ConversionError as e:
                logger.warning(f"{type(strategy).__name__} falhou: {e}")
                errors.append(str(e))
                continue
            if text and text.strip():
                return text

        detail = f" ({'; '.join(errors)})" if errors else ""
        raise ConversionError(f"Falha: Nenhum método conseguiu ler o arquivo.{detail}")
