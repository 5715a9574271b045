import io
import logging

import pdfplumber

from config import settings
from core.interfaces import TextExtractionStrategy

logger = logging.getLogger(__name__)


class NativePdfStrategy(TextExtractionStrategy):
    """
    Estratégia de leitura rápida para PDFs vetoriais (baseados em texto).

    Utiliza a biblioteca `pdfplumber` para acessar a camada de texto do PDF diretamente.
    É a estratégia preferencial por ser mais rápida e precisa que o OCR.

    Args:
        min_text_length: Abaixo deste tamanho o texto é considerado falha
            (força o fallback). Se None, usa ``settings.MIN_TEXT_LENGTH``.
    """
    def __init__(self, min_text_length: int = None):
        self.min_text_length = min_text_length if min_text_length is not None else settings.MIN_TEXT_LENGTH

    def extract(self, pdf_bytes: bytes) -> str:
        """
        Extrai texto de todas as páginas de um PDF vetorial.

        Args:
            pdf_bytes: Conteúdo binário do PDF.

        Returns:
            str: Texto extraído ou string vazia se a extração falhar/for insuficiente.
        """
        try:
            with pdfplumber.open(io.BytesIO(pdf_bytes)) as pdf:
                if not pdf.pages:
                    return ""
                text = "\n".join(page.extract_text() or "" for page in pdf.pages)

                # Se extraiu pouco texto, considere falha
                if len(text.strip()) < self.min_text_length:
                    logger.debug(f"NativePdfStrategy: texto insuficiente ({len(text.strip())} chars)")
                    return ""

                return text
        except Exception as e:
            logger.warning(f"NativePdfStrategy: falha ao ler PDF: {e}")
            return ""
