import logging

import pytesseract
from pdf2image import convert_from_bytes

from config import settings
from core.exceptions import ConversionError
from core.interfaces import TextExtractionStrategy

logger = logging.getLogger(__name__)


class TesseractOcrStrategy(TextExtractionStrategy):
    """
    Estratégia de leitura baseada em OCR (Reconhecimento Óptico de Caracteres).

    Utiliza `pdf2image` para rasterizar o PDF e `pytesseract` para extrair texto da imagem.
    Acionada quando o PDF não possui camada de texto (ex: digitalizações).
    """
    def __init__(self):
        # Sem isso o pytesseract não acha o executável no Windows
        pytesseract.pytesseract.tesseract_cmd = settings.TESSERACT_CMD

    def extract(self, pdf_bytes: bytes) -> str:
        """
        Converte o PDF em imagens e executa OCR em todas as páginas.

        Args:
            pdf_bytes (bytes): Conteúdo binário do PDF.

        Returns:
            str: Texto extraído das imagens.

        Raises:
            ConversionError: Se houver erro na rasterização ou no OCR.
        """
        try:
            # poppler_path explícito evita "Unable to get page count"
            images = convert_from_bytes(pdf_bytes, poppler_path=settings.POPPLER_PATH)

            pages = [
                pytesseract.image_to_string(img, lang=settings.OCR_LANG, config=settings.OCR_CONFIG)
                for img in images
            ]
            logger.debug(f"TesseractOcrStrategy: {len(pages)} página(s) processada(s)")
            return "\n".join(pages)

        except Exception as e:
            raise ConversionError(f"Erro fatal no OCR: {e}") from e
