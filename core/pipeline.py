"""
Orquestrador do processo de extração de faturas de energia.

Máquina de dois estados:

1.  **SPECIALIZED**: lê o PDF com o leitor principal e roda o extrator
    especializado (que inclui o motor de reparo).
2.  **FALLBACK**: se qualquer coisa falhar no estado anterior, relê o PDF
    com a estratégia composta (nativa -> OCR) e roda o extrator genérico.

Se o fallback também falhar, levanta ``PdfParseError``. Documentos legíveis
com campos ausentes nunca são erro: o registro volta esparso.

Example:
    >>> pipeline = BillExtractionPipeline()
    >>> with open("fatura.pdf", "rb") as f:
    ...     record = pipeline.extract(f.read())
    >>> record.to_dict()["totalValue"]
    189.13
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from core.exceptions import ConversionError, PdfParseError
from core.extractors import BaseBillExtractor
from core.interfaces import TextExtractionStrategy
from core.models import ExtractedBillRecord
from extractors.energy_bill import EnergyBillExtractor
from extractors.generic import GenericBillExtractor
from strategies.fallback import SmartExtractionStrategy
from strategies.native import NativePdfStrategy

logger = logging.getLogger(__name__)


class ExtractionStage(Enum):
    SPECIALIZED = "especializado"
    FALLBACK = "fallback"


@dataclass
class ExtractionOutcome:
    """Registro extraído e o estágio que o produziu."""
    record: ExtractedBillRecord
    stage: ExtractionStage


class BillExtractionPipeline:
    """
    Coordena leitura, extração especializada e fallback genérico.

    Args:
        reader: Leitor do estado SPECIALIZED. Se None, usa NativePdfStrategy.
        fallback_reader: Leitor do estado FALLBACK. Se None, usa
            SmartExtractionStrategy (nativo -> OCR).
        specialized: Extrator especializado. Se None, usa EnergyBillExtractor.
        generic: Extrator genérico. Se None, usa GenericBillExtractor.
        clock: Relógio injetado nos extratores padrão.
    """

    def __init__(
        self,
        reader: Optional[TextExtractionStrategy] = None,
        fallback_reader: Optional[TextExtractionStrategy] = None,
        specialized: Optional[BaseBillExtractor] = None,
        generic: Optional[BaseBillExtractor] = None,
        clock: Callable[[], datetime] = None,
    ):
        self.reader = reader if reader is not None else NativePdfStrategy()
        self._fallback_reader = fallback_reader
        self.specialized = specialized if specialized is not None else EnergyBillExtractor(clock=clock)
        self.generic = generic if generic is not None else GenericBillExtractor(clock=clock)

    @property
    def fallback_reader(self) -> TextExtractionStrategy:
        # Construído sob demanda: o OCR só é configurado se o fallback ocorrer
        if self._fallback_reader is None:
            self._fallback_reader = SmartExtractionStrategy()
        return self._fallback_reader

    def _run_specialized(self, text: str) -> ExtractedBillRecord:
        if not self.specialized.can_handle(text):
            logger.warning(
                f"Texto não parece uma fatura de energia ({self.specialized.name}); "
                f"a extração pode sair esparsa"
            )
        return self.specialized.extract(text)

    @staticmethod
    def _read(reader: TextExtractionStrategy, pdf_bytes: bytes) -> str:
        text = reader.extract(pdf_bytes)
        if not text or not text.strip():
            raise ConversionError(f"{type(reader).__name__} não produziu texto")
        return text

    def run(self, pdf_bytes: bytes) -> ExtractionOutcome:
        """
        Executa a máquina de estados sobre o conteúdo de um PDF.

        Args:
            pdf_bytes (bytes): Conteúdo binário do PDF.

        Returns:
            ExtractionOutcome: Registro e estágio que o produziu.

        Raises:
            PdfParseError: Se os dois estágios falharem.
        """
        try:
            text = self._read(self.reader, pdf_bytes)
            record = self._run_specialized(text)
            logger.info(f"Extração concluída no estágio {ExtractionStage.SPECIALIZED.value}")
            return ExtractionOutcome(record, ExtractionStage.SPECIALIZED)
        except Exception as e:
            logger.warning(f"Extração especializada falhou, usando fallback: {e}")

        try:
            text = self._read(self.fallback_reader, pdf_bytes)
            record = self.generic.extract(text)
        except Exception as e:
            logger.error(f"Fallback falhou: {e}")
            raise PdfParseError(f"Failed to parse PDF: {e}") from e

        logger.info(f"Extração concluída no estágio {ExtractionStage.FALLBACK.value}")
        return ExtractionOutcome(record, ExtractionStage.FALLBACK)

    def run_text(self, text: str) -> ExtractionOutcome:
        """
        Mesma máquina de estados, partindo de texto já decodificado.

        Raises:
            PdfParseError: Se os dois extratores falharem.
        """
        try:
            record = self._run_specialized(text)
            return ExtractionOutcome(record, ExtractionStage.SPECIALIZED)
        except Exception as e:
            logger.warning(f"Extração especializada falhou, usando fallback: {e}")

        try:
            record = self.generic.extract(text)
        except Exception as e:
            logger.error(f"Fallback falhou: {e}")
            raise PdfParseError(f"Failed to parse PDF: {e}") from e
        return ExtractionOutcome(record, ExtractionStage.FALLBACK)

    def extract(self, pdf_bytes: bytes) -> ExtractedBillRecord:
        """Extrai o registro de um PDF em memória."""
        return self.run(pdf_bytes).record

    def extract_text(self, text: str) -> ExtractedBillRecord:
        """Extrai o registro de um texto já convertido."""
        return self.run_text(text).record
