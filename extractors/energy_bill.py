"""
Extrator especializado para faturas de energia elétrica (layout CEMIG e
similares, português do Brasil).

Características típicas:
- Rótulos "Nº DO CLIENTE" / "Nº DA INSTALAÇÃO" com o número na linha de baixo
- Cabeçalho tabular "Referente a   Vencimento   Valor a pagar" seguido de
  "SET/2024   09/10/2024   189,13"
- Quadro de itens: Energia Elétrica, Energia SCEE, Energia compensada GD,
  Contrib Ilum Publica Municipal
- Valores no formato brasileiro (1.234,56)

Cada campo é extraído por uma cascata independente; o registro montado
passa pelo motor de reparo antes de ser devolvido.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from core.exceptions import ExtractionError
from core.extractors import BaseBillExtractor
from core.models import DocumentText, ExtractedBillRecord
from extractors import dates, financial, identity, reference
from extractors.repair import DataRepairEngine

logger = logging.getLogger(__name__)


class EnergyBillExtractor(BaseBillExtractor):
    """
    Extrator especializado (ciente dos rótulos da fatura).

    Não guarda estado entre chamadas: as cascatas são montadas no construtor
    e apenas lidas durante ``extract``.

    Args:
        repair_engine: Motor de reparo. Se None, usa o padrão (tabela de
            correções de ``settings``).
        clock: Relógio usado só pelo último recurso do mês de referência.
    """

    name = "especializado"

    # Indicadores de fatura de energia (o pipeline avisa quando faltam)
    ENERGY_INDICATORS = (
        "DISTRIB",
        "ENERGIA ELÉTRICA",
        "ENERGIA ELETRICA",
        "KWH",
        "INSTALAÇÃO",
        "INSTALACAO",
        "Nº DO CLIENTE",
        "BANDEIRA",
        "CEMIG",
        "COPEL",
        "CPFL",
        "ENERGISA",
        "ENEL",
    )

    def __init__(
        self,
        repair_engine: Optional[DataRepairEngine] = None,
        clock: Callable[[], datetime] = None,
    ):
        self.repair_engine = repair_engine if repair_engine is not None else DataRepairEngine()
        self.clock = clock or datetime.now

        self.client_number = identity.client_number_cascade()
        self.installation_number = identity.installation_number_cascade()
        self.client_name = identity.client_name_cascade()
        self.reference = reference.reference_cascade(self.clock)
        self.line_items = [(spec, financial.line_item_cascade(spec)) for spec in financial.LINE_ITEMS]
        self.public_lighting = financial.public_lighting_cascade()
        self.total = financial.total_cascade()
        self.emission_date = dates.emission_date_cascade()
        self.due_date = dates.due_date_cascade()
        self.reading_dates = dates.reading_dates_cascade()

    @classmethod
    def can_handle(cls, text: str) -> bool:
        """Retorna True se o texto parece ser uma fatura de energia (2+ indicadores)."""
        if not text:
            return False
        text_upper = text.upper()
        matches = sum(1 for indicator in cls.ENERGY_INDICATORS if indicator in text_upper)
        return matches >= 2

    def extract_fields(self, document: DocumentText) -> ExtractedBillRecord:
        """
        Executa todas as cascatas e monta o rascunho (sem reparo).

        Os campos não dependem uns dos outros, então a ordem é irrelevante.
        """
        record = ExtractedBillRecord()

        record.client_number = self.client_number.run(document)
        record.installation_number = self.installation_number.run(document)
        record.client_name = self.client_name.run(document)
        record.reference_month, record.reference_year = self.reference.run(document)

        for spec, cascade in self.line_items:
            kwh, value = cascade.run(document)
            setattr(record, f"{spec.field_prefix}_kwh", kwh)
            setattr(record, f"{spec.field_prefix}_value", value)

        record.public_lighting_value = self.public_lighting.run(document)
        record.total_value = self.total.run(document)

        record.emission_date = self.emission_date.run(document)
        record.due_date = self.due_date.run(document)
        (
            record.previous_reading_date,
            record.current_reading_date,
            record.next_reading_date,
        ) = self.reading_dates.run(document)

        return record

    def extract(self, text: str) -> ExtractedBillRecord:
        """
        Extrai e repara os dados de uma fatura de energia.

        Args:
            text (str): Texto bruto do PDF.

        Returns:
            ExtractedBillRecord: Registro completo (possivelmente esparso).

        Raises:
            ExtractionError: Falha inesperada específica do documento.
        """
        logger.info("EnergyBillExtractor: iniciando extração")
        document = DocumentText.from_raw(text)
        logger.debug(f"Primeiras linhas: {' | '.join(document.head(5))}")

        try:
            record = self.extract_fields(document)
            record = self.repair_engine.repair(record, document)
        except Exception as e:
            raise ExtractionError(f"Falha ao extrair dados: {e}") from e

        if record.total_value:
            logger.info(
                f"EnergyBillExtractor: documento processado - "
                f"Cliente: {record.client_number or 'N/A'}, "
                f"Referência: {record.reference_month}/{record.reference_year}, "
                f"Valor: R$ {record.total_value:.2f}"
            )
        else:
            logger.warning(
                f"EnergyBillExtractor: documento processado mas total_value não encontrado. "
                f"Texto (primeiros 200 chars): {text[:200] if text else ''}"
            )
        return record
