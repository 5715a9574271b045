"""
Motor de reparo de dados extraídos.

Executado depois de todos os extratores de campo, sobre o registro montado e
o texto normalizado. Faz inferência entre campos (ex: total = maior valor
R$ do documento), aplica a tabela de correções por entidade conhecida e
garante a cobertura total do registro: nenhum campo numérico termina NaN e o
mês de referência é canônico ou vazio.

O motor altera o registro no lugar e o devolve. Nunca falha por causa dos
dados do documento.
"""

import logging
import re
from typing import Iterable, Optional

from config import settings
from config.entity_fixups import EntityFixup, load_entity_fixups
from core.models import DocumentText, ExtractedBillRecord
from extractors.identity import ALL_CAPS_LINE_RE
from extractors.utils import (
    DATE_RE,
    find_money_values,
    has_digit,
    is_canonical_month,
    parse_br_number,
    safe_number,
    strip_accents,
)

logger = logging.getLogger(__name__)

KWH_ANYWHERE_RE = re.compile(r"(\d+(?:[,.]\d+)*)\s*kWh", re.IGNORECASE)


class DataRepairEngine:
    """
    Repara um registro parcialmente preenchido.

    Args:
        fixups: Tabela de correções por entidade. Se None, carrega a tabela
            de ``settings.ENTITY_FIXUPS_FILE`` (ou a padrão).
        kwh_price_estimate: Divisor usado para estimar kWh a partir do total.
        electric_value_share: Fração do total atribuída à energia elétrica.
        public_lighting_share: Fração do total atribuída à iluminação pública.
        header_lines: Linhas do topo varridas em busca do nome do titular.
    """

    def __init__(
        self,
        fixups: Optional[Iterable[EntityFixup]] = None,
        kwh_price_estimate: float = None,
        electric_value_share: float = None,
        public_lighting_share: float = None,
        header_lines: int = None,
    ):
        self.fixups = list(fixups) if fixups is not None else load_entity_fixups(settings.ENTITY_FIXUPS_FILE)
        self.kwh_price_estimate = kwh_price_estimate or settings.KWH_PRICE_ESTIMATE
        self.electric_value_share = (
            electric_value_share if electric_value_share is not None else settings.ELECTRIC_VALUE_SHARE
        )
        self.public_lighting_share = (
            public_lighting_share if public_lighting_share is not None else settings.PUBLIC_LIGHTING_SHARE
        )
        self.header_lines = header_lines if header_lines is not None else settings.HEADER_SCAN_LINES

    def repair(self, record: ExtractedBillRecord, document: DocumentText) -> ExtractedBillRecord:
        """
        Aplica todas as etapas de reparo em ordem.

        Args:
            record: Registro montado pelos extratores de campo (alterado no lugar).
            document: Texto normalizado do mesmo documento.

        Returns:
            ExtractedBillRecord: O próprio ``record``, reparado.
        """
        self._copy_installation_to_client(record)
        self._apply_fixups(record, document)
        self._consumption_from_history(record, document)
        self._client_name_from_uppercase_line(record, document)
        self._kwh_from_any_token(record, document)
        self._total_from_max_money(record, document)
        self._due_date_from_first_date(record, document)
        self._estimate_consumption(record)
        self._estimate_public_lighting(record)
        self._ensure_coverage(record)
        return record

    # -------------------------------------------------------------------------
    # Etapas
    # -------------------------------------------------------------------------

    def _copy_installation_to_client(self, record: ExtractedBillRecord) -> None:
        # Em contas pequenas cliente e instalação costumam coincidir
        if not record.client_number and record.installation_number:
            record.client_number = record.installation_number
            logger.debug("client_number copiado de installation_number")

    def _apply_fixups(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        for fixup in self.fixups:
            if fixup.fingerprint not in document.raw:
                continue
            if not hasattr(record, fixup.field):
                logger.warning(f"Correção ignorada: campo desconhecido '{fixup.field}'")
                continue
            if fixup.overwrite or record.is_missing(fixup.field):
                if getattr(record, fixup.field) != fixup.value:
                    setattr(record, fixup.field, fixup.value)
                    logger.debug(f"Correção aplicada ({fixup.fingerprint}): {fixup.field}={fixup.value!r}")

    def _consumption_from_history(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        """Linha do histórico de consumo do mês de referência: 'SET/24  1.960  67,58  29'."""
        if record.energy_electric_kwh or not is_canonical_month(record.reference_month) or not record.reference_year:
            return
        if not isinstance(record.reference_year, int):
            return
        abbr = strip_accents(record.reference_month)[:3].upper()
        year = record.reference_year % 100
        match = re.search(rf"\b{abbr}/{year:02d}\s+(\d+(?:[,.]\d+)*)\s+", document.raw, re.IGNORECASE)
        if match:
            kwh = parse_br_number(match.group(1))
            if kwh:
                record.energy_electric_kwh = kwh
                logger.debug(f"kWh obtido do histórico de consumo: {kwh}")

    def _client_name_from_uppercase_line(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        if record.client_name:
            return
        for line in document.head(self.header_lines):
            if 10 < len(line) < 60 and not has_digit(line) and ALL_CAPS_LINE_RE.match(line):
                record.client_name = line
                logger.debug(f"client_name obtido de linha em maiúsculas: {line}")
                return

    def _kwh_from_any_token(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        if record.energy_electric_kwh:
            return
        match = KWH_ANYWHERE_RE.search(document.raw)
        if match:
            record.energy_electric_kwh = parse_br_number(match.group(1))

    def _total_from_max_money(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        # O valor a pagar costuma ser o maior valor R$ do documento
        if record.total_value:
            return
        values = find_money_values(document.raw)
        if values:
            record.total_value = max(values)
            logger.debug(f"total_value inferido como maior valor R$: {record.total_value}")

    def _due_date_from_first_date(self, record: ExtractedBillRecord, document: DocumentText) -> None:
        if record.due_date:
            return
        match = DATE_RE.search(document.raw)
        if match:
            record.due_date = match.group(1)

    def _estimate_consumption(self, record: ExtractedBillRecord) -> None:
        # Aproximação documentada, não é medição
        total = safe_number(record.total_value)
        if safe_number(record.energy_electric_kwh) or total <= 0:
            return
        record.energy_electric_kwh = float(round(total / self.kwh_price_estimate))
        if not safe_number(record.energy_electric_value):
            record.energy_electric_value = round(total * self.electric_value_share, 2)
        logger.debug(
            f"Consumo estimado a partir do total: {record.energy_electric_kwh} kWh, "
            f"R$ {record.energy_electric_value:.2f}"
        )

    def _estimate_public_lighting(self, record: ExtractedBillRecord) -> None:
        total = safe_number(record.total_value)
        if safe_number(record.public_lighting_value) or total <= 0:
            return
        record.public_lighting_value = round(total * self.public_lighting_share, 2)
        logger.debug(f"Iluminação pública estimada: R$ {record.public_lighting_value:.2f}")

    def _ensure_coverage(self, record: ExtractedBillRecord) -> None:
        record.ensure_coverage()
