import logging
import re
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from core.extractors import BaseBillExtractor
from core.models import ExtractedBillRecord
from extractors.utils import (
    is_canonical_month,
    normalize_month,
    parse_br_number,
    split_lines,
)

logger = logging.getLogger(__name__)

COLUMN_SPLIT_RE = re.compile(r"\s{2,}")


class GenericBillExtractor(BaseBillExtractor):
    """
    Extrator generalista usado como fallback.

    Faz uma divisão grosseira em linhas e colunas (2+ espaços) e assume poucos
    rótulos. Se os principais valores financeiros continuarem zerados, aplica
    uma passada de resgate baseada apenas em Regex sobre o texto inteiro.
    Não usa o motor de reparo, mas devolve o registro com os mesmos
    invariantes (``ExtractedBillRecord.ensure_coverage``).

    Args:
        clock: Relógio usado quando o ano de referência não é encontrado.
    """

    name = "generico"

    # Expressões do resgate por Regex
    RESCUE_CLIENT_RE = re.compile(r"N[º°o]\s*DO\s*CLIENTE:?\s*(\d+)", re.IGNORECASE)
    RESCUE_REFERENCE_RE = re.compile(r"Refer[eê]n[tc][ei]a\s*a\s*([A-Za-zÀ-ÿ]+)/(\d{4})", re.IGNORECASE)
    RESCUE_ELECTRIC_RE = re.compile(r"Energia\s*El[ée]trica:?\s*([\d.,]+)\s*kWh\s*R\$\s*(-?[\d.,]+)", re.IGNORECASE)
    RESCUE_SCEEE_RE = re.compile(r"Energia\s*SCEEE?\s*s/\s*ICMS:?\s*([\d.,]+)\s*kWh\s*R\$\s*(-?[\d.,]+)", re.IGNORECASE)
    RESCUE_COMPENSATED_RE = re.compile(
        r"Energia\s*Compensada\s*GD\s*[I1]:?\s*([\d.,]+)\s*kWh(?:\s*R\$\s*(-?[\d.,]+))?", re.IGNORECASE
    )
    RESCUE_LIGHTING_RE = re.compile(r"Contrib\s*Ilum\s*Publica\s*Municipal:?\s*R\$\s*([\d.,]+)", re.IGNORECASE)

    def __init__(self, clock: Callable[[], datetime] = None):
        self.clock = clock or datetime.now

    @staticmethod
    def _find_index(lines: List[str], keyword: str) -> int:
        for i, line in enumerate(lines):
            if keyword in line:
                return i
        return -1

    @staticmethod
    def _find_energy_value(lines: List[str], keyword: str) -> Optional[Tuple[Optional[str], Optional[str]]]:
        """
        Procura 'XXX kWh' e 'R$ XXX' na primeira linha que contém ``keyword``.

        Returns:
            (quantidade, valor) como strings, ou None se a linha não existe.
        """
        index = GenericBillExtractor._find_index(lines, keyword)
        if index == -1:
            return None

        parts = lines[index].split()
        quantity = value = None
        for i, part in enumerate(parts):
            if part.lower() == "kwh" and i > 0:
                quantity = parts[i - 1]
            if part in ("R$", "R$:") and i < len(parts) - 1:
                value = parts[i + 1]
        return quantity, value

    @staticmethod
    def _find_value(lines: List[str], keyword: str) -> Optional[str]:
        """Valor após 'R$' na primeira linha que contém ``keyword``."""
        index = GenericBillExtractor._find_index(lines, keyword)
        if index == -1:
            return None

        parts = lines[index].split()
        for i, part in enumerate(parts[:-1]):
            if part in ("R$", "R$:"):
                return parts[i + 1]
        return None

    def _extract_reference(self, lines: List[str]) -> Tuple[str, int]:
        index = self._find_index(lines, "Referente a")
        reference = ""
        if index != -1:
            # "Referente a Janeiro/2024" na mesma linha ou o token na linha seguinte
            remainder = lines[index].split("Referente a", 1)[1].strip()
            if "/" in remainder:
                reference = COLUMN_SPLIT_RE.split(remainder)[0]
            elif index + 1 < len(lines):
                reference = COLUMN_SPLIT_RE.split(lines[index + 1])[0]

        month_part, _, year_part = reference.partition("/")
        month = normalize_month(month_part.strip())
        if not is_canonical_month(month):
            month = ""
        year_digits = re.match(r"\d{4}", year_part.strip())
        year = int(year_digits.group(0)) if year_digits else self.clock().year
        return month, year

    def _extract_client_name(self, lines: List[str], client_index: int) -> str:
        # Posição fixa no layout: 5 linhas acima do rótulo (6 com inscrição estadual)
        offset = 6 if self._find_index(lines, "INSCRIÇÃO ESTADUAL") != -1 else 5
        if client_index < offset:
            return ""
        return lines[client_index - offset]

    def _rescue_with_regex(self, text: str, record: ExtractedBillRecord) -> None:
        """Passada de resgate por Regex quando os valores principais zeraram."""
        logger.debug("GenericBillExtractor: aplicando resgate por Regex")

        if not record.client_number:
            match = self.RESCUE_CLIENT_RE.search(text)
            if match:
                record.client_number = match.group(1)

        if not record.reference_month:
            match = self.RESCUE_REFERENCE_RE.search(text)
            if match:
                month = normalize_month(match.group(1))
                if is_canonical_month(month):
                    record.reference_month = month
                    record.reference_year = int(match.group(2))

        match = self.RESCUE_ELECTRIC_RE.search(text)
        if match:
            record.energy_electric_kwh = parse_br_number(match.group(1))
            record.energy_electric_value = parse_br_number(match.group(2))

        match = self.RESCUE_SCEEE_RE.search(text)
        if match and not record.energy_sceee_value:
            record.energy_sceee_kwh = parse_br_number(match.group(1))
            record.energy_sceee_value = parse_br_number(match.group(2))

        match = self.RESCUE_COMPENSATED_RE.search(text)
        if match and not record.energy_compensated_kwh:
            record.energy_compensated_kwh = parse_br_number(match.group(1))
            if match.group(2):
                record.energy_compensated_value = -abs(parse_br_number(match.group(2)))

        match = self.RESCUE_LIGHTING_RE.search(text)
        if match and not record.public_lighting_value:
            record.public_lighting_value = parse_br_number(match.group(1))

    def extract(self, text: str) -> ExtractedBillRecord:
        """
        Extrai os campos principais usando posição de linhas e Regex.

        Args:
            text (str): Texto bruto do documento.

        Returns:
            ExtractedBillRecord: Registro no contrato público.
        """
        logger.info("GenericBillExtractor: iniciando extração")
        lines = split_lines(text)
        record = ExtractedBillRecord()

        client_index = self._find_index(lines, "Nº DO CLIENTE")
        if client_index != -1 and client_index + 1 < len(lines):
            record.client_number = COLUMN_SPLIT_RE.split(lines[client_index + 1])[0]

        record.client_name = self._extract_client_name(lines, client_index)
        record.reference_month, record.reference_year = self._extract_reference(lines)

        electric = self._find_energy_value(lines, "Energia Elétrica")
        if electric:
            record.energy_electric_kwh = parse_br_number(electric[0])
            record.energy_electric_value = parse_br_number(electric[1])

        sceee = self._find_energy_value(lines, "Energia SCEE")
        if sceee:
            record.energy_sceee_kwh = parse_br_number(sceee[0])
            record.energy_sceee_value = parse_br_number(sceee[1])

        compensated = self._find_energy_value(lines, "Energia Compensada") or self._find_energy_value(
            lines, "Energia compensada"
        )
        if compensated:
            record.energy_compensated_kwh = parse_br_number(compensated[0])
            record.energy_compensated_value = -abs(parse_br_number(compensated[1]))

        record.public_lighting_value = parse_br_number(self._find_value(lines, "Contrib Ilum Publica"))

        total_index = self._find_index(lines, "TOTAL")
        if total_index != -1:
            columns = COLUMN_SPLIT_RE.split(lines[total_index])
            if len(columns) > 1:
                record.total_value = parse_br_number(columns[1])

        if not record.energy_electric_kwh and not record.energy_electric_value:
            self._rescue_with_regex(text or "", record)

        # Créditos negativos, demais valores >= 0, mês canônico ou vazio
        record.ensure_coverage()

        logger.info(
            f"GenericBillExtractor: cliente={record.client_number or 'N/A'}, "
            f"referência={record.reference_month or 'N/A'}/{record.reference_year}"
        )
        return record
