"""
Extratores de datas: emissão, vencimento e leituras do medidor.

As datas são devolvidas como aparecem no texto (dd/mm/yyyy ou dd/mm), sem
validação de calendário: "32/13/2024" passa adiante como está.
"""

import re
from typing import Optional, Sequence, Tuple

from core.cascade import FieldCascade
from core.models import DocumentText
from extractors.reference import is_tabular_header
from extractors.utils import DATE_RE, SHORT_DATE_RE, strip_accents

ReadingDates = Tuple[str, str, str]

_DATE = r"(\d{2}/\d{2}/\d{4})"
_DATE_OR_SHORT = r"(\d{2}/\d{2}(?:/\d{4})?)"

EMISSION_LABEL_RE = re.compile(rf"Data\s+de\s+emiss[ãa]o:?\s*{_DATE}", re.IGNORECASE)
EMISSION_PATTERNS = [
    re.compile(rf"Emiss[ãa]o:?\s*{_DATE}", re.IGNORECASE),
    re.compile(rf"Emitido\s+em:?\s*{_DATE}", re.IGNORECASE),
    re.compile(rf"Data:?\s+{_DATE}", re.IGNORECASE),
]
EMISSION_KEYWORDS = ("emissao", "emitido", "data")

DUE_LABEL_RE = re.compile(rf"Vencimento:?\s*{_DATE}", re.IGNORECASE)
DUE_PATTERNS = [
    re.compile(rf"Data\s+de\s+vencimento:?\s*{_DATE}", re.IGNORECASE),
    re.compile(rf"vence\s+em:?\s*{_DATE}", re.IGNORECASE),
    re.compile(rf"vencimento\s+em:?\s*{_DATE}", re.IGNORECASE),
    re.compile(rf"valor\s+a\s+pagar.{{1,30}}?{_DATE}", re.IGNORECASE),
]
DUE_KEYWORDS = ("vencimento", "vence", "pagar ate")

# Três datas dd/mm seguidas: leitura anterior, atual e próxima.
# Os lookarounds impedem casar pedaços de uma data dd/mm/yyyy.
THREE_READINGS_RE = re.compile(
    r"(?<![\d/])(\d{2}/\d{2})(?:\s+|-|,\s*)(\d{2}/\d{2})(?:\s+|-|,\s*)(\d{2}/\d{2})(?![\d/])"
)
PREVIOUS_READING_RE = re.compile(rf"Leitura\s+Anterior:?\s*{_DATE_OR_SHORT}", re.IGNORECASE)
CURRENT_READING_RE = re.compile(rf"Leitura\s+Atual:?\s*{_DATE_OR_SHORT}", re.IGNORECASE)
NEXT_READING_RE = re.compile(rf"Pr[óo]xima\s+Leitura:?\s*{_DATE_OR_SHORT}", re.IGNORECASE)
READING_KEYWORDS = ("leitura", "medicao")


def _first_match(text: str, patterns: Sequence[re.Pattern]) -> Optional[str]:
    for pattern in patterns:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def _date_near_keywords(document: DocumentText, keywords: Sequence[str]) -> Optional[str]:
    """Data na linha que contém a palavra-chave ou na seguinte."""
    lines = document.lines
    for i, line in enumerate(lines):
        folded = strip_accents(line).lower()
        if any(keyword in folded for keyword in keywords):
            for candidate in lines[i:i + 2]:
                match = DATE_RE.search(candidate)
                if match:
                    return match.group(1)
    return None


# =============================================================================
# EMISSÃO
# =============================================================================


def emission_date_labeled(document: DocumentText) -> Optional[str]:
    match = EMISSION_LABEL_RE.search(document.raw)
    return match.group(1) if match else None


def emission_date_variations(document: DocumentText) -> Optional[str]:
    return _first_match(document.raw, EMISSION_PATTERNS)


def emission_date_near_keyword(document: DocumentText) -> Optional[str]:
    return _date_near_keywords(document, EMISSION_KEYWORDS)


def first_date_anywhere(document: DocumentText) -> Optional[str]:
    match = DATE_RE.search(document.raw)
    return match.group(1) if match else None


def emission_date_cascade() -> FieldCascade:
    return FieldCascade(
        "emission_date",
        [
            emission_date_labeled,
            emission_date_variations,
            emission_date_near_keyword,
            first_date_anywhere,
        ],
        default="",
    )


# =============================================================================
# VENCIMENTO
# =============================================================================


def due_date_from_tabular_header(document: DocumentText) -> Optional[str]:
    """Data na linha abaixo de 'Referente a ... Vencimento ... Valor a pagar'."""
    lines = document.lines
    for i, line in enumerate(lines[:-1]):
        if is_tabular_header(line):
            match = DATE_RE.search(lines[i + 1])
            if match:
                return match.group(1)
    return None


def due_date_labeled(document: DocumentText) -> Optional[str]:
    match = DUE_LABEL_RE.search(document.raw)
    return match.group(1) if match else None


def due_date_variations(document: DocumentText) -> Optional[str]:
    return _first_match(document.raw, DUE_PATTERNS)


def due_date_near_keyword(document: DocumentText) -> Optional[str]:
    return _date_near_keywords(document, DUE_KEYWORDS)


def due_date_cascade() -> FieldCascade:
    return FieldCascade(
        "due_date",
        [
            due_date_from_tabular_header,
            due_date_labeled,
            due_date_variations,
            due_date_near_keyword,
        ],
        default="",
    )


# =============================================================================
# LEITURAS (anterior, atual, próxima)
# =============================================================================


def reading_dates_consecutive(document: DocumentText) -> Optional[ReadingDates]:
    match = THREE_READINGS_RE.search(document.raw)
    if match:
        return match.group(1), match.group(2), match.group(3)
    return None


def reading_dates_labeled(document: DocumentText) -> Optional[ReadingDates]:
    found = tuple(
        match.group(1) if match else ""
        for match in (
            PREVIOUS_READING_RE.search(document.raw),
            CURRENT_READING_RE.search(document.raw),
            NEXT_READING_RE.search(document.raw),
        )
    )
    return found if any(found) else None


def reading_dates_from_reading_line(document: DocumentText) -> Optional[ReadingDates]:
    """Linha com 'leitura'/'medição' contendo ao menos três datas dd/mm."""
    for line in document.lines:
        folded = strip_accents(line).lower()
        if any(keyword in folded for keyword in READING_KEYWORDS):
            dates = SHORT_DATE_RE.findall(line)
            if len(dates) >= 3:
                return dates[0], dates[1], dates[2]
    return None


def reading_dates_cascade() -> FieldCascade:
    return FieldCascade(
        "reading_dates",
        [
            reading_dates_consecutive,
            reading_dates_labeled,
            reading_dates_from_reading_line,
        ],
        default=("", "", ""),
    )
