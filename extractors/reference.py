"""
Extrator do mês/ano de referência da fatura.

A cascata tenta, em ordem:
1. Cabeçalho tabular "Referente a ... Vencimento ... Valor a pagar" com o
   token MES/ANO (ex: SET/2024) na linha seguinte;
2. Frase direta "Referente a Janeiro/2024";
3. Nome completo do mês junto de um ano ("setembro de 2024", linha "Referente");
4. Token abreviado MES/ANO em qualquer ponto do texto;
5. Data atual (relógio injetado). É o ÚNICO caminho não determinístico
   do motor de extração.

Toda estratégia precisa produzir um nome de mês canônico; do contrário é
tratada como falha e a cascata segue.
"""

import re
from datetime import datetime
from typing import Callable, Optional, Tuple

from core.cascade import FieldCascade
from core.models import DocumentText
from extractors.utils import (
    MONTH_ABBR_PATTERN,
    MONTH_NAME_PATTERN,
    is_canonical_month,
    month_name,
    normalize_month,
)

Reference = Tuple[str, int]
Clock = Callable[[], datetime]

TABULAR_HEADER_KEYWORDS = ("Referente a", "Vencimento", "Valor a pagar")

ABBR_MONTH_YEAR_RE = re.compile(rf"({MONTH_ABBR_PATTERN})/(\d{{4}})", re.IGNORECASE)
REFERENTE_A_RE = re.compile(r"Referente\s+a\s+([A-Za-zÀ-ÿ]+)\s*/\s*(\d{4})", re.IGNORECASE)

FULL_MONTH_YEAR_PATTERNS = [
    re.compile(rf"\b({MONTH_NAME_PATTERN})[\s/]+de[\s/]+(\d{{4}})\b", re.IGNORECASE),
    re.compile(rf"\b({MONTH_NAME_PATTERN})[\s/]+(\d{{4}})\b", re.IGNORECASE),
]

ABBR_ANYWHERE_RE = re.compile(rf"\b({MONTH_ABBR_PATTERN})[\s/]?(\d{{4}})\b", re.IGNORECASE)

REFERENCE_LINE_MONTH_RE = re.compile(
    rf"\b({MONTH_NAME_PATTERN}|{MONTH_ABBR_PATTERN})\b", re.IGNORECASE
)
YEAR_RE = re.compile(r"\b(20\d{2})\b")


def is_tabular_header(line: str) -> bool:
    """Linha de cabeçalho 'Referente a   Vencimento   Valor a pagar'."""
    return all(keyword in line for keyword in TABULAR_HEADER_KEYWORDS)


def _canonical(month: str, year: str) -> Optional[Reference]:
    name = normalize_month(month)
    if not is_canonical_month(name):
        return None
    return name, int(year)


def reference_from_tabular_header(document: DocumentText) -> Optional[Reference]:
    lines = document.lines
    for i, line in enumerate(lines[:-1]):
        if is_tabular_header(line):
            match = ABBR_MONTH_YEAR_RE.search(lines[i + 1])
            if match:
                return _canonical(match.group(1), match.group(2))
    return None


def reference_from_referente_phrase(document: DocumentText) -> Optional[Reference]:
    match = REFERENTE_A_RE.search(document.raw)
    if match:
        return _canonical(match.group(1), match.group(2))
    return None


def reference_from_month_name(document: DocumentText) -> Optional[Reference]:
    """Nome do mês por extenso acompanhado de ano."""
    for pattern in FULL_MONTH_YEAR_PATTERNS:
        match = pattern.search(document.raw)
        if match:
            return _canonical(match.group(1), match.group(2))

    # Linha "Referente"/"Referência" (+ a seguinte) com mês e ano 20xx
    lines = document.lines
    for i, line in enumerate(lines):
        if "Referente" in line or "Referência" in line:
            window = " ".join(lines[i:i + 2])
            month_match = REFERENCE_LINE_MONTH_RE.search(window)
            year_match = YEAR_RE.search(window)
            if month_match and year_match:
                return _canonical(month_match.group(1), year_match.group(1))
    return None


def reference_from_abbreviation(document: DocumentText) -> Optional[Reference]:
    """Token abreviado em qualquer lugar: SET/2024, SET 2024, SET2024."""
    match = ABBR_ANYWHERE_RE.search(document.raw)
    if match:
        return _canonical(match.group(1), match.group(2))
    return None


def reference_from_clock(clock: Clock = datetime.now):
    """Fábrica: último recurso, usa o mês/ano atuais do relógio injetado."""

    def reference_from_clock(document: DocumentText) -> Reference:
        now = clock()
        return month_name(now.month), now.year

    return reference_from_clock


def reference_cascade(clock: Clock = datetime.now) -> FieldCascade:
    return FieldCascade(
        "reference",
        [
            reference_from_tabular_header,
            reference_from_referente_phrase,
            reference_from_month_name,
            reference_from_abbreviation,
            reference_from_clock(clock),
        ],
        default=("", 0),
    )
