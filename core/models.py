from dataclasses import dataclass, field, fields
from typing import List, Optional

from extractors.utils import is_canonical_month, normalize_month, safe_number, split_lines


@dataclass(frozen=True)
class DocumentText:
    """
    Texto de uma fatura pronto para as estratégias de extração.

    Construído uma única vez por chamada de extração e compartilhado por
    todos os extratores de campo (que não o modificam).

    Attributes:
        raw (str): Texto bruto como veio da conversão PDF -> texto.
        lines (List[str]): Linhas não vazias, sem espaços nas pontas,
            na ordem original. A posição é usada como heurística de
            localidade (ex: o nome costuma estar perto do rótulo do cliente).
    """
    raw: str
    lines: List[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, text: Optional[str]) -> "DocumentText":
        """Normaliza o texto bruto em linhas."""
        text = text or ""
        return cls(raw=text, lines=split_lines(text))

    def head(self, count: int) -> List[str]:
        """Primeiras ``count`` linhas (região do cabeçalho)."""
        return self.lines[:count]


# Nome do atributo Python -> chave do contrato público
_PUBLIC_KEYS = {
    "client_number": "clientNumber",
    "installation_number": "installationNumber",
    "client_name": "clientName",
    "reference_month": "referenceMonth",
    "reference_year": "referenceYear",
    "energy_electric_kwh": "energyElectricKwh",
    "energy_electric_value": "energyElectricValue",
    "energy_sceee_kwh": "energySCEEEKwh",
    "energy_sceee_value": "energySCEEEValue",
    "energy_compensated_kwh": "energyCompensatedKwh",
    "energy_compensated_value": "energyCompensatedValue",
    "public_lighting_value": "publicLightingValue",
    "total_value": "totalValue",
    "emission_date": "emissionDate",
    "due_date": "dueDate",
    "current_reading_date": "currentReadingDate",
    "previous_reading_date": "previousReadingDate",
    "next_reading_date": "nextReadingDate",
}

# Campos que representam créditos (sempre <= 0)
CREDIT_FIELDS = ("energy_compensated_value",)

STRING_FIELDS = (
    "client_number",
    "installation_number",
    "client_name",
    "emission_date",
    "due_date",
    "current_reading_date",
    "previous_reading_date",
    "next_reading_date",
)


@dataclass
class ExtractedBillRecord:
    """
    Registro normalizado de uma fatura de energia.

    Todos os campos são opcionais/com default porque a extração é
    best-effort: um registro quase todo zerado é um resultado válido
    (de baixa confiança), não um erro.

    Attributes:
        # Identificação
        client_number (str): Nº do cliente na distribuidora.
        installation_number (str): Nº da instalação (medidor).
        client_name (str): Nome/razão social do titular.

        # Período
        reference_month (str): Nome canônico do mês em português (ex: "Setembro").
        reference_year (int): Ano de referência (0 = desconhecido).

        # Consumo e valores
        energy_electric_kwh (float): Consumo de energia elétrica (kWh).
        energy_electric_value (float): Valor da energia elétrica (R$).
        energy_sceee_kwh (float): Quantidade da energia SCEEE (kWh).
        energy_sceee_value (float): Valor da energia SCEEE (R$).
        energy_compensated_kwh (float): Energia compensada GD (kWh).
        energy_compensated_value (float): Crédito da energia compensada (R$).
            Registrado como valor negativo, pois abate o consumo.
        public_lighting_value (float): Contribuição de iluminação pública (R$).
        total_value (float): Valor a pagar (R$).

        # Datas (dd/mm/yyyy ou dd/mm)
        emission_date (str): Data de emissão.
        due_date (str): Data de vencimento.
        current_reading_date (str): Leitura atual.
        previous_reading_date (str): Leitura anterior.
        next_reading_date (str): Próxima leitura.
    """
    client_number: str = ""
    installation_number: str = ""
    client_name: str = ""

    reference_month: str = ""
    reference_year: int = 0

    energy_electric_kwh: float = 0.0
    energy_electric_value: float = 0.0
    energy_sceee_kwh: float = 0.0
    energy_sceee_value: float = 0.0
    energy_compensated_kwh: float = 0.0
    energy_compensated_value: float = 0.0
    public_lighting_value: float = 0.0
    total_value: float = 0.0

    emission_date: str = ""
    due_date: str = ""
    current_reading_date: str = ""
    previous_reading_date: str = ""
    next_reading_date: str = ""

    @classmethod
    def numeric_fields(cls) -> List[str]:
        """Nomes dos campos monetários/de consumo (float)."""
        return [f.name for f in fields(cls) if f.type in (float, "float")]

    def is_missing(self, name: str) -> bool:
        """True se o campo está no seu valor default (vazio ou zero)."""
        value = getattr(self, name)
        return value in ("", 0, 0.0, None)

    def to_dict(self) -> dict:
        """
        Converte para o contrato público (chaves camelCase).

        Returns:
            dict: Ex: ``{"clientNumber": "3001116735", "referenceMonth": "Janeiro", ...}``
        """
        return {public: getattr(self, attr) for attr, public in _PUBLIC_KEYS.items()}

    def ensure_coverage(self) -> "ExtractedBillRecord":
        """
        Garante os invariantes do registro, alterando-o no lugar.

        - campos numéricos finitos; créditos <= 0 e os demais >= 0
        - strings sem ``None`` e sem espaços nas pontas
        - ano inteiro (0 = desconhecido)
        - mês canônico ou vazio
        """
        for name in self.numeric_fields():
            value = abs(safe_number(getattr(self, name)))
            if name in CREDIT_FIELDS and value:
                value = -value
            setattr(self, name, value)

        for name in STRING_FIELDS:
            value = getattr(self, name)
            setattr(self, name, "" if value is None else str(value).strip())

        try:
            self.reference_year = int(self.reference_year or 0)
        except (TypeError, ValueError):
            self.reference_year = 0

        month = normalize_month(self.reference_month or "")
        self.reference_month = month if is_canonical_month(month) else ""
        return self
