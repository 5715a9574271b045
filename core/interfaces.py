from abc import ABC, abstractmethod
from core.exceptions import ConversionError

class TextExtractionStrategy(ABC):
    """
    Contrato (Interface) para qualquer motor de leitura de PDFs.
    
    Define como as estratégias de leitura (PDF Nativo, OCR, etc.) devem se comportar.
    O motor de extração trata a ordem e os espaços do texto retornado como
    autoritativos: nenhuma informação de posição (x/y) é usada.
    """
    
    @abstractmethod
    def extract(self, pdf_bytes: bytes) -> str:
        """
        Extrai o texto bruto de um PDF em memória.

        Args:
            pdf_bytes (bytes): Conteúdo binário do arquivo PDF.

        Returns:
            str: O texto extraído do documento inteiro (string vazia se
                a estratégia não conseguiu ler).

        Raises:
            ConversionError: Se houver falha crítica na leitura do arquivo.
        """
        pass
