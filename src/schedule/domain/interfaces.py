"""
Интерфейсы (абстрактные классы) для домена Schedule.

Домен Schedule потребляет два внешних сервиса:
1. Извлечение фрагментов текста из документа (PDF декодер)
2. Поиск документов-источников (страница со списком)
"""

from abc import ABC, abstractmethod
from typing import List

from contracts.d1_fragments_dto import DocumentLocator, PageFragments


class IFragmentSource(ABC):
    """Интерфейс для извлечения фрагментов текста (внешний декодер документов)."""

    @abstractmethod
    def extract(self, locator: DocumentLocator) -> List[PageFragments]:
        """
        Извлекает фрагменты текста из документа.

        Args:
            locator: Адрес документа

        Returns:
            Фрагменты по страницам в порядке страниц

        Raises:
            FragmentExtractionError: документ не удалось получить или декодировать
        """
        pass


class IDocumentDiscovery(ABC):
    """Интерфейс для поиска документов-источников."""

    @abstractmethod
    def discover(self) -> List[DocumentLocator]:
        """
        Находит кандидатов в документы-источники.

        Returns:
            Список адресов (с заявленной датой окончания, если есть)

        Raises:
            DocumentDiscoveryError: страница недоступна или не разобрана
        """
        pass
