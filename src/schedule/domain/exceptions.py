"""
Исключения для домена Schedule.

Политика: дефект восстанавливается в наименьшей области, сохраняющей остальной ввод:
строка/запись для ошибок парсинга, документ для ошибок загрузки.
Ошибкой уровня движка становится только полное отсутствие пригодных документов.
"""


class ScheduleError(Exception):
    """Базовое исключение для ошибок домена Schedule."""

    def __init__(self, message: str, component: str = None, original_error: Exception = None):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"Schedule Error: {self.message}"
        if self.component:
            msg += f" (Component: {self.component})"
        if self.original_error:
            msg += f" [Original: {type(self.original_error).__name__}: {str(self.original_error)}]"
        return msg


class FragmentExtractionError(ScheduleError):
    """Не удалось извлечь фрагменты текста из документа. Документ исключается из слияния."""
    pass


class DocumentDiscoveryError(ScheduleError):
    """Не удалось получить или разобрать страницу со списком документов."""
    pass


class DocumentFetchError(ScheduleError):
    """Не удалось скачать документ."""
    pass


class UnparseableTimeError(ScheduleError):
    """Токен времени не распознан. Локальная ошибка: время службы = None."""
    pass


class UnparseableDateError(ScheduleError):
    """Дата не распознана. Локальная ошибка: контекст даты сбрасывается."""
    pass


class NoValidDocumentsError(ScheduleError):
    """Ни один документ не дал результата. Предыдущий снапшот остаётся в силе."""
    pass


class PartialRefreshFailure(ScheduleError):
    """Один из нескольких документов не обработан. Не выбрасывается, записывается в статус."""
    pass


class RulesConfigurationError(ScheduleError):
    """Ошибка конфигурации таблиц правил (YAML)."""
    pass
