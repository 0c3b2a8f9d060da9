"""
Schedule Merger - Слияние результатов нескольких документов.

ЦКП: MergedSchedule без дубликатов по (date, time, title, choir).

- Записи конкатенируются в порядке документов
- Из дубликатов остаётся первое вхождение
- validity_end_date = максимум по документам (отсутствующие не учитываются)
"""

from typing import Iterable, List

from loguru import logger

from contracts.d2_schedule_dto import DocumentParseResult, MergedSchedule, ServiceRecord


class ScheduleMerger:
    """Объединяет DocumentParseResult в одно расписание."""

    def merge(self, results: Iterable[DocumentParseResult]) -> MergedSchedule:
        results = list(results)
        records: List[ServiceRecord] = []
        seen = set()
        duplicates = 0

        for result in results:
            for record in result.records:
                if record.key in seen:
                    duplicates += 1
                    continue
                seen.add(record.key)
                records.append(record)

        end_dates = [r.validity_end_date for r in results if r.validity_end_date is not None]

        logger.debug(
            f"[ScheduleMerger] {len(results)} документов -> {len(records)} служб "
            f"(дубликатов: {duplicates})"
        )

        return MergedSchedule(
            records=tuple(records),
            validity_end_date=max(end_dates) if end_dates else None,
            sources=tuple(r.source for r in results),
        )
