"""
Management command para ver el resumen mensual de un refrigerador

Uso:
    python manage.py resumen_mensual <owner_id> --year 2025 --month 6
"""

from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone
from google.api_core.exceptions import GoogleAPICallError

from apps.lecturas.aggregation import summarize_readings
from apps.lecturas.exceptions import ReadingValidationError
from apps.lecturas.services import fetch_month_readings


def _fmt(value):
    return 'N/A' if value is None else f'{value}°C'


class Command(BaseCommand):
    help = 'Muestra los agregados diarios y el resumen de mañana/tarde de un mes'

    def add_arguments(self, parser):
        today = timezone.localdate()
        parser.add_argument('owner_id', help='UID del dueño de las lecturas')
        parser.add_argument('--year', type=int, default=today.year)
        parser.add_argument('--month', type=int, default=today.month)

    def handle(self, *args, **options):
        owner_id = options['owner_id']
        year, month = options['year'], options['month']

        try:
            readings = fetch_month_readings(owner_id, year, month)
        except ReadingValidationError as e:
            raise CommandError(str(e))
        except (GoogleAPICallError, RuntimeError) as e:
            raise CommandError(f'Error al obtener lecturas: {str(e)}')

        summary = summarize_readings(readings)

        self.stdout.write(
            self.style.SUCCESS(f'📊 {owner_id} - {year}-{month:02d}: {len(readings)} lecturas')
        )

        for day in summary['dias']:
            self.stdout.write(
                f'  {day.date.isoformat()}  '
                f'mañana {_fmt(day.morning.mean)} ({_fmt(day.morning.min)} / {_fmt(day.morning.max)})  '
                f'tarde {_fmt(day.evening.mean)} ({_fmt(day.evening.min)} / {_fmt(day.evening.max)})'
            )

        for label, stats in (('Mañana', summary['morning']), ('Tarde', summary['evening'])):
            self.stdout.write(
                f'{label}: promedio {_fmt(stats.average)}, mínima {_fmt(stats.min)}, '
                f'máxima {_fmt(stats.max)}, días con lecturas: {stats.count}'
            )
