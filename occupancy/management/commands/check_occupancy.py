"""
Management command to report bed/tenant inconsistencies.
Reports only; nothing is repaired.
"""
from django.core.management.base import BaseCommand, CommandError

from occupancy.services import OccupancyService
from properties.models import Property


class Command(BaseCommand):
    help = 'Check that bed statuses agree with active tenants for every property'

    def add_arguments(self, parser):
        parser.add_argument(
            '--property',
            type=int,
            dest='property_id',
            help='Only check this property ID'
        )

    def handle(self, *args, **options):
        properties = Property.objects.all()
        if options.get('property_id'):
            properties = properties.filter(id=options['property_id'])
            if not properties.exists():
                raise CommandError(f'Property {options["property_id"]} not found')

        service = OccupancyService()
        total_problems = 0

        for property_obj in properties:
            problems = service.check(property_obj)
            if not problems:
                self.stdout.write(self.style.SUCCESS(f'{property_obj.name}: OK'))
                continue

            total_problems += len(problems)
            self.stdout.write(self.style.ERROR(f'{property_obj.name}: {len(problems)} problem(s)'))
            for problem in problems:
                self.stdout.write(f'  - {problem}')

        if total_problems:
            raise CommandError(f'{total_problems} occupancy problem(s) found')

        self.stdout.write(self.style.SUCCESS('All properties consistent'))
