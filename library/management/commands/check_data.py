from django.core.management.base import BaseCommand
from library.models import (
    Author,
    Book,
    Editor,
    Job,
    ProjectBookCreation,
    ProjectBookEdition,
    Review,
    Serie,
    Tag,
)


class Command(BaseCommand):
    help = "Check data counts in the database"

    def handle(self, *args, **options):
        counts = [
            ('Books', Book.objects.count()),
            ('Authors', Author.objects.count()),
            ('Editors', Editor.objects.count()),
            ('Jobs', Job.objects.count()),
            ('Series', Serie.objects.count()),
            ('Tags', Tag.objects.count()),
            ('Reviews', Review.objects.count()),
            ('Authorships', ProjectBookCreation.objects.count()),
            ('Editions', ProjectBookEdition.objects.count()),
        ]

        self.stdout.write(self.style.SUCCESS('=' * 50))
        self.stdout.write(self.style.SUCCESS('Database Statistics:'))
        self.stdout.write(self.style.SUCCESS('=' * 50))
        for label, count in counts:
            self.stdout.write(f'{label}: {count}')
        self.stdout.write(self.style.SUCCESS('=' * 50))

        # Show a few sample books
        books = Book.objects.order_by('id')[:5]
        if books:
            self.stdout.write('\nSample Books (first 5):')
            for book in books:
                self.stdout.write(f'  - {book} ({len(book.get_authors())} authorships)')
