import csv

from django.core.management.base import BaseCommand
from library.models import Book


class Command(BaseCommand):
    help = 'Export books table to CSV file'

    def add_arguments(self, parser):
        parser.add_argument(
            '--output',
            type=str,
            default=None,
            help='Output CSV filename (default: stdout)',
        )

    def handle(self, *args, **options):
        output_file = options['output']

        books = Book.objects.select_related('serie').prefetch_related(
            'tags', 'creations__author', 'creations__role', 'editions__editor'
        ).order_by('id')

        fieldnames = [
            'id',
            'title',
            'description',
            'serie',
            'index_in_serie',
            'authors',
            'editors',
            'tags',
        ]

        # Write to file or stdout
        if output_file:
            file_handle = open(output_file, 'w', newline='', encoding='utf-8')
        else:
            file_handle = self.stdout

        try:
            writer = csv.DictWriter(file_handle, fieldnames=fieldnames)
            writer.writeheader()

            for book in books:
                writer.writerow({
                    'id': book.id,
                    'title': book.title,
                    'description': book.description or '',
                    'serie': book.serie.name if book.serie else '',
                    'index_in_serie': '' if book.index_in_serie is None else book.index_in_serie,
                    'authors': '; '.join(str(creation) for creation in book.get_authors()),
                    'editors': '; '.join(str(edition) for edition in book.get_editors()),
                    'tags': '; '.join(tag.name for tag in book.get_tags()),
                })
        finally:
            if output_file:
                file_handle.close()
                self.stdout.write(
                    self.style.SUCCESS(
                        f'Successfully exported {books.count()} books to {output_file}'
                    )
                )
            else:
                # When writing to stdout, write success message to stderr so it doesn't interfere with CSV
                self.stderr.write(f'Successfully exported {books.count()} books')
