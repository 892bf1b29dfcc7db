from datetime import date

from django.core.management.base import BaseCommand
from django.db import transaction
from library.models import Author, Book, Editor, Job, Review, Serie, Tag

class Command(BaseCommand):
    help = "Seeds the database with a small comics catalogue"

    def handle(self, *args, **kwargs):
        self.stdout.write(self.style.WARNING('Deleting old data...'))
        with transaction.atomic():
            # Books cascade to authorships, editions and reviews
            Book.objects.all().delete()
            Author.objects.all().delete()
            Editor.objects.all().delete()
            Job.objects.all().delete()
            Serie.objects.all().delete()
            Tag.objects.all().delete()

            self.stdout.write(self.style.SUCCESS('Creating authors, editors and jobs...'))

            # 1. Shared references
            moore = Author.objects.create(firstname='Alan', lastname='Moore')
            gibbons = Author.objects.create(firstname='Dave', lastname='Gibbons')
            lloyd = Author.objects.create(firstname='David', lastname='Lloyd')
            gaiman = Author.objects.create(firstname='Neil', lastname='Gaiman')

            writer = Job.objects.create(translation_key='Writer')
            artist = Job.objects.create(translation_key='Artist')
            colorist = Job.objects.create(translation_key='Colorist')

            dc = Editor.objects.create(name='DC Comics')
            vertigo = Editor.objects.create(name='Vertigo')

            graphic_novel = Tag.objects.create(name='graphic novel')
            dystopia = Tag.objects.create(name='dystopia')
            fantasy = Tag.objects.create(name='fantasy')

            sandman = Serie.objects.create(name='The Sandman')

            # 2. Books, composed through the aggregate
            books = []

            watchmen = (
                Book(title='Watchmen', description='graphic novel', index_in_serie=1)
                .add_author(moore, writer)
                .add_author(gibbons, artist)
                .add_author(gibbons, colorist)
                .add_editor(dc, date(1986, 9, 1), isbn='0-930289-23-4')
                .add_tag(graphic_novel)
                .add_tag(dystopia)
            )
            books.append(watchmen)

            vendetta = (
                Book(title='V for Vendetta', description='graphic novel')
                .add_author(moore, writer)
                .add_author(lloyd, artist)
                .add_editor(vertigo, date(1988, 9, 1), collection='Vertigo Classics')
                .add_tag(graphic_novel)
                .add_tag(dystopia)
            )
            books.append(vendetta)

            titles = ['Preludes & Nocturnes', "The Doll's House", 'Dream Country']
            for index, title in enumerate(titles, start=1):
                book = (
                    Book(title=title, index_in_serie=index)
                    .set_serie(sandman)
                    .add_author(gaiman, writer)
                    .add_editor(vertigo, date(1988 + index, 1, 1), collection='The Sandman')
                    .add_tag(fantasy)
                )
                books.append(book)

            for book in books:
                book.save()

            self.stdout.write(self.style.SUCCESS(f'Created {len(books)} books.'))

            # 3. Reviews
            watchmen.add_review(Review(body='Who watches the watchmen?', rating=5, author='testuser1'))
            watchmen.add_review(Review(body='Dense but rewarding.', rating=4, author='testuser2'))
            watchmen.save()

        self.stdout.write(self.style.SUCCESS('Successfully seeded database!'))
