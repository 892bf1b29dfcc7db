from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models, transaction
from django.utils.functional import cached_property

from .aggregates import OwnedCollection


class FootprintMixin:
    """
    Equality for entities that may not be persisted yet.

    Two objects match when both have a primary key and the keys are equal.
    When either key is missing, their display strings (footprints) are compared
    instead, so two unsaved homonyms are considered the same object.
    """

    def matches(self, other):
        if other is None:
            return False
        if self.pk is not None and other.pk is not None:
            return self.pk == other.pk
        return str(self) == str(other)


class Author(FootprintMixin, models.Model):
    firstname = models.CharField(max_length=255, blank=True)
    lastname = models.CharField(max_length=255)

    class Meta:
        ordering = ['lastname', 'firstname']

    def __str__(self):
        return f"{self.firstname} {self.lastname}".strip()


class Editor(FootprintMixin, models.Model):
    name = models.CharField(max_length=255)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Job(FootprintMixin, models.Model):
    translation_key = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['translation_key']

    def __str__(self):
        return self.translation_key


class Serie(models.Model):
    name = models.CharField(max_length=512)

    def __str__(self):
        return self.name


class Tag(models.Model):
    name = models.CharField(max_length=255, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Book(models.Model):
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, null=True)
    index_in_serie = models.IntegerField(blank=True, null=True, db_column='index_in_serie')
    serie = models.ForeignKey(
        Serie, on_delete=models.SET_NULL, null=True, blank=True, related_name='books'
    )
    tags = models.ManyToManyField(Tag, related_name='books', blank=True)

    # In-memory collections, see the aggregate methods below
    AGGREGATE_CACHE = ('authors', 'editors', 'reviews', 'staged_tags')

    def __str__(self):
        """
        Footprint of the book, also used as the label of admin select boxes.
        """
        footprint = self.title or ''
        if self.description:
            footprint += f", {self.description}"
        if self.index_in_serie is not None:
            footprint += f", #{self.index_in_serie}"
        return footprint

    # --- Aggregate collections ---

    @cached_property
    def authors(self):
        return OwnedCollection(
            self,
            'book',
            'creations',
            matches=ProjectBookCreation.matches,
            select_related=('author', 'role'),
        )

    @cached_property
    def editors(self):
        return OwnedCollection(
            self,
            'book',
            'editions',
            matches=ProjectBookEdition.matches,
            select_related=('editor',),
        )

    @cached_property
    def reviews(self):
        return OwnedCollection(self, 'book', 'book_reviews')

    @cached_property
    def staged_tags(self):
        return list(self.tags.all()) if self.pk is not None else []

    # --- Authors ---

    def get_authors(self):
        return self.authors

    def add_authors(self, project):
        self.authors.add(project)
        return self

    def add_author(self, author, job):
        project = ProjectBookCreation(book=self, author=author, role=job)
        return self.add_authors(project)

    def set_authors(self, projects):
        self.authors.replace(projects)
        return self

    def has_project_book_creation(self, project):
        return self.authors.find(project) is not None

    # --- Editors ---

    def get_editors(self):
        return self.editors

    def add_editors(self, project):
        self.editors.add(project)
        return self

    def add_editor(self, editor, date, isbn=None, collection=None):
        project = ProjectBookEdition(
            book=self,
            editor=editor,
            publication_date=date,
            isbn=isbn,
            collection=collection,
        )
        return self.add_editors(project)

    def set_editors(self, projects):
        self.editors.replace(projects)
        return self

    def has_project_book_edition(self, project):
        return self.editors.find(project) is not None

    # --- Reviews, tags and serie ---

    def get_reviews(self):
        return self.reviews

    def add_review(self, review):
        self.reviews.add(review)
        return self

    def set_reviews(self, reviews):
        self.reviews.replace(reviews)
        return self

    def get_tags(self):
        return list(self.staged_tags)

    def add_tag(self, tag):
        self.staged_tags.append(tag)
        return self

    def set_tags(self, tags):
        self.staged_tags[:] = list(tags)
        return self

    def set_serie(self, serie):
        self.serie = serie
        return self

    # --- Persistence ---

    def save(self, *args, **kwargs):
        with transaction.atomic():
            if self.serie is not None and self.serie.pk is None:
                self.serie.save()
            super().save(*args, **kwargs)

            cache = self.__dict__
            if 'authors' in cache:
                self.authors.flush(references=('author', 'role'))
            if 'editors' in cache:
                self.editors.flush(references=('editor',))
            if 'reviews' in cache:
                self.reviews.flush()
            if 'staged_tags' in cache:
                saved = {tag.name: tag for tag in self.staged_tags if tag.pk is not None}
                for index, tag in enumerate(self.staged_tags):
                    if tag.pk is None:
                        if tag.name not in saved:
                            tag.save()
                            saved[tag.name] = tag
                        self.staged_tags[index] = saved[tag.name]
                self.tags.set(self.staged_tags)

    def refresh_from_db(self, using=None, fields=None, **kwargs):
        super().refresh_from_db(using=using, fields=fields, **kwargs)
        if fields is None:
            for name in self.AGGREGATE_CACHE:
                self.__dict__.pop(name, None)


class ProjectBookCreation(models.Model):
    """An author working on a book in a given role (writer, illustrator...)."""

    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name='creations')
    author = models.ForeignKey(Author, on_delete=models.CASCADE, related_name='creations')
    role = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='creations')

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=['book', 'author', 'role'], name='unique_book_author_role'
            ),
        ]

    def __str__(self):
        return f"{self.author} ({self.role})"

    def matches(self, other):
        return self.author.matches(other.author) and self.role.matches(other.role)


class ProjectBookEdition(models.Model):
    """A publication of a book by an editor."""

    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name='editions')
    editor = models.ForeignKey(Editor, on_delete=models.CASCADE, related_name='editions')
    publication_date = models.DateField()
    isbn = models.CharField(max_length=20, blank=True, null=True)
    collection = models.CharField(max_length=255, blank=True, null=True)

    def __str__(self):
        date = self.publication_date.isoformat() if self.publication_date else None
        parts = [str(self.editor), date, self.collection, self.isbn]
        return ', '.join(part for part in parts if part)

    def matches(self, other):
        if self.editor.pk is not None and other.editor.pk is not None:
            return self.editor.pk == other.editor.pk
        return str(self) == str(other)


class Review(models.Model):
    book = models.ForeignKey(Book, on_delete=models.CASCADE, related_name='book_reviews')
    body = models.TextField()
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(5)]
    )
    author = models.CharField(max_length=255)
    publication_date = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-publication_date']
        indexes = [
            models.Index(fields=['book', 'rating'], name='review_book_rating_idx'),
        ]

    def __str__(self):
        return f"Review of {self.book} by {self.author}"
