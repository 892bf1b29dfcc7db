# Shared pytest fixtures for the library demo tests.

from datetime import date

import pytest
from django.core.cache import cache

from library.models import Author, Book, Editor, Job, Serie, Tag


@pytest.fixture(autouse=True)
def clear_cache():
    """The HTTP client demo caches remote payloads in the default cache."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def moore() -> Author:
    """An unsaved author."""
    return Author(firstname='Alan', lastname='Moore')


@pytest.fixture
def writer() -> Job:
    return Job(translation_key='Writer')


@pytest.fixture
def artist() -> Job:
    return Job(translation_key='Artist')


@pytest.fixture
def dc() -> Editor:
    return Editor(name='DC Comics')


@pytest.fixture
def watchmen() -> Book:
    return Book(title='Watchmen', description='graphic novel', index_in_serie=1)


@pytest.fixture
def saved_refs(db):
    """Persisted authors, jobs, editors and tags keyed by a short name."""
    return {
        'moore': Author.objects.create(firstname='Alan', lastname='Moore'),
        'gibbons': Author.objects.create(firstname='Dave', lastname='Gibbons'),
        'writer': Job.objects.create(translation_key='Writer'),
        'artist': Job.objects.create(translation_key='Artist'),
        'dc': Editor.objects.create(name='DC Comics'),
        'vertigo': Editor.objects.create(name='Vertigo'),
        'graphic_novel': Tag.objects.create(name='graphic novel'),
        'dystopia': Tag.objects.create(name='dystopia'),
        'sandman': Serie.objects.create(name='The Sandman'),
    }


@pytest.fixture
def saved_watchmen(saved_refs) -> Book:
    """Watchmen persisted with two authorships, one edition and one tag."""
    book = (
        Book(title='Watchmen', description='graphic novel', index_in_serie=1)
        .add_author(saved_refs['moore'], saved_refs['writer'])
        .add_author(saved_refs['gibbons'], saved_refs['artist'])
        .add_editor(saved_refs['dc'], date(1986, 9, 1), isbn='0-930289-23-4')
        .add_tag(saved_refs['graphic_novel'])
    )
    book.save()
    return book


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username='reader', password='secret-password')


@pytest.fixture
def user_client(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def staff_client(client, django_user_model):
    staff = django_user_model.objects.create_user(
        username='librarian', password='secret-password', is_staff=True
    )
    client.force_login(staff)
    return client
