"""
JSON resource API.

Every entity is exposed at a collection endpoint and an item endpoint. The
wiring is plain configuration: a Resource per entity names its form (the
validation layer), its serializer and one permission gate per operation.
"""
import json
import logging

from django.conf import settings
from django.core.paginator import Paginator
from django.db import transaction
from django.forms.models import model_to_dict
from django.http import HttpResponse, HttpResponseNotAllowed, JsonResponse
from django.middleware.csrf import CsrfViewMiddleware
from django.urls import reverse
from django.views.decorators.csrf import csrf_exempt

from . import serializers
from .forms import (
    AuthorForm,
    BookCreationForm,
    BookEditionForm,
    BookForm,
    CreationForm,
    EditionForm,
    EditorForm,
    JobForm,
    ReviewForm,
    SerieForm,
    TagForm,
    form_errors,
)
from .models import (
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

logger = logging.getLogger(__name__)

COLLECTION_METHODS = {'GET': 'list', 'POST': 'create'}
ITEM_METHODS = {'GET': 'retrieve', 'PUT': 'update', 'DELETE': 'delete'}
WRITE_OPERATIONS = ('create', 'update', 'delete')

# Everything book_to_dict reads, fetched once per page
BOOK_PREFETCH = (
    'tags',
    'creations__author',
    'creations__role',
    'editions__editor',
    'book_reviews',
)


class PayloadError(Exception):
    def __init__(self, errors):
        super().__init__(errors)
        self.errors = errors


def is_authenticated(user):
    return user.is_authenticated


def is_staff(user):
    return user.is_authenticated and user.is_staff


def save_form(form, payload):
    return form.save(), True


class Resource:
    """Configuration of one entity exposed through the API."""

    def __init__(self, model, form_class, serialize, label, operations=None, gates=None,
                 filters=None, ordering=(), select_related=(), prefetch_related=(),
                 save=save_form):
        self.model = model
        self.form_class = form_class
        self.serialize = serialize
        self.label = label
        self.operations = operations or ('list', 'create', 'retrieve', 'update', 'delete')
        self.filters = filters or {}
        self.ordering = ordering
        self.select_related = select_related
        self.prefetch_related = prefetch_related
        self.save = save

        self.gates = {
            'create': (is_authenticated, f"Only authenticated users can add {label}."),
            'update': (is_authenticated, f"Only authenticated users can modify {label}."),
            'delete': (is_authenticated, f"Only authenticated users can delete {label}."),
        }
        self.gates.update(gates or {})

    def queryset(self):
        queryset = self.model.objects.all()
        if self.select_related:
            queryset = queryset.select_related(*self.select_related)
        if self.prefetch_related:
            queryset = queryset.prefetch_related(*self.prefetch_related)
        return queryset

    def check(self, operation, user):
        """Return the denial message, or None when `user` may run `operation`."""
        gate = self.gates.get(operation)
        if gate is None:
            return None
        predicate, message = gate
        return None if predicate(user) else message


# --- Save hooks going through the Book aggregate ---

def _bind_records(form_class, items, errors, key):
    if not isinstance(items, list):
        errors[key] = ['Expected a list.']
        return []

    records = []
    item_errors = {}
    for index, item in enumerate(items):
        form = form_class(data=item if isinstance(item, dict) else {})
        if form.is_valid():
            records.append(form.save(commit=False))
        else:
            item_errors[str(index)] = form_errors(form)
    if item_errors:
        errors[key] = item_errors
    return records


def save_book(form, payload):
    book = form.save(commit=False)

    errors = {}
    authors = editors = None
    if 'authors' in payload:
        authors = _bind_records(CreationForm, payload['authors'], errors, 'authors')
    if 'editors' in payload:
        editors = _bind_records(EditionForm, payload['editors'], errors, 'editors')
    if errors:
        raise PayloadError(errors)

    created = book.pk is None
    if authors is not None:
        book.set_authors(authors)
    if editors is not None:
        book.set_editors(editors)
    if 'tags' in payload:
        book.set_tags(form.cleaned_data['tags'])
    book.save()
    return book, created


def save_creation(form, payload):
    book = form.cleaned_data['book']
    record = form.save(commit=False)
    existing = book.get_authors().find(record)
    if existing is not None:
        return existing, False
    book.add_authors(record).save()
    return record, True


def save_edition(form, payload):
    book = form.cleaned_data['book']
    record = form.save(commit=False)
    existing = book.get_editors().find(record)
    if existing is not None:
        return existing, False
    book.add_editors(record).save()
    return record, True


def save_review(form, payload):
    review = form.save(commit=False)
    if review.pk is not None:
        review.save()
        return review, False
    review.book.add_review(review).save()
    return review, True


RESOURCES = {
    'books': Resource(
        Book, BookForm, serializers.book_to_dict, 'books',
        filters={
            'id': 'exact',
            'title': 'istartswith',
            'description': 'icontains',
            'tags.name': 'exact',
        },
        ordering=('id', 'title'),
        select_related=('serie',),
        prefetch_related=BOOK_PREFETCH,
        save=save_book,
    ),
    'authors': Resource(Author, AuthorForm, serializers.author_to_dict, 'authors'),
    'editors': Resource(Editor, EditorForm, serializers.editor_to_dict, 'editors'),
    'jobs': Resource(
        Job, JobForm, serializers.job_to_dict, 'jobs',
        gates={
            'create': (is_staff, "Only staff members can add jobs."),
            'update': (is_staff, "Only staff members can modify jobs."),
            'delete': (is_staff, "Only staff members can delete jobs."),
        },
    ),
    'series': Resource(Serie, SerieForm, serializers.serie_to_dict, 'series'),
    'tags': Resource(Tag, TagForm, serializers.tag_to_dict, 'tags'),
    'reviews': Resource(
        Review, ReviewForm, serializers.review_to_dict, 'reviews',
        select_related=('book',),
        save=save_review,
    ),
    'creations': Resource(
        ProjectBookCreation, BookCreationForm, serializers.creation_to_dict, 'authorships',
        operations=('list', 'create', 'retrieve', 'delete'),
        select_related=('author', 'role'),
        save=save_creation,
    ),
    'editions': Resource(
        ProjectBookEdition, BookEditionForm, serializers.edition_to_dict, 'editions',
        operations=('list', 'create', 'retrieve', 'delete'),
        select_related=('editor',),
        save=save_edition,
    ),
}

BOOK_RELATIONS = {
    'authors': lambda book: [serializers.creation_to_dict(c) for c in book.get_authors()],
    'editors': lambda book: [serializers.edition_to_dict(e) for e in book.get_editors()],
    'reviews': lambda book: [serializers.review_to_dict(r) for r in book.get_reviews()],
    'tags': lambda book: [serializers.tag_to_dict(t) for t in book.get_tags()],
    'serie': lambda book: serializers.serie_to_dict(book.serie) if book.serie else None,
}


# --- Helpers ---

def _error(message, status):
    return JsonResponse({'error': message}, status=status)


def _not_allowed(resource, methods):
    allowed = [method for method, operation in methods.items() if operation in resource.operations]
    return HttpResponseNotAllowed(allowed)


def _read_payload(request):
    try:
        payload = json.loads(request.body or b'{}')
    except ValueError:
        raise PayloadError({'__all__': ['Malformed JSON body.']})
    if not isinstance(payload, dict):
        raise PayloadError({'__all__': ['Expected a JSON object.']})
    return payload


def _filter(resource, queryset, params):
    for name, strategy in resource.filters.items():
        value = params.get(name)
        if value in (None, ''):
            continue
        lookup = f"{name.replace('.', '__')}__{strategy}"
        try:
            queryset = queryset.filter(**{lookup: value})
        except (TypeError, ValueError):
            raise PayloadError({name: [f"Invalid value '{value}'."]})
        if '.' in name:
            queryset = queryset.distinct()

    order_by = []
    for key, value in params.items():
        if not (key.startswith('order[') and key.endswith(']')):
            continue
        field = key[len('order['):-1]
        direction = value.lower()
        if field not in resource.ordering or direction not in ('asc', 'desc'):
            raise PayloadError({key: [f"Cannot order by '{field}' {value}."]})
        order_by.append(field if direction == 'asc' else f'-{field}')
    return queryset.order_by(*order_by, 'pk')


class CsrfCheck(CsrfViewMiddleware):
    def _reject(self, request, reason):
        return reason


def _csrf_failure(request):
    """
    The API views are csrf_exempt so the permission gates answer first.
    Writes by a session-authenticated user are then checked here, and the
    rejection reason is returned, or None when the request passes.
    """
    check = CsrfCheck(lambda r: None)
    check.process_request(request)
    return check.process_view(request, None, (), {})


def _authorize(config, operation, request):
    denied = config.check(operation, request.user)
    if denied:
        return _error(denied, 403)
    if operation in WRITE_OPERATIONS and request.user.is_authenticated:
        reason = _csrf_failure(request)
        if reason:
            logger.warning("Rejected %s on %s by %s: %s", operation, config.label, request.user, reason)
            return _error(f"CSRF Failed: {reason}", 403)
    return None


def _write(request, resource, instance=None):
    payload = _read_payload(request)
    data = payload
    if instance is not None:
        # Fields missing from the payload keep their current value
        data = model_to_dict(instance, fields=resource.form_class._meta.fields)
        data.update(payload)

    form = resource.form_class(data=data, instance=instance)
    if not form.is_valid():
        raise PayloadError(form_errors(form))

    with transaction.atomic():
        obj, created = resource.save(form, payload)
    logger.info("%s %s %s by %s", 'Created' if created else 'Saved', resource.label, obj.pk, request.user)
    return JsonResponse(resource.serialize(obj), status=201 if created else 200)


# --- Views ---

def api_entrypoint(request):
    return JsonResponse({
        name: reverse('api_collection', kwargs={'resource': name})
        for name in RESOURCES
    })


@csrf_exempt
def collection_view(request, resource):
    config = RESOURCES.get(resource)
    if config is None:
        return _error('Not found.', 404)

    operation = COLLECTION_METHODS.get(request.method)
    if operation not in config.operations:
        return _not_allowed(config, COLLECTION_METHODS)

    denied = _authorize(config, operation, request)
    if denied:
        return denied

    try:
        if operation == 'create':
            return _write(request, config)

        queryset = _filter(config, config.queryset(), request.GET)
    except PayloadError as e:
        return JsonResponse({'errors': e.errors}, status=400)

    page_size = getattr(settings, 'LIBRARY_API_PAGE_SIZE', 30)
    page = Paginator(queryset, page_size).get_page(request.GET.get('page'))
    return JsonResponse({
        'member': [config.serialize(obj) for obj in page.object_list],
        'totalItems': page.paginator.count,
        'page': page.number,
    })


@csrf_exempt
def item_view(request, resource, pk):
    config = RESOURCES.get(resource)
    if config is None:
        return _error('Not found.', 404)

    operation = ITEM_METHODS.get(request.method)
    if operation not in config.operations:
        return _not_allowed(config, ITEM_METHODS)

    denied = _authorize(config, operation, request)
    if denied:
        return denied

    try:
        obj = config.queryset().get(pk=pk)
    except config.model.DoesNotExist:
        return _error('Not found.', 404)

    if operation == 'retrieve':
        return JsonResponse(config.serialize(obj))

    if operation == 'delete':
        obj.delete()
        logger.info("Deleted %s %s by %s", config.label, pk, request.user)
        return HttpResponse(status=204)

    try:
        return _write(request, config, instance=obj)
    except PayloadError as e:
        return JsonResponse({'errors': e.errors}, status=400)


def book_subresource_view(request, pk, relation):
    if request.method != 'GET':
        return HttpResponseNotAllowed(['GET'])

    render = BOOK_RELATIONS.get(relation)
    if render is None:
        return _error('Not found.', 404)

    denied = RESOURCES['books'].check('retrieve', request.user)
    if denied:
        return _error(denied, 403)

    try:
        book = Book.objects.select_related('serie').get(pk=pk)
    except Book.DoesNotExist:
        return _error('Not found.', 404)

    return JsonResponse(render(book), safe=False)
