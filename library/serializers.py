"""
Plain dict representations of the library entities for the JSON API.

Nested objects are rendered one level deep only. Authorship and edition
records never render their book, to avoid a circular reference.
"""


def author_to_dict(author):
    return {
        'id': author.pk,
        'firstname': author.firstname,
        'lastname': author.lastname,
        'label': str(author),
    }


def editor_to_dict(editor):
    return {'id': editor.pk, 'name': editor.name}


def job_to_dict(job):
    return {'id': job.pk, 'translation_key': job.translation_key}


def serie_to_dict(serie):
    return {'id': serie.pk, 'name': serie.name}


def tag_to_dict(tag):
    return {'id': tag.pk, 'name': tag.name}


def review_to_dict(review):
    return {
        'id': review.pk,
        'book': review.book_id,
        'body': review.body,
        'rating': review.rating,
        'author': review.author,
        'publication_date': review.publication_date.isoformat() if review.publication_date else None,
    }


def creation_to_dict(creation):
    return {
        'id': creation.pk,
        'author': author_to_dict(creation.author),
        'role': job_to_dict(creation.role),
    }


def edition_to_dict(edition):
    return {
        'id': edition.pk,
        'editor': editor_to_dict(edition.editor),
        'publication_date': edition.publication_date.isoformat() if edition.publication_date else None,
        'isbn': edition.isbn,
        'collection': edition.collection,
    }


def book_to_dict(book):
    return {
        'id': book.pk,
        'title': book.title,
        'description': book.description,
        'index_in_serie': book.index_in_serie,
        'label': str(book),
        'serie': serie_to_dict(book.serie) if book.serie else None,
        'tags': [tag_to_dict(tag) for tag in book.get_tags()],
        'authors': [creation_to_dict(creation) for creation in book.get_authors()],
        'editors': [edition_to_dict(edition) for edition in book.get_editors()],
        'reviews': [review.pk for review in book.get_reviews()],
    }
