from django import forms

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


class BookForm(forms.ModelForm):
    """
    Scalar fields of a book. Authors and editors are not form fields: they go
    through the Book aggregate so de-duplication always applies. Tags are only
    validated here and applied with Book.set_tags().
    """

    tags = forms.ModelMultipleChoiceField(queryset=Tag.objects.all(), required=False)

    class Meta:
        model = Book
        fields = ('title', 'description', 'index_in_serie', 'serie')


class CreationForm(forms.ModelForm):
    class Meta:
        model = ProjectBookCreation
        fields = ('author', 'role')


class EditionForm(forms.ModelForm):
    class Meta:
        model = ProjectBookEdition
        fields = ('editor', 'publication_date', 'isbn', 'collection')


class BookCreationForm(CreationForm):
    """
    Authorship record posted on its own. The book is not a model field of the
    form: duplicates are absorbed by the Book aggregate, not reported.
    """

    book = forms.ModelChoiceField(queryset=Book.objects.all())


class BookEditionForm(EditionForm):
    book = forms.ModelChoiceField(queryset=Book.objects.all())


class AuthorForm(forms.ModelForm):
    class Meta:
        model = Author
        fields = ('firstname', 'lastname')


class EditorForm(forms.ModelForm):
    class Meta:
        model = Editor
        fields = ('name',)


class JobForm(forms.ModelForm):
    class Meta:
        model = Job
        fields = ('translation_key',)


class SerieForm(forms.ModelForm):
    class Meta:
        model = Serie
        fields = ('name',)


class TagForm(forms.ModelForm):
    class Meta:
        model = Tag
        fields = ('name',)


class ReviewForm(forms.ModelForm):
    class Meta:
        model = Review
        fields = ('book', 'body', 'rating', 'author')


def form_errors(form):
    """Field-level messages of a bound form, JSON friendly."""
    return {
        field: [error['message'] for error in errors]
        for field, errors in form.errors.get_json_data().items()
    }
