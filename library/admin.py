from django.contrib import admin
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


class CreationInline(admin.TabularInline):
    model = ProjectBookCreation
    extra = 1


class EditionInline(admin.TabularInline):
    model = ProjectBookEdition
    extra = 1


@admin.register(Book)
class BookAdmin(admin.ModelAdmin):
    list_display = ('title', 'description', 'serie', 'index_in_serie')
    list_filter = ('serie', 'tags')
    search_fields = ('title', 'description')
    filter_horizontal = ('tags',)
    inlines = (CreationInline, EditionInline)

    def save_formset(self, request, form, formset, change):
        """New authorship and edition records go through the Book aggregate."""
        collections = {
            ProjectBookCreation: form.instance.add_authors,
            ProjectBookEdition: form.instance.add_editors,
        }
        add = collections.get(formset.model)
        if add is None:
            return super().save_formset(request, form, formset, change)

        records = formset.save(commit=False)
        for obj in formset.deleted_objects:
            obj.delete()
        for record in records:
            if record.pk is None:
                add(record)
            else:
                record.save()
        form.instance.save()


@admin.register(Author)
class AuthorAdmin(admin.ModelAdmin):
    list_display = ('lastname', 'firstname')
    search_fields = ('firstname', 'lastname')


@admin.register(Editor)
class EditorAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)


@admin.register(Job)
class JobAdmin(admin.ModelAdmin):
    list_display = ('translation_key',)


@admin.register(Serie)
class SerieAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)


@admin.register(Tag)
class TagAdmin(admin.ModelAdmin):
    list_display = ('name',)
    search_fields = ('name',)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('book', 'author', 'rating', 'publication_date')
    list_filter = ('rating', 'publication_date')
