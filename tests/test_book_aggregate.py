# Unit tests for the Book aggregate: de-duplication, back-references and footprints.
# None of these touch the database, the aggregate works on unsaved objects.

from datetime import date

from library.models import (
    Author,
    Book,
    Editor,
    Job,
    ProjectBookCreation,
    ProjectBookEdition,
    Review,
    Tag,
)


class TestFootprint:
    """Tests for Book.__str__()."""

    def test_full_footprint(self, watchmen: Book) -> None:
        assert str(watchmen) == 'Watchmen, graphic novel, #1'

    def test_title_only(self) -> None:
        assert str(Book(title='Watchmen')) == 'Watchmen'

    def test_index_zero_is_kept(self) -> None:
        """Only a missing index is omitted, not a falsy one."""
        assert str(Book(title='Prologue', index_in_serie=0)) == 'Prologue, #0'

    def test_empty_description_is_omitted(self) -> None:
        assert str(Book(title='Watchmen', description='', index_in_serie=2)) == 'Watchmen, #2'

    def test_edition_footprint(self, watchmen: Book, dc: Editor) -> None:
        edition = ProjectBookEdition(
            editor=dc, publication_date=date(1986, 9, 1), collection='Absolute', isbn='123'
        )
        assert str(edition) == 'DC Comics, 1986-09-01, Absolute, 123'

    def test_creation_footprint(self, moore: Author, writer: Job) -> None:
        assert str(ProjectBookCreation(author=moore, role=writer)) == 'Alan Moore (Writer)'


class TestAddAuthor:
    """Tests for Book.add_author() and Book.add_authors()."""

    def test_same_author_and_job_twice(self, watchmen: Book, moore: Author, writer: Job) -> None:
        watchmen.add_author(moore, writer)
        watchmen.add_author(moore, writer)
        assert len(watchmen.get_authors()) == 1

    def test_same_author_different_jobs(self, watchmen: Book, moore: Author, writer: Job, artist: Job) -> None:
        watchmen.add_author(moore, writer).add_author(moore, artist)
        assert len(watchmen.get_authors()) == 2

    def test_distinct_ids_win_over_display_string(self, watchmen: Book, writer: Job) -> None:
        """Two persisted homonyms are two authors."""
        first = Author(pk=1, firstname='Alan', lastname='Moore')
        second = Author(pk=2, firstname='Alan', lastname='Moore')
        watchmen.add_author(first, writer).add_author(second, writer)
        assert len(watchmen.get_authors()) == 2

    def test_same_id_matches_despite_display_string(self, watchmen: Book, writer: Job) -> None:
        watchmen.add_author(Author(pk=7, firstname='Alan', lastname='Moore'), writer)
        watchmen.add_author(Author(pk=7, firstname='A.', lastname='Moore'), writer)
        assert len(watchmen.get_authors()) == 1

    def test_unsaved_homonyms_are_merged(self, watchmen: Book, writer: Job) -> None:
        """Without ids, authors are matched on their display string only."""
        watchmen.add_author(Author(firstname='Alan', lastname='Moore'), writer)
        watchmen.add_author(Author(firstname='Alan', lastname='Moore'), writer)
        assert len(watchmen.get_authors()) == 1

    def test_saved_and_unsaved_match_by_display_string(self, watchmen: Book, writer: Job) -> None:
        watchmen.add_author(Author(pk=3, firstname='Alan', lastname='Moore'), writer)
        watchmen.add_author(Author(firstname='Alan', lastname='Moore'), Job(pk=9, translation_key='Writer'))
        assert len(watchmen.get_authors()) == 1

    def test_first_record_is_kept(self, watchmen: Book, moore: Author, writer: Job) -> None:
        first = ProjectBookCreation(author=moore, role=writer)
        second = ProjectBookCreation(author=Author(firstname='Alan', lastname='Moore'), role=writer)
        watchmen.add_authors(first).add_authors(second)
        assert list(watchmen.get_authors()) == [first]
        assert second.book_id is None

    def test_back_reference_is_set(self, watchmen: Book, moore: Author, writer: Job) -> None:
        project = ProjectBookCreation(author=moore, role=writer)
        watchmen.add_authors(project)
        assert project.book is watchmen

    def test_returns_book_for_chaining(self, watchmen: Book, moore: Author, writer: Job) -> None:
        assert watchmen.add_author(moore, writer) is watchmen
        assert watchmen.add_author(moore, writer) is watchmen

    def test_has_project_book_creation(self, watchmen: Book, moore: Author, writer: Job, artist: Job) -> None:
        watchmen.add_author(moore, writer)
        assert watchmen.has_project_book_creation(ProjectBookCreation(author=moore, role=writer))
        assert not watchmen.has_project_book_creation(ProjectBookCreation(author=moore, role=artist))


class TestSetAuthors:
    """Tests for Book.set_authors()."""

    def test_duplicates_are_collapsed(self, watchmen: Book, moore: Author, writer: Job, artist: Job) -> None:
        gibbons = Author(firstname='Dave', lastname='Gibbons')
        projects = [
            ProjectBookCreation(author=moore, role=writer),
            ProjectBookCreation(author=gibbons, role=artist),
            ProjectBookCreation(author=Author(firstname='Alan', lastname='Moore'), role=writer),
        ]
        watchmen.set_authors(projects)

        reference = Book(title='Watchmen')
        reference.add_author(moore, writer).add_author(gibbons, artist)
        assert len(watchmen.get_authors()) == len(reference.get_authors()) == 2

    def test_replaces_previous_records(self, watchmen: Book, moore: Author, writer: Job, artist: Job) -> None:
        watchmen.add_author(moore, writer)
        replacement = ProjectBookCreation(author=moore, role=artist)
        watchmen.set_authors([replacement])
        assert list(watchmen.get_authors()) == [replacement]

    def test_every_record_points_to_the_book(self, watchmen: Book, moore: Author, writer: Job, artist: Job) -> None:
        watchmen.set_authors([
            ProjectBookCreation(author=moore, role=writer),
            ProjectBookCreation(author=moore, role=artist),
        ])
        assert all(project.book is watchmen for project in watchmen.get_authors())


class TestAddEditor:
    """Tests for Book.add_editor() and Book.add_editors()."""

    def test_same_editor_id_different_dates(self, watchmen: Book) -> None:
        """First write wins when the editor is already present."""
        watchmen.add_editor(Editor(pk=1, name='DC Comics'), date(1986, 9, 1))
        watchmen.add_editor(Editor(pk=1, name='DC Comics'), date(1987, 1, 1), isbn='123', collection='Absolute')

        editions = list(watchmen.get_editors())
        assert len(editions) == 1
        assert editions[0].publication_date == date(1986, 9, 1)

    def test_distinct_editor_ids(self, watchmen: Book) -> None:
        watchmen.add_editor(Editor(pk=1, name='DC Comics'), date(1986, 9, 1))
        watchmen.add_editor(Editor(pk=2, name='DC Comics'), date(1986, 9, 1))
        assert len(watchmen.get_editors()) == 2

    def test_unsaved_editor_same_footprint(self, watchmen: Book, dc: Editor) -> None:
        watchmen.add_editor(dc, date(1986, 9, 1), isbn='123')
        watchmen.add_editor(Editor(name='DC Comics'), date(1986, 9, 1), isbn='123')
        assert len(watchmen.get_editors()) == 1

    def test_unsaved_editor_other_date_is_another_edition(self, watchmen: Book, dc: Editor) -> None:
        """Without ids the whole edition footprint is compared, date included."""
        watchmen.add_editor(dc, date(1986, 9, 1))
        watchmen.add_editor(dc, date(2005, 11, 1), collection='Absolute')
        assert len(watchmen.get_editors()) == 2

    def test_back_reference_is_set(self, watchmen: Book, dc: Editor) -> None:
        project = ProjectBookEdition(editor=dc, publication_date=date(1986, 9, 1))
        watchmen.add_editors(project)
        assert project.book is watchmen

    def test_set_editors_collapses_duplicates(self, watchmen: Book) -> None:
        watchmen.set_editors([
            ProjectBookEdition(editor=Editor(pk=1, name='DC Comics'), publication_date=date(1986, 9, 1)),
            ProjectBookEdition(editor=Editor(pk=1, name='DC Comics'), publication_date=date(1987, 1, 1)),
            ProjectBookEdition(editor=Editor(pk=2, name='Vertigo'), publication_date=date(1988, 1, 1)),
        ])
        assert [str(e.editor) for e in watchmen.get_editors()] == ['DC Comics', 'Vertigo']
        assert all(project.book is watchmen for project in watchmen.get_editors())

    def test_has_project_book_edition(self, watchmen: Book) -> None:
        watchmen.add_editor(Editor(pk=1, name='DC Comics'), date(1986, 9, 1))
        candidate = ProjectBookEdition(editor=Editor(pk=1, name='DC'), publication_date=date(2000, 1, 1))
        assert watchmen.has_project_book_edition(candidate)


class TestSharedReferences:
    """Tags and reviews are not de-duplicated."""

    def test_tags_are_appended(self, watchmen: Book) -> None:
        tag = Tag(name='graphic novel')
        watchmen.add_tag(tag).add_tag(tag)
        assert watchmen.get_tags() == [tag, tag]

    def test_set_tags_replaces(self, watchmen: Book) -> None:
        watchmen.add_tag(Tag(name='old'))
        new = Tag(name='new')
        watchmen.set_tags([new])
        assert watchmen.get_tags() == [new]

    def test_review_back_reference(self, watchmen: Book) -> None:
        review = Review(body='Great', rating=5, author='reader')
        watchmen.add_review(review)
        assert review.book is watchmen
        assert list(watchmen.get_reviews()) == [review]
