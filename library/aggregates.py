import logging
import threading

logger = logging.getLogger(__name__)


class OwnedCollection:
    """
    Child records owned by an aggregate root (e.g. the authorship records of a Book).

    The collection is the only place where records enter the aggregate:
    add() scans for an equivalent record, sets the back-reference to the owner
    and appends. Nothing touches the database until flush() is called by the
    owner's save().

    Records already persisted are loaded lazily from the owner's related
    manager `related_name` the first time the collection is read, and only if
    the owner has a primary key. Records prefetched on the owner are used as is.
    """

    def __init__(self, owner, back_reference, related_name, matches=None, select_related=()):
        self.owner = owner
        self.back_reference = back_reference
        self.related_name = related_name
        self.select_related = select_related
        self._matches = matches
        self._records = None
        self._removed = []
        self._lock = threading.RLock()

    def __getstate__(self):
        state = self.__dict__.copy()
        del state['_lock']
        return state

    def __setstate__(self, state):
        self.__dict__.update(state)
        self._lock = threading.RLock()

    def _load(self):
        if self._records is None:
            self._records = []
            if self.owner.pk is not None:
                queryset = getattr(self.owner, self.related_name).all()
                prefetched = getattr(self.owner, '_prefetched_objects_cache', {})
                if self.select_related and self.related_name not in prefetched:
                    queryset = queryset.select_related(*self.select_related)
                self._records = list(queryset)
        return self._records

    def __iter__(self):
        return iter(list(self._load()))

    def __len__(self):
        return len(self._load())

    def __getitem__(self, index):
        return self._load()[index]

    def __contains__(self, record):
        # Identity check only, use find() for equivalence
        return any(existing is record for existing in self._load())

    def __repr__(self):
        return f"<{self.__class__.__name__} of {self.owner!r}: {self._load()!r}>"

    @property
    def is_loaded(self):
        return self._records is not None

    def find(self, record):
        """Return the first record equivalent to `record`, or None."""
        if self._matches is None:
            return None
        for existing in self._load():
            if self._matches(existing, record):
                return existing
        return None

    def add(self, record):
        """
        Append `record` unless an equivalent one is already owned.
        Returns True when the record was appended.
        """
        with self._lock:
            existing = self.find(record)
            if existing is not None:
                logger.debug("Skipping %r on %r, equivalent to %r", record, self.owner, existing)
                return False

            setattr(record, self.back_reference, self.owner)
            self._load().append(record)
            return True

    def clear(self):
        with self._lock:
            self._removed.extend(record for record in self._load() if record.pk is not None)
            self._records = []

    def replace(self, records):
        """clear() then add() every record, as a single step."""
        with self._lock:
            self.clear()
            for record in records:
                self.add(record)

    def flush(self, references=()):
        """
        Persist the collection: delete the records dropped by clear() and
        insert the new ones.

        Unsaved objects found on the `references` attributes of a new record
        are saved first, unless an equivalent one was already saved for
        another record of the collection: that one is reused.
        """
        with self._lock:
            kept = {record.pk for record in self._load() if record.pk is not None}
            for record in self._removed:
                if record.pk not in kept:
                    record.delete()
            self._removed = []

            saved = {
                name: [
                    related for related in
                    (getattr(record, name, None) for record in self._load() if record.pk is not None)
                    if related is not None
                ]
                for name in references
            }
            for record in self._load():
                if record.pk is not None:
                    continue
                for name in references:
                    related = getattr(record, name)
                    if related is None or related.pk is not None:
                        continue
                    shared = _find_equivalent(related, saved[name])
                    if shared is None:
                        related.save()
                        saved[name].append(related)
                        shared = related
                    # re-assign so the foreign key column picks up the id
                    setattr(record, name, shared)
                setattr(record, self.back_reference, self.owner)
                record.save()


def _find_equivalent(obj, candidates):
    matches = getattr(obj, 'matches', None)
    if matches is None:
        return None
    for candidate in candidates:
        if type(candidate) is type(obj) and matches(candidate):
            return candidate
    return None
