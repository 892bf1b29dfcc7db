from collections.abc import Mapping

from django import template
from django.utils.safestring import mark_safe

register = template.Library()

@register.filter(name='route_uri')
def route_uri(value):
    # Menu entries are either a url or a {'uri', 'note'} mapping
    if isinstance(value, Mapping):
        return value.get('uri', '')
    return value

@register.filter(name='route_note')
def route_note(value):
    if not isinstance(value, Mapping):
        return ''
    # Notes are built from constants in library.utils and may hold links
    return mark_safe(value.get('note', ''))
