"""
Share links for event files.

A share is a random token plus a 6-digit access code, kept in the Django
cache for SHARE_TOKEN_TTL_SECONDS. The first successful validation consumes
it: the "used" marker is claimed with cache.add(), which only one caller can
win for a given key.
"""
import secrets
from typing import Dict, List

from django.conf import settings
from django.core.cache import cache as default_cache

from apps.core.exceptions import AuthorizationError, GoneError, NotFoundError, ValidationError
from apps.core.observability import log_domain_event
from apps.events.models import FileInfo
from apps.events.services import get_owned_event

EXPIRED_MESSAGE = 'Link expirado ou inválido'


def generate_access_code():
    return f'{100000 + secrets.randbelow(900000)}'


def file_type(name):
    _, dot, extension = name.rpartition('.')
    return extension.lower() if dot and extension else 'file'


class ShareStore:
    """Share entries over a Django cache backend."""

    def __init__(self, cache=None, prefix='share', ttl=None):
        self.cache = cache or default_cache
        self.prefix = prefix
        self.ttl = ttl if ttl is not None else settings.SHARE_TOKEN_TTL_SECONDS

    def _key(self, token):
        return f'{self.prefix}:{token}'

    def _used_key(self, token):
        return f'{self.prefix}:{token}:used'

    def put(self, token, entry: Dict):
        self.cache.set(self._key(token), entry, timeout=self.ttl)

    def get(self, token):
        return self.cache.get(self._key(token))

    def is_used(self, token):
        return self.cache.get(self._used_key(token)) is not None

    def claim(self, token):
        """Mark `token` used; False if someone else already did."""
        return self.cache.add(self._used_key(token), True, timeout=self.ttl)


def generate_share(event_id, file_ids: List, user, store=None):
    """
    Create a share for files of an owned event.

    Returns {link, token, accessCode}.

    Raises:
        NotFoundError: event missing or not owned by the user
        ValidationError: no files, or files outside the event
    """
    store = store or ShareStore()
    event = get_owned_event(event_id, user)

    files = list(
        FileInfo.objects.filter(event=event, is_orphaned=False, pk__in=file_ids).order_by('slot')
    )
    if not files or len(files) != len(set(file_ids)):
        raise ValidationError('Arquivos inválidos para compartilhamento')

    token = secrets.token_hex(16)
    access_code = generate_access_code()
    store.put(token, {
        'access_code': access_code,
        'files': [
            {'id': str(f.id), 'name': f.name, 'type': file_type(f.name), 'url': f.url}
            for f in files
        ],
    })

    log_domain_event(
        'share_created',
        entity_type='HealthEvent',
        entity_id=str(event.id),
        entity_ids={'user_id': str(user.id)},
        files_count=len(files),
    )
    return {
        'link': f"{settings.PUBLIC_BASE_URL.rstrip('/')}/shared/{token}",
        'token': token,
        'accessCode': access_code,
    }


def validate_share(token, code, store=None):
    """
    Consume a share and return its file list.

    Raises:
        NotFoundError: unknown or expired token
        GoneError: already used
        AuthorizationError: wrong access code
    """
    store = store or ShareStore()
    entry = store.get(token)
    if entry is None:
        raise NotFoundError(EXPIRED_MESSAGE)
    if store.is_used(token):
        raise GoneError('Este link já foi utilizado')
    if not secrets.compare_digest(str(code), entry['access_code']):
        log_domain_event('share_access_denied', entity_type='Share', result='rejected')
        raise AuthorizationError('Código de acesso incorreto')
    if not store.claim(token):
        raise GoneError('Este link já foi utilizado')

    log_domain_event('share_accessed', entity_type='Share', files_count=len(entry['files']))
    return entry['files']
