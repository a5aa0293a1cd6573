"""
Database session management.

The store runs inside an existing Django project or standalone. Standalone
use gets a minimal settings object; in both cases each set of connection
options is registered as its own database alias.
"""
import hashlib
import json
from typing import Any, Dict

import django
from django.apps import apps
from django.conf import settings
from django.db import connections

from docstore.core.errors import ValidationError

POSTGRES_ENGINE = 'django.db.backends.postgresql'

_NAME_KEYS = ('database', 'name', 'dbname')
_USER_KEYS = ('user', 'username')


def setup_django():
    """
    Configure Django if the host process has not.
    """
    if not settings.configured:
        settings.configure(
            INSTALLED_APPS=['docstore'],
            DATABASES={},
            USE_TZ=True,
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
        )
    if not apps.ready:
        django.setup()


def _pop_first(options: Dict[str, Any], keys) -> Any:
    value = None
    for key in keys:
        candidate = options.pop(key, None)
        if value is None and candidate not in (None, ''):
            value = candidate
    return value


def build_database_settings(connection_options: Dict[str, Any]) -> Dict[str, Any]:
    """
    Translate connection options into a Django DATABASES entry.

    Args:
        connection_options: host, port, user/username, password,
            database/name and optional driver `options`. Unrecognised keys
            are passed to the driver.

    Returns:
        Complete settings dict for one database alias
    """
    if not isinstance(connection_options, dict) or not connection_options:
        raise ValidationError("connection_options must be a non-empty mapping")

    options = dict(connection_options)
    name = _pop_first(options, _NAME_KEYS)
    if not name:
        raise ValidationError("connection_options must name the database")

    user = _pop_first(options, _USER_KEYS)
    password = options.pop('password', None)
    host = options.pop('host', None)
    port = options.pop('port', None)
    engine = options.pop('engine', None) or POSTGRES_ENGINE
    conn_max_age = options.pop('conn_max_age', 0)
    options.pop('type', None)  # "postgres" in TypeORM-style option dicts

    driver_options = dict(options.pop('options', None) or {})
    driver_options.update(options)

    return {
        'ENGINE': engine,
        'NAME': name,
        'USER': user or '',
        'PASSWORD': password or '',
        'HOST': host or '',
        'PORT': str(port) if port else '',
        'OPTIONS': driver_options,
        'ATOMIC_REQUESTS': False,
        'AUTOCOMMIT': True,
        'CONN_MAX_AGE': conn_max_age,
        'CONN_HEALTH_CHECKS': False,
        'TIME_ZONE': None,
        'TEST': {
            'CHARSET': None,
            'COLLATION': None,
            'MIGRATE': True,
            'MIRROR': None,
            'NAME': None,
        },
    }


def database_alias(database_settings: Dict[str, Any]) -> str:
    """Deterministic alias so identical options share one connection."""
    payload = json.dumps(database_settings, sort_keys=True, default=str)
    return f"docstore_{hashlib.sha1(payload.encode('utf-8')).hexdigest()[:12]}"


def register_database(connection_options: Dict[str, Any]) -> str:
    """
    Register connection options with Django and return the database alias.
    """
    database_settings = build_database_settings(connection_options)
    alias = database_alias(database_settings)
    if alias not in connections.settings:
        connections.settings[alias] = database_settings
    return alias


def get_db_connection(alias: str):
    """
    Get database connection.
    """
    return connections[alias]
