"""Load environment variables into a record."""

from __future__ import annotations

import logging
import os
from typing import Any, Mapping

from envconf.errors import MissingRequiredFieldError, ParseError
from envconf.kinds import Kind, coerce, zero_value
from envconf.models.field import FieldDescriptor
from envconf.processing import field_kind, process, record_fields

logger = logging.getLogger(__name__)


class Loader:
    """Binds environment variables to the fields of a record.

    ``environ`` is the lookup mapping, ``os.environ`` when omitted. An optional
    prefix (stored upper-cased) namespaces every lookup key: with prefix
    ``APP`` the field bound to ``HOST`` is read from ``APP_HOST``.
    """

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ
        self._prefix = ""

    @property
    def prefix(self) -> str:
        return self._prefix

    def set_prefix(self, prefix: str) -> None:
        self._prefix = prefix.upper()

    @property
    def environ(self) -> Mapping[str, str]:
        return os.environ if self._environ is None else self._environ

    def lookup_key(self, fi: FieldDescriptor) -> str:
        if self._prefix:
            return f"{self._prefix}_{fi.env}"
        return fi.env

    def resolve(self, fi: FieldDescriptor) -> str | None:
        """Return the text to coerce for ``fi``.

        None means the variable is absent and the field has neither a default
        nor the required flag, so it gets its zero value.
        """
        key = self.lookup_key(fi)
        value = self.environ.get(key)
        if value is not None:
            logger.debug("Field %s: read from %s", fi.name, key)
            return value
        if fi.has_default:
            logger.debug("Field %s: %s not set, using default", fi.name, key)
            return fi.default
        if fi.required:
            raise MissingRequiredFieldError(fi.name, key)
        logger.debug("Field %s: %s not set, using zero value", fi.name, key)
        return None

    def load_field(self, obj: Any, fi: FieldDescriptor, kind: Kind | None = None) -> None:
        """Resolve, coerce and assign a single field of ``obj``."""
        if kind is None:
            kind = field_kind(obj, fi.name)

        text = self.resolve(fi)
        if text is None:
            value = zero_value(kind, fi.name)
        else:
            try:
                value = coerce(kind, text, fi.name)
            except ValueError as exc:
                raise ParseError(fi.name, self.lookup_key(fi), text, kind, str(exc)) from exc

        setattr(obj, fi.name, value)

    def load(self, obj: Any) -> None:
        """Populate ``obj`` from the environment.

        Fields are processed in declaration order and the first error stops
        the load. Fields assigned before the failing one keep their new values.
        """
        descriptors = process(obj)
        kinds = {rf.name: rf.kind for rf in record_fields(obj)}

        logger.debug(
            "Loading %d field(s) into %s (prefix=%r)",
            len(descriptors), type(obj).__name__, self._prefix,
        )
        for fi in descriptors:
            self.load_field(obj, fi, kinds[fi.name])


def load(obj: Any, prefix: str = "", environ: Mapping[str, str] | None = None) -> None:
    """Populate ``obj`` using a one-off Loader."""
    loader = Loader(environ)
    loader.set_prefix(prefix)
    loader.load(obj)
