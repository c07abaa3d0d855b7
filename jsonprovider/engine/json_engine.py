import codecs
import inspect
import io
import json
from typing import Any
from typing import Dict
from typing import ForwardRef
from typing import Optional

from pydantic import PydanticUserError
from pydantic import TypeAdapter
from pydantic import ValidationError

from jsonprovider.engine.base import ConfigurationRejected
from jsonprovider.engine.base import UnmarshalError
from jsonprovider.engine.base import UnsupportedMediaType
from jsonprovider.interfaces import Headers
from jsonprovider.properties import MarshallerProperties as MP
from jsonprovider.properties import UnmarshallerProperties as UP

# Raw byte/stream payloads belong to other handlers
_RAW_TYPES = (bytes, bytearray, memoryview)


def media_type_charset(media_type: str) -> Optional[str]:
    """Return the `charset` parameter of a media type, if any."""
    for param in media_type.split(";")[1:]:
        key, _, value = param.partition("=")
        if key.strip().lower() == "charset" and value.strip():
            return value.strip().strip('"')
    return None


def is_text_encoding(name: str) -> bool:
    """True if `name` is a str <-> bytes codec (base64, rot13 are not)."""
    try:
        info = codecs.lookup(name)
    except LookupError:
        return False
    return getattr(info, "_is_text_encoding", True)


def _is_utf(encoding: str) -> bool:
    return codecs.lookup(encoding).name.startswith("utf")


def is_json_media_type(media_type: str) -> bool:
    key = media_type.split(";", 1)[0].strip().lower()
    main, _, sub = key.partition("/")
    if sub == "*":
        return main in ("*", "application")
    return sub == "json" or sub.endswith("+json")


class _Session:
    """
    Property bag shared by marshaller and unmarshaller sessions.
    Only known names with values of the declared kind are accepted.
    """

    _defaults: Dict[str, Any] = {}
    _kinds: Dict[str, type] = {}

    def __init__(self) -> None:
        self._props: Dict[str, Any] = dict(self._defaults)

    def set_property(self, name: str, value: Any) -> None:
        if name not in self._kinds:
            raise ConfigurationRejected(name, value, "unknown property")
        kind = self._kinds[name]
        if not isinstance(value, kind):
            raise ConfigurationRejected(
                name, value, f"expected {kind.__name__}"
            )
        if (
            kind is str
            and name.endswith(".encoding")
            and not is_text_encoding(value)
        ):
            raise ConfigurationRejected(name, value, "not a text encoding")
        self._props[name] = value

    def get_property(self, name: str) -> Any:
        if name not in self._kinds:
            raise ConfigurationRejected(name, None, "unknown property")
        return self._props[name]


def _root_name(tp: Any, obj: Any) -> str:
    name = getattr(tp, "__name__", None) or type(obj).__name__
    return name[:1].lower() + name[1:]


def _drop_empty(data: Any) -> Any:
    if isinstance(data, dict):
        return {
            k: _drop_empty(v)
            for k, v in data.items()
            if not (isinstance(v, (list, dict)) and not v)
        }
    if isinstance(data, list):
        return [_drop_empty(v) for v in data]
    return data


class JSONMarshaller(_Session):
    """
    Writes one object as JSON bytes, using a pydantic TypeAdapter for the
    object → JSON-compatible data step.
    """

    _defaults = {
        MP.FORMATTED_OUTPUT: False,
        MP.INDENT_STRING: "  ",
        MP.COMPACT: False,
        MP.INCLUDE_ROOT: False,
        MP.MARSHAL_EMPTY_COLLECTIONS: True,
        MP.EXCLUDE_NONE: False,
        MP.BY_ALIAS: True,
        MP.SORT_KEYS: False,
        MP.ENCODING: "utf-8",
    }
    _kinds = {
        MP.FORMATTED_OUTPUT: bool,
        MP.INDENT_STRING: str,
        MP.COMPACT: bool,
        MP.INCLUDE_ROOT: bool,
        MP.MARSHAL_EMPTY_COLLECTIONS: bool,
        MP.EXCLUDE_NONE: bool,
        MP.BY_ALIAS: bool,
        MP.SORT_KEYS: bool,
        MP.ENCODING: str,
    }

    def marshal(self, obj: Any, tp: Any) -> bytes:
        p = self._props
        data = TypeAdapter(tp).dump_python(
            obj,
            mode="json",
            by_alias=p[MP.BY_ALIAS],
            exclude_none=p[MP.EXCLUDE_NONE],
        )
        if not p[MP.MARSHAL_EMPTY_COLLECTIONS]:
            data = _drop_empty(data)
        if p[MP.INCLUDE_ROOT]:
            data = {_root_name(tp, obj): data}

        indent = p[MP.INDENT_STRING] if p[MP.FORMATTED_OUTPUT] else None
        separators = (",", ":") if p[MP.COMPACT] and indent is None else None
        text = json.dumps(
            data,
            indent=indent,
            separators=separators,
            sort_keys=p[MP.SORT_KEYS],
            ensure_ascii=not _is_utf(p[MP.ENCODING]),
        )
        return text.encode(p[MP.ENCODING])


class JSONUnmarshaller(_Session):
    """Reads one JSON body into the requested type."""

    _defaults = {
        UP.INCLUDE_ROOT: False,
        UP.STRICT: False,
        UP.ENCODING: "utf-8",
    }
    _kinds = {
        UP.INCLUDE_ROOT: bool,
        UP.STRICT: bool,
        UP.ENCODING: str,
    }

    def unmarshal(self, data: bytes, tp: Any) -> Any:
        p = self._props
        try:
            payload = json.loads(data.decode(p[UP.ENCODING]))
        except (UnicodeDecodeError, LookupError, json.JSONDecodeError) as e:
            raise UnmarshalError(f"Malformed JSON body: {e}") from e

        if p[UP.INCLUDE_ROOT]:
            if not isinstance(payload, dict) or len(payload) != 1:
                raise UnmarshalError("Expected an object with one root key")
            payload = next(iter(payload.values()))

        try:
            return TypeAdapter(tp).validate_python(
                payload, strict=p[UP.STRICT]
            )
        except ValidationError as e:
            raise UnmarshalError(str(e)) from e


class JSONEngine:
    """
    The JSON binding engine: session factory, base pre-read/pre-write steps
    and base eligibility checks.
    """

    def create_marshaller(self) -> JSONMarshaller:
        return JSONMarshaller()

    def create_unmarshaller(self) -> JSONUnmarshaller:
        return JSONUnmarshaller()

    def before_read(
        self,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        unmarshaller: JSONUnmarshaller,
    ) -> None:
        charset = self._charset(tp, media_type)
        if charset:
            unmarshaller.set_property(UP.ENCODING, charset)

    def before_write(
        self,
        obj: Any,
        tp: Any,
        media_type: str,
        headers: Optional[Headers],
        marshaller: JSONMarshaller,
    ) -> None:
        charset = self._charset(tp, media_type)
        if charset:
            marshaller.set_property(MP.ENCODING, charset)

    def is_readable(self, tp: Any, media_type: str) -> bool:
        return is_json_media_type(media_type) and self._can_bind(tp)

    def is_writable(self, tp: Any, media_type: str) -> bool:
        return is_json_media_type(media_type) and self._can_bind(tp)

    @staticmethod
    def _charset(tp: Any, media_type: str) -> Optional[str]:
        # a bad charset comes from the peer, not from provider config
        charset = media_type_charset(media_type)
        if charset and not is_text_encoding(charset):
            raise UnsupportedMediaType(tp, media_type)
        return charset

    @staticmethod
    def _can_bind(tp: Any) -> bool:
        if isinstance(tp, (str, ForwardRef)):
            # unresolved forward references cannot be bound
            return False
        if tp in _RAW_TYPES:
            return False
        if inspect.isclass(tp) and issubclass(tp, io.IOBase):
            return False
        try:
            TypeAdapter(tp)
        except (PydanticUserError, TypeError):
            return False
        return True
