"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream without need of knowing what surrounds it.
"""
import logging
import struct
from enum import Enum
from typing import Dict

from .meta import FieldBase, Endianess, Compliant
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .exceptions import UnpackException, MagicException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def get_dependencies(self) -> Dict[str, Dependency]:
        """Return the dictionary containing as key the attribute depending on something else"""
        instance_dict = self.__dict__
        return {_k: _v for _k, _v in instance_dict.items() if isinstance(_v, Dependency)}

    def is_compliant(self, level):
        '''Returns True if the field, or a father it inherits from, asks for this compliance level'''
        instance = self
        while instance:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_value(self):
        return self._value

    def _set_value(self, value):
        self._value = value

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    def _set_raw(self, value) -> None:
        raise NotImplementedError(f"method {self.__class__.__name__}._set_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers and floats from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the integer value of the field itself.
    """
    PREFIXES = {
        Endianess.LITTLE_ENDIAN: '<',
        Endianess.BIG_ENDIAN:    '>',
        Endianess.NETWORK:       '!',
        Endianess.NATIVE:        '=',
    }

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if not isinstance(self.value, Enum):
            return '<%s(%s)>' % (self.__class__.__name__, self._get_encoder()(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def __str__(self):
        if isinstance(self.value, float):
            return str(self.value)
        width = self.size * 2  # we want to be as large as possible
        formatter = '0x%%0%dx' % width
        return formatter % (self.value if not isinstance(self.value, Enum) else self.value.value,)

    def _get_encoder(self):
        return repr if isinstance(self.value, float) else hex

    def value_from_default(self):
        if not self.enum:
            return super().value_from_default()

        try:
            return self.enum(self.default)
        except ValueError:
            return self.default

    def get_format(self):
        return '%s%s' % (self.PREFIXES[self.endianess], self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return struct.pack(self.get_format(), value)

    def _set_raw(self, raw: bytes) -> None:
        self.value = self._unpack(raw)

    def _unpack_struct(self, value: bytes):
        try:
            unpacked_value = struct.unpack(self.get_format(), value)[0]
        except struct.error as e:
            self.logger.error(e)
            exc = MagicException if self.is_compliant(Compliant.MAGIC) else UnpackException
            raise exc(chain=[])

        return unpacked_value

    def _unpack_enum(self, value: int):
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(chain=[], message=f'{value:#x} is not a valid {self.enum.__name__}')

            self.logger.warning(f'enum {self.enum.__name__} doesn\'t have element with value 0x{value:x} in it')

            return value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic and value != self.default:
            self.logger.warning(f'the magic doesn\'t correspond')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[])

        return value

    def unpack(self, stream):
        self.value = self._unpack(stream.read_exactly(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        if self.default:
            return self.default

        return b'\x00' * (self.length or 0)

    def _get_size(self):
        return len(self.value)

    def _set_value(self, value) -> None:
        """The StringField has the size as a parameter and we must follow that indication
        unless it's a Dependency."""
        if not StringField.length.is_dependency(self) and len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = value

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        value = stream.read_exactly(self.length)

        if self.is_magic and value != self.default:
            self.logger.warning(f'magic for field \'{self.name}\' is {value!r} instead of {self.default!r}')
            if self.is_compliant(Compliant.MAGIC):
                raise MagicException(chain=[])

        self.value = value


class ArrayField(Field):
    '''Unpack an array of Chunks.

    You can indicate an explicit number of elements via the parameter named "n"
    (an integer or a Dependency) or you can indicate with a callable returning True
    which element is the terminator for the list via the parameter named "canary".
    With neither of them the elements are unpacked until the end of the stream.
    '''

    n = PropertyDescriptor('n', int)

    def __init__(self, field_cls, n=None, canary=None, **kw):
        self.field_cls = field_cls
        self.n = n
        self._canary = canary

        kw.setdefault('default', [])

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default)

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        return sum(element.size for element in self.value)

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack_element(self, element, stream):
        element.unpack(stream)

    def append(self, element):
        element.father = self
        self.value.append(element)

    def unpack(self, stream):
        n = self.n
        self.value = []

        self.logger.debug('unpacking %s elements for \'%s\'' % (n if n is not None else 'unknown number of', self.name))

        while True:
            if n is not None and len(self.value) >= n:
                break

            if n is None and self._canary is None and stream.is_at_end():
                break

            element = self.instance_element()
            self.unpack_element(element, stream)
            self.append(element)

            if self._canary and self._canary(element):
                break


class PaddingField(Field):
    '''Takes as much stream as possible'''

    def __init__(self, **kw):
        kw.setdefault('default', b'')
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%d bytes)>' % (self.__class__.__name__, len(self.value))

    def _get_size(self):
        return len(self.value)

    def _get_raw(self):
        return self.value

    def unpack(self, stream):
        self.value = stream.read_all()
