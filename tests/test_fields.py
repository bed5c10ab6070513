from enum import Enum, auto

import pytest

from cafstruct.core import Chunk
from cafstruct.exceptions import UnpackException, StreamException, MagicException
from cafstruct.fields import StructField, StringField, ArrayField, PaddingField
from cafstruct.meta import Compliant, Endianess
from cafstruct.properties import Dependency
from cafstruct.streams import Stream


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'


def test_structfield_set_raw():
    field = StructField('I')

    field.raw = b'\x01\x02\x03\x04'
    assert field.value == 0x04030201


def test_structfield_endianess():
    field = StructField('I', endianess=Endianess.BIG_ENDIAN)

    field.raw = b'\x01\x02\x03\x04'
    assert field.value == 0x01020304

    field = StructField('d', endianess=Endianess.BIG_ENDIAN)
    field.unpack(Stream(b'\x40\xe5\x88\x80\x00\x00\x00\x00'))

    assert field.value == 44100.0


def test_structfield_enum():
    class DummyEnum(Enum):
        NONE = 0
        FIRST = auto()
        SECOND = auto()

    field = StructField('I', enum=DummyEnum, compliant=Compliant.ENUM)

    assert field.value == DummyEnum.NONE

    field.value = DummyEnum.SECOND

    assert field.value == DummyEnum.SECOND
    assert field.raw == b'\x02\x00\x00\x00'

    with pytest.raises(UnpackException):
        field.raw = b'\x04\x00\x00\x00'


def test_structfield_enum_not_compliant():
    """Without compliance an unknown value is kept as integer."""
    class DummyEnum(Enum):
        NONE = 0

    field = StructField('I', enum=DummyEnum)

    field.raw = b'\x04\x00\x00\x00'

    assert field.value == 4


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = b''.join([bytes([_]) for _ in range(0x10)])

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_short_stream():
    field = StringField(4)

    with pytest.raises(StreamException):
        field.unpack(Stream(b'caf'))


def test_arrayfield():
    length = 3
    array = ArrayField(StructField('I'), n=length)

    assert array.value == []

    array.unpack(Stream(b'\x01\x00\x00\x00\x02\x00\x00\x00\x03\x00\x00\x00\xff'))

    assert len(array) == length

    # check that the elements are not duplicated
    assert array[0] is not array[1]
    assert array[0].father is array

    assert [_.value for _ in array] == [1, 2, 3]


def test_arrayfield_up_to_the_end():
    array = ArrayField(StructField('H'))

    array.unpack(Stream(b'\x01\x00\x02\x00'))

    assert [_.value for _ in array] == [1, 2]


def test_arrayfield_canary():
    array = ArrayField(StructField('B'), canary=lambda element: element.value == 0)

    array.unpack(Stream(b'\x01\x02\x00\x03'))

    assert [_.value for _ in array] == [1, 2, 0]


def test_arrayfield_w_dependency():
    class Entry(Chunk):
        a = StructField('B')

    class Table(Chunk):
        count = StructField('B')
        entries = ArrayField(Entry(), n=Dependency('.count'))

    table = Table(b'\x02\x0a\x0b\x0c')

    assert table.entries.n == 2
    assert [_.a.value for _ in table.entries] == [0x0a, 0x0b]
    assert table.entries.size == 2


def test_paddingfield():
    class Padded(Chunk):
        count = StructField('I')
        rest = PaddingField()

    padded = Padded(b'\x01\x00\x00\x00kebab')

    assert padded.rest.value == b'kebab'
    assert padded.size == 9


def test_magic():
    field = StructField('I', default=0xcafebabe, is_magic=True)

    field.unpack(Stream(b'\xbe\xba\xfe\xca'))
    assert field.value == 0xcafebabe

    # a wrong magic is only logged unless the compliance is asked for
    field.unpack(Stream(b'\x00\x00\x00\x00'))
    assert field.value == 0

    field = StringField(4, default=b'caff', is_magic=True, compliant=Compliant.MAGIC)

    with pytest.raises(MagicException):
        field.unpack(Stream(b'RIFF'))
