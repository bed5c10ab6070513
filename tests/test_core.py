from enum import Enum

import pytest

from cafstruct.core import Chunk
from cafstruct.exceptions import ChunkUnpackException, MagicException, StreamException
from cafstruct.fields import StructField, StringField
from cafstruct.meta import Compliant
from cafstruct.properties import Dependency, ChunkPhase


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.get_ordered_fields_name() == ['a', 'b', 'c']

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.father is dummy

    dummy.a = 0xcafe
    assert dummy.a.value == 0xcafe
    dummy.a = 0xbad

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'

    assert dummy.size == 0x18
    assert len(dummy.raw) == dummy.size
    assert dummy.raw == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_chunk_unpack():
    class Dummy(Chunk):
        a = StructField('I')
        b = StringField(0x10)
        c = StructField('I')

    dummy = Dummy(b'\x01\x00\x00\x00' + b'A' * 0x10 + b'\x02\x00\x00\x00')

    assert dummy._phase == ChunkPhase.DONE
    assert dummy.a.value == 1
    assert dummy.b.value == b'A' * 0x10
    assert dummy.c.value == 2

    assert dummy.layout == {
        'a': (0, 4),
        'b': (4, 0x10),
        'c': (0x14, 4),
    }


def test_chunk_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first = Dummy(b'\x01\x00\x00\x00')
    second = Dummy(b'\x02\x00\x00\x00')

    assert first.a is not second.a
    assert first.a.value == 1
    assert second.a.value == 2


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'))

    example = Example()

    assert list(example.get_dependencies().keys()) == [
        'data.length',
    ]

    assert example.sz.father is example

    example = Example(b'\x05\x00\x00\x00kebab')

    assert example.sz.value == 5
    assert example.data.value == b'kebab'


def test_dependency_from_class_and_root():
    """A dependency can start from a named father or from the root."""
    class Body(Chunk):
        first = StringField(Dependency('@Container.lengths.a'))
        second = StringField(Dependency('lengths.b'))

    class Lengths(Chunk):
        a = StructField('B')
        b = StructField('B')

    class Container(Chunk):
        lengths = Lengths()
        body = Body()

    container = Container(b'\x02\x03abcde')

    assert container.body.first.value == b'ab'
    assert container.body.second.value == b'cde'
    assert container.body.root is container
    assert container.layout == {
        'lengths': (0, 2),
        'body': (2, 5),
    }


def test_nested_chunk_error_chain():
    """The exception tells which field, in the hierarchy, failed."""
    class Kind(Enum):
        FIRST = 1

    class Inner(Chunk):
        kind = StructField('I', enum=Kind, compliant=Compliant.ENUM)

    class Outer(Chunk):
        inner = Inner()

    outer = Outer(b'\x01\x00\x00\x00')
    assert outer.inner.kind.value == Kind.FIRST
    assert outer.inner.father is outer

    with pytest.raises(ChunkUnpackException) as e:
        Outer(b'\x07\x00\x00\x00')

    assert e.value.chain == ['kind', 'inner']
    assert str(e.value) == "unable to unpack 'inner.kind'"


def test_chunk_short_data():
    class Dummy(Chunk):
        a = StructField('I')
        b = StructField('I')

    with pytest.raises(StreamException):
        Dummy(b'\x01\x00\x00\x00\x02')


def test_chunk_validate():
    class Magic(Chunk):
        magic = StringField(4)

        def validate(self):
            return self.magic.value == b'caff'

    assert Magic(b'caff').magic.value == b'caff'

    # without asking for compliance a wrong magic is only logged
    assert Magic(b'RIFF').magic.value == b'RIFF'

    with pytest.raises(MagicException):
        Magic(b'RIFF', compliant=Compliant.MAGIC)
