import inspect
import logging
from enum import Enum, auto
from typing import List


logger = logging.getLogger(__name__)


class ChunkPhase(Enum):
    '''Where a chunk is in its life: nothing read yet, reading its fields, complete.'''
    INIT      = 0
    UNPACKING = auto()
    DONE      = auto()


def get_instance_from_chunk(instance, condition):
    '''Walk up the fathers, starting from instance itself, until condition is satisfied.'''
    candidate = instance

    while not condition(candidate):
        candidate = candidate.father

        if candidate is None:
            raise AttributeError(f'no chunk satisfying the condition above {instance!r}')

    return candidate


def get_root_from_chunk(instance):
    return get_instance_from_chunk(instance, condition=lambda x: x.father is None)


def get_instance_from_class_name(instance, name):
    return get_instance_from_chunk(instance, condition=lambda x: x.__class__.__name__ == name)


class Dependency:
    '''Link an attribute of a field to the value of another field.

    It allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(n=Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    read from the field named 'length' when unpacking.

    The expression is a dotted path, like a python module, and its first
    component tells where the resolution starts

     - empty (the expression starts with '.'): the father of the field
     - '@ClassName': the nearest father that is an instance of ClassName
     - anything else: the root chunk

    If the last component is a method it's called, otherwise the value of
    the field is used.
    '''
    def __init__(self, expression: str):
        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def _get_start(self, instance, components: List[str]):
        head, *tail = components

        if head == '':
            return instance.father, tail

        if head.startswith('@'):
            return get_instance_from_class_name(instance, head[1:]), tail

        return get_root_from_chunk(instance), components

    def resolve_field(self, instance):
        '''Return the field (or bound method) the expression points to.'''
        field, components = self._get_start(instance, self.expression.split('.'))

        logger.debug('resolving \'%s\' for %s starting from %s' % (
            self.expression,
            instance.__class__.__name__,
            field.__class__.__name__,
        ))

        for component in components:
            field = getattr(field, component)

        return field

    def resolve(self, instance):
        field = self.resolve_field(instance)

        value = field() if inspect.ismethod(field) else field.value

        logger.debug(' \'%s\' resolved with value %s' % (self.expression, value))

        return value


class PropertyDescriptor(object):
    """Attribute of a field that can be given directly or via a Dependency
    resolved each time it's accessed."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if not isinstance(value, Dependency):
            return value

        # without a father there is nothing to resolve against
        if instance.father is None:
            return None

        return value.resolve(instance)

    def __set__(self, instance, value):
        if value is not None and not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"'{self.name}' must be of type {self.type.__name__} or a Dependency")

        instance.__dict__[self.name] = value

    def is_dependency(self, instance) -> bool:
        return isinstance(instance.__dict__.get(self.name), Dependency)
