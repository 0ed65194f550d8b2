import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()


class FieldDescriptor(object):
    """Wrapper around field access of a Field related class: each instance
    of the chunk gets its own copy of the field declared in the class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, type=None):
        if instance is None:
            return self

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        self.logger.debug("__set__ from %s for field named '%s'", instance.__class__.__name__, self.field.name)
        data = instance.__dict__

        # a field replaces the declared one (this is how a chunk receives its data)
        if isinstance(value, FieldBase):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise delegate to the field
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the abstraction"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):

    def __new__(cls, names, bases, attrs):
        '''Fields are collected in the order of declaration, like Django does with models.'''
        new_attrs = {}
        declared = {}
        for obj_name, obj in attrs.items():
            if isinstance(obj, FieldBase):
                declared[obj_name] = obj
            else:
                new_attrs[obj_name] = obj

        new_cls = super(MetaChunk, cls).__new__(cls, names, bases, new_attrs)

        new_cls._meta = Meta()
        new_cls.logger = logging.getLogger(new_cls.__module__)

        # handle inheritance
        for parent in [_ for _ in bases if isinstance(_, MetaChunk)]:
            for obj_name in parent._meta.fields:
                new_cls._meta.fields.append(obj_name)

        for obj_name, obj in declared.items():
            new_cls.add_to_class(obj_name, obj)

        return new_cls

    def add_to_class(cls, name, value):
        cls.logger.debug('contribute_to_chunk() found for field \'%s\'' % name)
        cls._meta.fields.append(name)
        value.contribute_to_chunk(cls, name)
