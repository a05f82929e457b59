from querybind.binding.binder import bind, bind_all
from querybind.binding.resolver import AccessorConvention, PathResolver, get_member, resolve
from querybind.binding.spec import BindingSpec, GeneratedKeys, ReturnShape
from querybind.binding.types import CallableMapper, TypeMapper, default_convert

__all__ = [
    'AccessorConvention',
    'BindingSpec',
    'CallableMapper',
    'GeneratedKeys',
    'PathResolver',
    'ReturnShape',
    'TypeMapper',
    'bind',
    'bind_all',
    'default_convert',
    'get_member',
    'resolve',
]
