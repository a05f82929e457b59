from querybind.template.cache import clear_templates, get_template
from querybind.template.parser import Literal, Placeholder, Template, parse

__all__ = [
    'Literal',
    'Placeholder',
    'Template',
    'parse',
    'get_template',
    'clear_templates',
]
