import logging
from typing import Any, List, Sequence

from querybind.binding.resolver import PathResolver
from querybind.binding.spec import BindingSpec
from querybind.binding.types import default_convert
from querybind.errors import BindingError

logger = logging.getLogger(__name__)


def bind(value: Any, position: int, spec: BindingSpec) -> Any:
    """
    Convert a resolved value for the given 1-based bind position.

    The converter declared for the position is used when there is one,
    otherwise the default mapping. Failures of either are wrapped in
    BindingError with the original exception chained.
    """
    converter = spec.converter_for(position)
    if converter is None:
        try:
            return default_convert(value)
        except (TypeError, ValueError) as e:
            raise BindingError(
                f"{spec.name}: cannot bind {type(value).__name__} for parameter {position}: {e}") from e
    try:
        return converter.convert(value)
    except Exception as e:
        raise BindingError(
            f"{spec.name}: converter {converter!r} failed for parameter {position}: {e}") from e


def bind_all(spec: BindingSpec, arguments: Sequence[Any], resolver: PathResolver) -> List[Any]:
    """
    Resolve and bind every placeholder of spec.template against one argument set.

    The Nth placeholder in source order fills bind slot N.
    """
    values = []
    for position, placeholder in enumerate(spec.template.placeholders, start=1):
        raw = resolver.resolve(placeholder, arguments)
        values.append(bind(raw, position, spec))
    return values
