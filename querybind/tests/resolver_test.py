"""
Path resolution tests: field access, accessor access, precedence and errors.
"""
from dataclasses import dataclass
from types import SimpleNamespace

import pytest

from querybind.binding.resolver import AccessorConvention, PathResolver, get_member, resolve
from querybind.errors import BindingError
from querybind.template import Placeholder, parse


class PublicUser:
    def __init__(self, id, username):
        self.id = id
        self.username = username


class BeanUser:
    def __init__(self, id, username, active=True):
        self._id = id
        self._username = username
        self._active = active

    def getId(self):
        return self._id

    def getUsername(self):
        return self._username

    def isActive(self):
        return self._active


class SnakeUser:
    def __init__(self, username):
        self._username = username

    def get_username(self):
        return self._username


class PropertyUser:
    def __init__(self, first, last):
        self.first = first
        self.last = last

    @property
    def username(self):
        return f"{self.first}.{self.last}"


class BothUser:
    def __init__(self):
        self.username = "field"

    def getUsername(self):
        return "accessor"


@dataclass
class Post:
    title: str
    author: object


def test_empty_path_is_whole_argument():
    assert resolve(Placeholder(2), ["a", "b", "c"]) == "b"


def test_nested_field_and_accessor_forms():
    placeholder = parse("?{2.author.username}").placeholders[0]
    with_fields = Post("t", PublicUser(1, "jason"))
    with_accessors = Post("t", BeanUser(1, "jason"))
    assert resolve(placeholder, [None, with_fields]) == "jason"
    assert resolve(placeholder, [None, with_accessors]) == "jason"


def test_field_takes_precedence_over_accessor():
    assert resolve(Placeholder(1, ("username",)), [BothUser()]) == "field"


def test_property_counts_as_field():
    assert resolve(Placeholder(1, ("username",)), [PropertyUser("a", "b")]) == "a.b"


def test_is_accessor_for_boolean():
    assert resolve(Placeholder(1, ("active",)), [BeanUser(1, "x", active=False)]) is False


def test_snake_case_accessor():
    assert resolve(Placeholder(1, ("username",)), [SnakeUser("snake")]) == "snake"


def test_snake_case_accessor_can_be_disabled():
    resolver = PathResolver(AccessorConvention(snake_case=False))
    with pytest.raises(BindingError):
        resolver.resolve(Placeholder(1, ("username",)), [SnakeUser("snake")])


def test_custom_accessor_prefixes():
    class Reader:
        def readName(self):
            return "custom"

    resolver = PathResolver(AccessorConvention(prefixes=("read",)))
    assert resolver.resolve(Placeholder(1, ("name",)), [Reader()]) == "custom"


def test_accessor_names():
    assert AccessorConvention().accessor_names("username") == (
        "getUsername", "isUsername", "get_username", "is_username")


def test_mapping_key_lookup():
    arguments = [{"author": {"username": "dict-user"}}]
    assert resolve(Placeholder(1, ("author", "username")), arguments) == "dict-user"


def test_namespace_and_slots():
    class Slotted:
        __slots__ = ("username",)

        def __init__(self):
            self.username = "slotted"

    assert resolve(Placeholder(1, ("username",)), [SimpleNamespace(username="ns")]) == "ns"
    assert resolve(Placeholder(1, ("username",)), [Slotted()]) == "slotted"


def test_none_intermediate_short_circuits():
    post = Post("t", None)
    assert resolve(Placeholder(1, ("author", "username")), [post]) is None


def test_none_argument_with_path():
    assert resolve(Placeholder(1, ("username",)), [None]) is None


@pytest.mark.parametrize("index", [0, 4, 9])
def test_out_of_range_index(index):
    with pytest.raises(BindingError):
        resolve(Placeholder(index), [1, 2, 3])


def test_missing_member_names_member_and_type():
    with pytest.raises(BindingError) as info:
        resolve(Placeholder(1, ("email",)), [PublicUser(1, "x")])
    message = str(info.value)
    assert "email" in message
    assert "PublicUser" in message


def test_plain_method_is_not_a_field():
    class Thing:
        def username(self):
            return "method"

    with pytest.raises(BindingError):
        get_member(Thing(), "username")


def test_failing_accessor_is_wrapped():
    class Broken:
        def getUsername(self):
            raise RuntimeError("boom")

    with pytest.raises(BindingError) as info:
        get_member(Broken(), "username")
    assert isinstance(info.value.__cause__, RuntimeError)
