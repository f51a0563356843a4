import pytest

from naming import to_camel_case


@pytest.mark.parametrize("name,expected", [
    ("person", "Person"),
    ("my_field", "MyField"),
    ("my-field-name", "MyFieldName"),
    ("fooBar_baz", "FooBarBaz"),
    ("HTTP_status", "HTTPStatus"),
    ("a__b", "A_B"),
    ("_private", "_Private"),
    ("x", "X"),
])
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


def test_to_camel_case_rejects_empty_name():
    with pytest.raises(ValueError):
        to_camel_case("")
