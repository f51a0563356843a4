"""
naming.py
Name normalization used when turning schema names into C# identifiers.
"""

NAME_SEPARATORS = ('_', '-')


def to_camel_case(name: str) -> str:
    """
    Convert a schema token such as 'my_field-name' into 'MyFieldName'.

    Each part between separators gets its first character upper-cased; the rest of the
    part keeps its original casing. An empty part (two separators in a row, or a leading
    separator) is kept as a single underscore.

    Raises:
        ValueError: if name is empty
    """
    if not name:
        raise ValueError("Empty name")
    parts = [name]
    for sep in NAME_SEPARATORS:
        parts = [piece for part in parts for piece in part.split(sep)]
    result = ''
    for part in parts:
        if not part:
            result += '_'
        else:
            result += part[:1].upper() + part[1:]
    return result
