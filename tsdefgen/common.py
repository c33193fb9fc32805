"""
Common utility functions for tsdefgen.
"""

# pylint: disable=line-too-long

import os
import re
from typing import Dict, Iterable, Optional, Union

import jinja2

TS_IDENTIFIER = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*$')


def simple_name(qualified_name: str) -> str:
    """Returns the last segment of a dotted qualified name."""
    return qualified_name.rsplit('.', 1)[-1]


def namespace_of(qualified_name: str) -> str:
    """Returns the dotted namespace of a qualified name, or '' for top-level names."""
    if '.' not in qualified_name:
        return ''
    return qualified_name.rsplit('.', 1)[0]


def pascal(string: str) -> str:
    """
    Convert a string to PascalCase from snake_case, camelCase, or PascalCase.
    Underscores at the beginning of the string are preserved in the output, but
    underscores in the middle of the string are removed.

    Args:
        string (str): The string to convert.

    Returns:
        str: The string in PascalCase.
    """
    if not string:
        return string
    startswith_under = string[0] == '_'
    if '_' in string:
        words = re.split(r'_', string)
    elif string[0].isupper():
        words = re.findall(r'[A-Z][a-z0-9]*', string)
    else:
        words = re.findall(r'[a-z0-9]+|[A-Z][a-z0-9]*', string)
    result = ''.join(word[:1].upper() + word[1:] for word in words)
    if startswith_under:
        result = '_' + result
    return result


def is_ts_identifier(name: str) -> bool:
    """Check if name can be used unquoted as a TypeScript identifier or property key."""
    return bool(TS_IDENTIFIER.match(name))


def quote_ts_string(value: str, quote: str = '"') -> str:
    """
    Quote a string as a TypeScript string literal.

    Args:
        value (str): The raw string value.
        quote (str): The quote character to use, either ' or ".

    Returns:
        str: The escaped literal including its surrounding quotes.
    """
    escaped = value.replace('\\', '\\\\').replace(quote, '\\' + quote)
    escaped = escaped.replace('\n', '\\n').replace('\r', '\\r')
    return f'{quote}{escaped}{quote}'


def parse_mapping_args(mappings: Optional[Union[Dict[str, str], Iterable[str]]]) -> Dict[str, str]:
    """
    Parse mapping arguments of the form 'qualified.Name=replacement'.

    Dictionaries are passed through unchanged.

    Args:
        mappings: A dictionary, an iterable of 'key=value' strings, or None.

    Returns:
        Dict[str, str]: The parsed mappings.
    """
    if not mappings:
        return {}
    if isinstance(mappings, dict):
        return dict(mappings)
    result: Dict[str, str] = {}
    for mapping in mappings:
        if '=' not in mapping:
            raise ValueError(f"Invalid mapping '{mapping}', expected the form Name=replacement")
        key, value = mapping.split('=', 1)
        result[key.strip()] = value.strip()
    return result


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Block tags do not leave blank lines behind, and the trailing newline of
    the template file is dropped, so declarations can be joined freely.

    Args:
        file_path (str): The path to the template, relative to the package directory.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader, trim_blocks=True, lstrip_blocks=True)

    template = template_env.get_template(file_path)
    return template.render(**kvargs)


def write_file(file_path: str, content: str):
    """Write content to a file, creating parent directories as needed."""
    directory_path = os.path.dirname(file_path)
    if directory_path and not os.path.exists(directory_path):
        os.makedirs(directory_path, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as file:
        file.write(content)
