import re


def camel_case(string: str) -> str:
    words = string.split('_')
    return ''.join([words[0].casefold()] + [word.capitalize() for word in words[1:]])


def unescape_octal(string: str) -> str:
    """Decode the `\\040` style escapes used by fstab and the mount table"""
    return re.sub(r'\\([0-7]{3})', lambda m: chr(int(m.group(1), 8)), string)
